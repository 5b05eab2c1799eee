"""Request validation and normalization of untrusted model output.

The extraction model returns loosely-shaped JSON with aliased field names.
Everything in this module treats that payload as untrusted: it is mapped into
Event here and nowhere else.
"""
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from gigscraper.core.errors import ValidationError
from gigscraper.core.schemas import Event, ScrapeRequest

logger = logging.getLogger(__name__)

UNKNOWN_EVENT = "Unknown Event"
TBA = "TBA"

# Keys tried, in order, for the event name
EVENT_NAME_KEYS = ("eventName", "name", "title")


def validate_request(request: ScrapeRequest) -> None:
    """Reject structurally invalid requests before any work starts."""
    if not request.urls:
        raise ValidationError("No URLs provided")
    if not request.api_key or not request.api_key.strip():
        raise ValidationError("OpenAI API key is required")


def venue_from_url(url: str) -> str:
    """Derive a venue name from a URL: its hostname without a leading www."""
    hostname = urlparse(url).hostname or url
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname


def _as_text(value: Any) -> Optional[str]:
    """Coerce a payload value to a non-empty string, or None."""
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def normalize_event(raw: Dict[str, Any], source_url: str) -> Event:
    """Map one untrusted event object to an Event, applying defaults.

    Rules:
    - venue: source hostname (minus "www.") when absent
    - eventName: falls back through name/title, then "Unknown Event"
    - date/time: "TBA" when absent
    - url: the source URL when the model gave no event-specific link
    - price/description: left absent when omitted
    """
    event_name = next(
        (name for name in (_as_text(raw.get(key)) for key in EVENT_NAME_KEYS) if name),
        UNKNOWN_EVENT,
    )
    return Event(
        venue=_as_text(raw.get("venue")) or venue_from_url(source_url),
        event_name=event_name,
        date=_as_text(raw.get("date")) or TBA,
        time=_as_text(raw.get("time")) or TBA,
        price=_as_text(raw.get("price")),
        description=_as_text(raw.get("description")),
        url=_as_text(raw.get("url")) or source_url,
    )


def normalize_events_payload(payload: Any, source_url: str) -> List[Event]:
    """Normalize the model's parsed JSON object into a list of Events.

    Events are read from the "events" key, falling back to "data". Anything
    else (missing keys, non-list values, non-object payloads) yields no events.
    """
    if not isinstance(payload, dict):
        logger.warning(f"Expected a JSON object from {source_url}, got {type(payload).__name__}")
        return []

    items = payload.get("events") or payload.get("data") or []
    if not isinstance(items, list):
        logger.warning(f"Events payload for {source_url} is not a list, ignoring")
        return []

    events = []
    for item in items:
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object event entry from {source_url}: {item!r:.100}")
            continue
        events.append(normalize_event(item, source_url))
    return events
