"""Prompt templates for LLM event extraction.

The system prompt is the extraction contract: the field set returned per
event and the inclusion policy. The user prompt carries the shaped page
content produced by gigscraper.scraper.shaper.
"""
from gigscraper.core.time_utils import DEFAULT_TIMEZONE, get_current_time


EVENT_FIELDS = """\
- venue: The name of the venue (derive from the URL or content if not explicitly stated)
- eventName: The name of the event, band, artist, or show
- date: The date in a readable format (e.g., "March 15, {current_year}" or "3/15/{current_year}")
- time: The time of the event (e.g., "8:00 PM" or "20:00")
- price: The ticket price if available (e.g., "$25" or "Free"), otherwise omit
- description: A brief description if available, otherwise omit
- url: The URL to the specific event page if mentioned, otherwise use the provided base URL"""


def build_system_prompt(timezone: str = DEFAULT_TIMEZONE) -> str:
    """Build the system instruction describing what to extract."""
    now = get_current_time(timezone)
    current_year = now.year
    fields = EVENT_FIELDS.format(current_year=current_year)

    return f"""You are an expert at extracting music event information from website content.
Extract all upcoming music events, concerts, shows, or performances from the provided content.

Today's date is: {now.strftime("%Y-%m-%d")}

For each event, extract:
{fields}

The content has a "STRUCTURED DATA" section (linked data embedded in the page, often authoritative)
and a "PAGE CONTENT" section (visible text). A screenshot of the page may also be attached; use it to
read calendars or listings that are only rendered visually.

Return a JSON object of the form {{"events": [...]}}. If no events are found, return {{"events": []}}.
Only include events on or after today ({now.strftime("%Y-%m-%d")}).
If the date year is not specified, assume it's the current year ({current_year}) or the next year
({current_year + 1}) based on context. Never assume a year in the past."""


def build_user_prompt(url: str, content: str) -> str:
    """Build the user message carrying the shaped page content."""
    return f"Extract all upcoming music events from this website content:\n\n{content}\n\nBase URL: {url}"
