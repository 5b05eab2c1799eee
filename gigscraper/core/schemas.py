"""Data schemas for events and API requests/responses."""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


class Event(BaseModel):
    """A single upcoming event, as returned to callers.

    Serialized with camelCase keys (``eventName``). Instances are frozen once
    normalization has built them.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    venue: str
    event_name: str = Field(default="Unknown Event", alias="eventName")
    date: str = "TBA"  # Free-form, not guaranteed parseable
    time: str = "TBA"
    price: Optional[str] = None
    description: Optional[str] = None
    url: str


class ScrapeRequest(BaseModel):
    """Request to scrape events from a list of venue URLs.

    Both fields are optional at the schema level so that the orchestrator can
    reject empty input with a ValidationError instead of a 422.
    """
    model_config = ConfigDict(populate_by_name=True)

    urls: List[str] = Field(default_factory=list)
    api_key: Optional[str] = Field(default=None, alias="apiKey")


class ScrapedContent(BaseModel):
    """Shaped page content for one URL. Lives only for one extraction call."""
    url: str
    text: str
    screenshot: Optional[str] = Field(
        default=None,
        description="Base64-encoded JPEG of the full page"
    )


class UrlResult(BaseModel):
    """Outcome of the pipeline for a single URL."""
    url: str
    events: List[Event] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ScrapeResponse(BaseModel):
    """Successful response: all events across the requested URLs."""
    events: List[Event] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Failure response."""
    error: str
