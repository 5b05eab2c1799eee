"""Test fixtures for gigscraper tests."""
from typing import Dict, List, Optional

import pytest

from gigscraper.core.errors import RenderError
from gigscraper.core.schemas import Event, ScrapedContent
from gigscraper.llm.base import LLMExtractor


class FakeRenderer:
    """Renderer stand-in: returns canned content or raises per URL."""

    def __init__(self, pages: Dict[str, object]):
        self.pages = pages
        self.calls: List[str] = []

    async def render(self, url: str, include_screenshot: bool = True) -> ScrapedContent:
        self.calls.append(url)
        page = self.pages[url]
        if isinstance(page, Exception):
            raise page
        return page


class FakeExtractor(LLMExtractor):
    """Extractor stand-in: returns canned events per URL."""

    def __init__(self, events_by_url: Dict[str, object]):
        self.events_by_url = events_by_url
        self.calls: List[tuple] = []

    async def extract_events(self, url: str, content: str,
                             screenshot_b64: Optional[str] = None) -> List[Event]:
        self.calls.append((url, content, screenshot_b64))
        result = self.events_by_url.get(url, [])
        if isinstance(result, Exception):
            raise result
        return result


def make_event(name: str, date: str = "TBA", url: str = "https://venue.test/") -> Event:
    return Event(venue="venue.test", event_name=name, date=date, time="8:00 PM", url=url)


@pytest.fixture
def sample_event():
    """A fully-populated Event for testing."""
    return Event(
        venue="Blue Note",
        event_name="Band X",
        date="March 15, 2027",
        time="8:00 PM",
        price="$20",
        description="An evening of jazz",
        url="https://www.bluenote.net/newyork/band-x",
    )


@pytest.fixture
def timeout_error():
    return RenderError("https://slow.test/", "Timeout loading page: Timeout 30000ms exceeded")


@pytest.fixture
def venue_html():
    """A small venue page with scripts, styles, linked data and a calendar."""
    return """<!DOCTYPE html>
<html>
<head>
  <title>The Velvet Room</title>
  <style>.calendar { color: red; }</style>
  <script>var tracking = "SECRET_SCRIPT_TEXT";</script>
  <script type="application/ld+json">{"@type": "MusicEvent", "name": "Band X", "startDate": "2027-03-15"}</script>
</head>
<body>
  <nav><a href="/">Home</a> <a href="/about">About us</a></nav>
  <main>
    <h1>Welcome to The Velvet Room</h1>
    <div class="calendar-widget">
      <ul>
        <li>Band X - March 15 - $20 - Doors at 7pm, music at 8pm sharp</li>
        <li>The Quiet Ones - March 22 - $15 - Acoustic night</li>
      </ul>
    </div>
  </main>
  <noscript>Please enable JavaScript to view NOSCRIPT_TEXT</noscript>
</body>
</html>"""
