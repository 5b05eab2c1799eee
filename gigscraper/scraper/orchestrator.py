"""Orchestrates the complete scraping pipeline."""
import logging
from functools import cmp_to_key
from typing import Callable, List, Optional, Tuple
from datetime import datetime

from gigscraper.scraper.browser import Renderer
from gigscraper.llm.base import LLMExtractor
from gigscraper.llm.factory import create_extractor
from gigscraper.core.errors import FatalError, RenderError
from gigscraper.core.schemas import Event, ScrapeRequest, UrlResult
from gigscraper.core.time_utils import parse_event_date
from gigscraper.core.validation import validate_request

logger = logging.getLogger(__name__)

ExtractorFactory = Callable[[str], LLMExtractor]


def _compare_dates(a: Tuple[Event, Optional[datetime]], b: Tuple[Event, Optional[datetime]]) -> int:
    date_a, date_b = a[1], b[1]
    if date_a is None or date_b is None:
        return 0
    return (date_a > date_b) - (date_a < date_b)


def sort_events_by_date(events: List[Event]) -> List[Event]:
    """Sort events by their parsed date.

    A pair where either date can't be parsed compares as equal, so the sort
    never fails and, being stable, keeps such events in insertion order.
    """
    keyed = [(event, parse_event_date(event.date)) for event in events]
    keyed.sort(key=cmp_to_key(_compare_dates))
    return [event for event, _ in keyed]


class ScrapingOrchestrator:
    """Runs render -> shape -> extract for each URL, one URL at a time."""

    def __init__(
        self,
        renderer: Optional[Renderer] = None,
        extractor_factory: Optional[ExtractorFactory] = None,
    ):
        """Initialize with optional renderer and extractor factory (for tests)."""
        self.renderer = renderer or Renderer()
        self.extractor_factory = extractor_factory or create_extractor

    async def scrape_url(self, url: str, extractor: LLMExtractor) -> UrlResult:
        """
        Execute the pipeline for a single URL.

        Steps:
        1. Render the page and shape its content
        2. Send content (and screenshot) to the LLM
        3. Return the normalized events

        Failures are reported in the UrlResult rather than raised, except
        FatalError which aborts the batch.
        """
        logger.info(f"Scraping {url}...")
        try:
            content = await self.renderer.render(url)
            events = await extractor.extract_events(
                url=url,
                content=content.text,
                screenshot_b64=content.screenshot
            )
        except FatalError:
            raise
        except RenderError as e:
            logger.error(str(e))
            return UrlResult(url=url, error=str(e))
        except Exception as e:
            logger.exception(f"Error processing {url}")
            return UrlResult(url=url, error=f"Unexpected error: {e}")

        return UrlResult(url=url, events=events)

    async def scrape_all(self, request: ScrapeRequest) -> List[UrlResult]:
        """Validate the request, then scrape every URL sequentially."""
        validate_request(request)

        extractor = self.extractor_factory(request.api_key)
        results = []
        for url in request.urls:
            results.append(await self.scrape_url(url, extractor))

        failed = [result.url for result in results if not result.ok]
        if failed:
            logger.warning(f"{len(failed)}/{len(results)} URLs failed: {', '.join(failed)}")
        return results

    async def run(self, request: ScrapeRequest) -> List[Event]:
        """Scrape all URLs in the request and return their events sorted by date."""
        results = await self.scrape_all(request)
        events = [event for result in results for event in result.events]
        logger.info(f"Found {len(events)} events across {len(results)} URLs")
        return sort_events_by_date(events)
