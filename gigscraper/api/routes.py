"""FastAPI route definitions."""
import asyncio
import logging
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from gigscraper.core.config import settings
from gigscraper.core.errors import ValidationError
from gigscraper.core.schemas import ScrapeRequest, ScrapeResponse, ErrorResponse
from gigscraper.scraper.orchestrator import ScrapingOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/scrape",
    response_model=ScrapeResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def scrape_events(request: ScrapeRequest):
    """
    Scrape upcoming events from a list of venue URLs.

    This endpoint:
    1. Renders each page with a headless browser, one URL at a time
    2. Shapes the page into event-focused text plus a screenshot
    3. Uses an LLM to extract structured events
    4. Returns all events sorted by date

    A URL that fails contributes no events; the rest are still returned.

    Args:
        request: ScrapeRequest with urls and apiKey

    Returns:
        ScrapeResponse with events, or an ErrorResponse
    """
    orchestrator = ScrapingOrchestrator()

    try:
        events = await asyncio.wait_for(
            orchestrator.run(request),
            timeout=settings.request_timeout
        )
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except asyncio.TimeoutError:
        logger.error(f"Scrape of {len(request.urls)} URLs exceeded {settings.request_timeout}s")
        return JSONResponse(
            status_code=504,
            content={"error": f"Scraping exceeded the {settings.request_timeout:g}s time limit"}
        )
    except Exception as e:
        logger.exception("Error in scrape API")
        return JSONResponse(status_code=500, content={"error": str(e) or "An error occurred"})

    return ScrapeResponse(events=events)


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns:
        Simple status message
    """
    return {
        "status": "healthy",
        "service": "gigscraper",
        "version": "0.1.0"
    }
