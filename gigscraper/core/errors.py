"""Exception types for the scraping pipeline.

Only ValidationError and FatalError ever reach the HTTP layer. RenderError is
recovered per URL by the orchestrator, ExtractionError inside the extractor.
"""


class ScraperError(Exception):
    """Base class for pipeline errors."""


class ValidationError(ScraperError):
    """The request is structurally invalid (no URLs, no API key)."""


class RenderError(ScraperError):
    """A single URL could not be rendered."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to render {url}: {reason}")


class ExtractionError(ScraperError):
    """The model call or its response failed for a single URL."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Extraction failed for {url}: {reason}")


class FatalError(ScraperError):
    """Batch-level failure, e.g. the extraction credential was rejected."""
