"""Abstract base class for LLM extractors."""
from abc import ABC, abstractmethod
from typing import List, Optional
from gigscraper.core.schemas import Event


class LLMExtractor(ABC):
    """Abstract base class for LLM-based event extraction."""

    @abstractmethod
    async def extract_events(
        self,
        url: str,
        content: str,
        screenshot_b64: Optional[str] = None
    ) -> List[Event]:
        """
        Extract all events from shaped webpage content.

        Implementations never raise for a bad response or failed request:
        they log and return an empty list. Only FatalError may escape.

        Args:
            url: Source URL of the content
            content: Shaped webpage content
            screenshot_b64: Optional base64-encoded JPEG screenshot

        Returns:
            Normalized Event objects, possibly empty
        """
        pass
