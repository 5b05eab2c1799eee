"""LLM extractor factory: creates an extractor for a request's API key."""
import logging
from typing import Optional

from gigscraper.llm.base import LLMExtractor
from gigscraper.core.config import Settings, settings

logger = logging.getLogger(__name__)


def create_extractor(api_key: str, config: Optional[Settings] = None) -> LLMExtractor:
    """Create an LLM extractor using the caller's API key.

    Supported providers:
      - "openai": OpenAI chat completions (default)
      - "openai_compatible": Any OpenAI-compatible endpoint (vLLM, OpenRouter, etc.)
    """
    config = config or settings
    provider = config.llm_provider
    logger.debug(f"Creating {provider} extractor for model {config.llm_model}")

    if provider == "openai":
        from gigscraper.llm.openai_compat import OpenAICompatExtractor
        return OpenAICompatExtractor(
            api_key=api_key,
            model=config.llm_model,
            temperature=config.llm_temperature,
            timezone=config.timezone,
        )

    if provider == "openai_compatible":
        from gigscraper.llm.openai_compat import OpenAICompatExtractor
        if not config.llm_base_url:
            raise ValueError("openai_compatible provider requires llm_base_url")
        return OpenAICompatExtractor(
            api_key=api_key,
            model=config.llm_model,
            endpoint_url=config.llm_base_url,
            temperature=config.llm_temperature,
            timezone=config.timezone,
        )

    raise ValueError(f"Unknown LLM provider: {provider!r}. Supported: openai, openai_compatible")
