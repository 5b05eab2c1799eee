"""Application configuration using pydantic-settings."""
from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


# Get the package directory path
PACKAGE_DIR = Path(__file__).parent.parent
ENV_FILE = PACKAGE_DIR / ".env"

DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The extraction API key is never part of the settings: callers pass it
    with every request.
    """

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    request_timeout: float = 60.0  # seconds, whole invocation

    # Browser
    headless: bool = True
    browser_timeout: int = 30000  # milliseconds
    settle_delay: int = 2000  # milliseconds after network idle
    user_agent: str = DESKTOP_USER_AGENT
    viewport_width: int = 1920
    viewport_height: int = 1080

    # Lazy-load scrolling
    scroll_enabled: bool = True
    scroll_step: int = 800  # pixels
    scroll_pause: int = 250  # milliseconds between steps
    max_scroll_steps: int = 50
    scroll_top_pause: int = 500  # milliseconds after returning to top

    # Screenshot
    screenshot_enabled: bool = True
    screenshot_quality: int = 80

    # LLM
    llm_provider: str = "openai"  # "openai" or "openai_compatible"
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.3
    llm_base_url: Optional[str] = None  # Required for openai_compatible
    timezone: str = "America/New_York"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance. Override in tests via lru_cache.cache_clear()."""
    return Settings()


settings = get_settings()
