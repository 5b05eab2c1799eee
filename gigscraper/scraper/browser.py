"""Browser automation using Playwright."""
import base64
import logging
from typing import Optional
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeout,
)
from gigscraper.core.config import Settings, settings
from gigscraper.core.errors import RenderError
from gigscraper.core.schemas import ScrapedContent
from gigscraper.scraper.shaper import shape_content

logger = logging.getLogger(__name__)

SCROLL_HEIGHT_JS = "() => document.body ? document.body.scrollHeight : 0"
SCROLL_TO_JS = "(y) => window.scrollTo(0, y)"


class BrowserManager:
    """Owns one browser and one isolated context for a single URL.

    Everything opened in __aenter__ is closed in __aexit__, whatever happened
    in between.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or settings
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None

    async def __aenter__(self):
        """Start Playwright, the browser and a fresh context."""
        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=self.config.headless,
                args=["--no-sandbox", "--disable-setuid-sandbox"],
            )
            self.context = await self.browser.new_context(
                user_agent=self.config.user_agent,
                viewport={
                    "width": self.config.viewport_width,
                    "height": self.config.viewport_height,
                },
            )
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Release context, browser and driver. Safe to call more than once."""
        try:
            if self.context:
                await self.context.close()
        except PlaywrightError as e:
            logger.warning(f"Error closing browser context: {e}")
        finally:
            self.context = None
            try:
                if self.browser:
                    await self.browser.close()
            except PlaywrightError as e:
                logger.warning(f"Error closing browser: {e}")
            finally:
                self.browser = None
                if self.playwright:
                    await self.playwright.stop()
                self.playwright = None

    async def capture(self, url: str, include_screenshot: bool = True) -> ScrapedContent:
        """
        Load a page and capture its shaped content.

        Args:
            url: The URL to render
            include_screenshot: Whether to capture a full-page screenshot

        Returns:
            ScrapedContent with shaped text and optional base64 screenshot
        """
        if not self.context:
            raise RuntimeError("Browser not initialized. Use async context manager.")

        page = await self.context.new_page()
        try:
            await page.goto(url, wait_until="networkidle", timeout=self.config.browser_timeout)

            # Late client-side rendering
            await page.wait_for_timeout(self.config.settle_delay)

            if self.config.scroll_enabled:
                await self._scroll_page(page)

            final_url = page.url or url
            html = await page.content()
            text = shape_content(html, final_url)

            screenshot_b64 = None
            if include_screenshot and self.config.screenshot_enabled:
                screenshot_b64 = await self._screenshot(page, url)

            return ScrapedContent(url=final_url, text=text, screenshot=screenshot_b64)
        finally:
            await page.close()

    async def _scroll_page(self, page: Page):
        """Scroll down in fixed steps until the page stops growing, then back to top."""
        last_height = await page.evaluate(SCROLL_HEIGHT_JS)
        position = 0
        for _ in range(self.config.max_scroll_steps):
            position += self.config.scroll_step
            await page.evaluate(SCROLL_TO_JS, position)
            await page.wait_for_timeout(self.config.scroll_pause)
            height = await page.evaluate(SCROLL_HEIGHT_JS)
            if position >= height and height <= last_height:
                break
            last_height = height

        await page.evaluate(SCROLL_TO_JS, 0)
        await page.wait_for_timeout(self.config.scroll_top_pause)

    async def _screenshot(self, page: Page, url: str) -> Optional[str]:
        try:
            screenshot_bytes = await page.screenshot(
                full_page=True,
                type="jpeg",
                quality=self.config.screenshot_quality,
            )
        except PlaywrightError as e:
            logger.warning(f"Screenshot failed for {url}, continuing text-only: {e}")
            return None
        return base64.b64encode(screenshot_bytes).decode("utf-8")


class Renderer:
    """Renders URLs to ScrapedContent, one isolated browser per URL."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or settings

    async def render(self, url: str, include_screenshot: bool = True) -> ScrapedContent:
        """Render a URL, raising RenderError on timeout, network or launch failure."""
        try:
            async with BrowserManager(self.config) as browser:
                content = await browser.capture(url, include_screenshot=include_screenshot)
        except PlaywrightTimeout as e:
            raise RenderError(url, f"Timeout loading page: {e}") from e
        except PlaywrightError as e:
            raise RenderError(url, f"Error rendering page: {e}") from e

        logger.info(f"Rendered {url}: {len(content.text)} chars, screenshot={content.screenshot is not None}")
        return content
