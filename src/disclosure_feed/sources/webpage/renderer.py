"""Headless browser rendering for script-driven disclosure pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from playwright.async_api import Browser, Page, async_playwright

from ...logging_config import get_logger

logger = get_logger("renderer")


@dataclass
class RenderedPage:
    """HTML of a page after client-side scripts have run."""

    url: str
    html: str


class PageRenderer(Protocol):
    """Protocol for anything that can turn a URL into rendered HTML."""

    async def render(self, url: str) -> RenderedPage:
        """Load a page and return its rendered HTML."""
        ...


class PlaywrightPageRenderer:
    """Render pages in headless Chromium through Playwright."""

    def __init__(
        self,
        *,
        navigation_timeout_ms: int = 60000,
        settle_ms: int = 2500,
        user_agent: Optional[str] = None,
    ) -> None:
        self.navigation_timeout_ms = navigation_timeout_ms
        self.settle_ms = settle_ms
        self.user_agent = user_agent

    async def render(self, url: str) -> RenderedPage:
        async with async_playwright() as p:
            browser: Browser = await p.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-setuid-sandbox"],
            )
            try:
                page: Page = await browser.new_page(user_agent=self.user_agent)
                logger.info(f"Loading {url}")
                await page.goto(
                    url,
                    wait_until="domcontentloaded",
                    timeout=self.navigation_timeout_ms,
                )
                # The disclosure list is rendered after DOMContentLoaded
                await page.wait_for_timeout(self.settle_ms)
                html = await page.content()
                return RenderedPage(url=page.url or url, html=html)
            finally:
                await browser.close()
