"""Thin async Playwright adapter used by every crawler."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Callable

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from site_audit.config import NAVIGATION_TIMEOUT_MS, Settings
from site_audit.errors import CaptureError, NavigationError

logger = logging.getLogger(__name__)


class PlaywrightBrowser:
    """One shared page; callers must never have two operations in flight."""

    def __init__(self, page: Page, navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS):
        self.page = page
        self.navigation_timeout_ms = navigation_timeout_ms

    @property
    def current_url(self) -> str:
        return self.page.url

    async def navigate(self, url: str) -> None:
        """Load ``url`` and wait until the network has settled."""
        try:
            await self.page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout_ms)
        except PlaywrightError as e:
            raise NavigationError(f"Failed to load {url}: {e.message}") from e

    async def set_viewport_size(self, width: int, height: int) -> None:
        await self.page.set_viewport_size({"width": width, "height": height})

    async def wait(self, ms: int) -> None:
        await self.page.wait_for_timeout(ms)

    async def capture_full_page_image(
        self, path: str | Path, *, full_page: bool = True, animations: str = "disabled"
    ) -> None:
        try:
            await self.page.screenshot(path=str(path), full_page=full_page, animations=animations)
        except PlaywrightError as e:
            raise CaptureError(f"Screenshot failed: {e.message}") from e

    async def content(self) -> str:
        try:
            return await self.page.content()
        except PlaywrightError as e:
            raise CaptureError(f"Could not read page content: {e.message}") from e

    async def extract(self, script: str, arg: Any = None) -> Any:
        try:
            return await self.page.evaluate(script, arg)
        except PlaywrightError as e:
            raise CaptureError(f"Page script failed: {e.message}") from e

    async def inject_script(self, source: str) -> None:
        try:
            await self.page.add_script_tag(content=source)
        except PlaywrightError as e:
            raise CaptureError(f"Script injection failed: {e.message}") from e

    def on_dom_content_loaded(self, handler: Callable[..., None]) -> None:
        self.page.on("domcontentloaded", handler)

    def remove_dom_content_loaded(self, handler: Callable[..., None]) -> None:
        self.page.remove_listener("domcontentloaded", handler)


@asynccontextmanager
async def launch_browser(settings: Settings) -> AsyncIterator[PlaywrightBrowser]:
    """Launch headless Chromium and yield a browser wrapping a single page."""
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=settings.headless)
        logger.info("browser launched", extra={"headless": settings.headless})
        try:
            page = await browser.new_page()
            yield PlaywrightBrowser(page, navigation_timeout_ms=settings.navigation_timeout_ms)
        finally:
            await browser.close()
