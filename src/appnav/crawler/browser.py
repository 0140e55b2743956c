"""Browser session for a navigator run: one Chromium process, one shared context."""

from __future__ import annotations

import logfire
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from appnav.core.config import NavigatorConfig


class BrowserManager:
    """Owns the Playwright driver, browser and context for a single run.

    Every page handed out shares the context, so parallel captures see the
    same viewport and navigation timeout.
    """

    def __init__(self, config: NavigatorConfig) -> None:
        self._config = config
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._pages_opened = 0

    def context_options(self) -> dict:
        """Keyword arguments for browser.new_context()."""
        viewport = self._config.viewport
        return {"viewport": {"width": viewport.width, "height": viewport.height}}

    @property
    def context(self) -> BrowserContext | None:
        return self._context

    @property
    def pages_opened(self) -> int:
        return self._pages_opened

    async def start(self) -> BrowserContext:
        logfire.info("Launching Chromium", headless=self._config.headless)

        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self._config.headless
            )
            self._context = await self._browser.new_context(**self.context_options())
            self._context.set_default_navigation_timeout(self._config.timeout)
        except BaseException:
            # __aexit__ does not run when __aenter__ fails
            await self.close()
            raise

        logfire.info(
            "Browser context ready",
            viewport=f"{self._config.viewport.width}x{self._config.viewport.height}",
            navigation_timeout_ms=self._config.timeout,
        )
        return self._context

    async def new_page(self) -> Page:
        """Open a page in the shared context."""
        if self._context is None:
            raise RuntimeError("Browser context not initialized. Call start() first.")
        page = await self._context.new_page()
        self._pages_opened += 1
        return page

    async def close(self) -> None:
        """Tear down context, browser and driver, in that order."""
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        logfire.info("Browser session closed", pages_opened=self._pages_opened)

    async def __aenter__(self) -> BrowserManager:
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
