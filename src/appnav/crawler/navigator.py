"""App navigator — discovers routes, captures each one, and builds the app map."""

from __future__ import annotations

import asyncio
import re
import time
from pathlib import Path

import logfire
from playwright.async_api import ConsoleMessage, Error, Page

from appnav.adapters.base import RouteProvider
from appnav.core.config import NavigatorConfig
from appnav.core.errors import CaptureError
from appnav.crawler.browser import BrowserManager
from appnav.crawler.elements import ElementCollector
from appnav.crawler.metrics import build_summary
from appnav.crawler.models import APP_MAP_VERSION, AppMap, CaptureOutcome, NavigationResult
from appnav.crawler.route_capture import RouteCapturer
from appnav.crawler.screenshot import ScreenshotManager
from appnav.report.writer import write_reports


class AppNavigator:
    """Runs one capture pass over a web application.

    Sequential mode captures routes in discovery order on a single page.
    Parallel mode gives every route its own page in the shared browser
    context and waits for all of them; one failed route never cancels the
    others.
    """

    def __init__(
        self,
        browser: BrowserManager,
        provider: RouteProvider,
        config: NavigatorConfig,
        framework: str | None = None,
    ) -> None:
        self._browser = browser
        self._provider = provider
        self._config = config
        self._framework = framework or provider.framework.value
        self._output_dir = Path(config.output_dir)
        self._page: Page | None = None

        self._include = [re.compile(p) for p in config.include_routes]
        self._exclude = [re.compile(p) for p in config.exclude_routes]

        self._capturer = RouteCapturer(
            provider=provider,
            config=config,
            screenshot_manager=ScreenshotManager(
                self.screenshot_dir, config.screenshot_options
            ),
            element_collector=ElementCollector(config.custom_selectors),
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def screenshot_dir(self) -> Path:
        return self._output_dir / "screenshots"

    async def initialize(self) -> None:
        """Create output directories and open the shared page."""
        self.screenshot_dir.mkdir(parents=True, exist_ok=True)
        self._page = await self._new_page()
        logfire.info(
            "Navigator initialized",
            base_url=self._config.base_url,
            framework=self._framework,
            parallel=self._config.parallel,
        )

    async def _new_page(self) -> Page:
        page = await self._browser.new_page()
        page.on("console", _log_console_error)
        page.on("pageerror", _log_page_error)
        return page

    async def _shared_page(self) -> Page:
        if self._page is None:
            await self.initialize()
        return self._page  # type: ignore[return-value]

    def filter_routes(self, routes: list[str]) -> list[str]:
        """Apply the allow-list, then the deny-list. Deny wins over allow."""
        filtered = routes
        if self._include:
            filtered = [r for r in filtered if any(p.search(r) for p in self._include)]
        if self._exclude:
            filtered = [r for r in filtered if not any(p.search(r) for p in self._exclude)]
        return filtered

    async def discover_routes(self) -> list[str]:
        """Ask the provider for routes and apply the include/exclude filters."""
        page = await self._shared_page()

        try:
            routes = await self._provider.discover_routes(page, self._config.base_url)
        except Exception as e:
            logfire.error("Error discovering routes", error=str(e))
            routes = ["/"]

        filtered = self.filter_routes(routes)
        logfire.info("Routes discovered", count=len(filtered), routes=filtered)
        return filtered

    async def capture_route(self, route: str, page: Page | None = None) -> NavigationResult:
        """Capture one route in a single attempt. Navigation failures propagate."""
        if page is None:
            page = await self._shared_page()
        return await self._capturer.capture(page, route)

    async def _capture_with_retries(self, route: str, page: Page) -> CaptureOutcome:
        attempts = self._config.retries + 1
        last_error: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                result = await self.capture_route(route, page)
                return CaptureOutcome(route=route, result=result, attempts=attempt)
            except Exception as e:
                last_error = e
                logfire.warn(
                    "Route capture attempt failed",
                    route=route,
                    attempt=attempt,
                    max_attempts=attempts,
                    error=str(e),
                )

        error = CaptureError(route, attempts, last_error)
        logfire.error("Failed to capture route", route=route, error=str(error))
        return CaptureOutcome(route=route, error=str(error), attempts=attempts)

    async def _capture_on_new_page(self, route: str) -> CaptureOutcome:
        try:
            page = await self._new_page()
        except Exception as e:
            logfire.error("Could not open page for route", route=route, error=str(e))
            return CaptureOutcome(route=route, error=str(CaptureError(route, 0, e)), attempts=0)

        try:
            return await self._capture_with_retries(route, page)
        finally:
            try:
                await page.close()
            except Exception as e:
                logfire.warn("Could not close page", route=route, error=str(e))

    async def capture_routes(self, routes: list[str]) -> list[CaptureOutcome]:
        """Capture every route and return one outcome per route."""
        if self._config.parallel:
            logfire.info("Processing routes in parallel", count=len(routes))
            return list(
                await asyncio.gather(*(self._capture_on_new_page(r) for r in routes))
            )

        logfire.info("Processing routes sequentially", count=len(routes))
        page = await self._shared_page()
        return [await self._capture_with_retries(route, page) for route in routes]

    async def generate_app_map(self) -> AppMap:
        """Discover, capture, summarize and persist the app map."""
        started_at = time.monotonic()
        logfire.info("Generating app map", base_url=self._config.base_url)

        routes = await self.discover_routes()
        outcomes = await self.capture_routes(routes)
        results = [o.result for o in outcomes if o.result is not None]

        components = self._provider.analyze_components()

        app_map = AppMap(
            routes=results,
            components=components,
            generated_at=int(time.time() * 1000),
            version=APP_MAP_VERSION,
            framework=self._framework,
            base_url=self._config.base_url,
            summary=build_summary(len(routes), results, self._config.performance_thresholds),
        )

        write_reports(app_map, self._output_dir)

        failed = [o.route for o in outcomes if not o.ok]
        logfire.info(
            "App map generated",
            total_routes=app_map.summary.total_routes,
            successful_captures=app_map.summary.successful_captures,
            failed_routes=failed,
            performance_score=app_map.summary.performance_score,
            duration_seconds=round(time.monotonic() - started_at, 1),
        )
        return app_map


def _log_console_error(message: ConsoleMessage) -> None:
    if message.type == "error":
        logfire.warn("Page console error", text=message.text)


def _log_page_error(error: Error) -> None:
    logfire.warn("Page exception", error=error.message)
