"""Navigate, screenshot, inventory elements and measure one route."""

from __future__ import annotations

import time

import logfire
from playwright.async_api import Page

from appnav.adapters.base import RouteProvider
from appnav.core.config import NavigatorConfig
from appnav.crawler.elements import ElementCollector
from appnav.crawler.metrics import collect_performance_metrics, evaluate_thresholds
from appnav.crawler.models import NavigationResult
from appnav.crawler.screenshot import ScreenshotManager


class RouteCapturer:
    """Captures a single route in a single attempt."""

    def __init__(
        self,
        provider: RouteProvider,
        config: NavigatorConfig,
        screenshot_manager: ScreenshotManager,
        element_collector: ElementCollector | None = None,
    ) -> None:
        self._provider = provider
        self._config = config
        self._screenshots = screenshot_manager
        self._elements = element_collector or ElementCollector(config.custom_selectors)

    async def capture(self, page: Page, route: str) -> NavigationResult:
        """Capture one route.

        Navigation and screenshot failures propagate; threshold violations are
        recorded on the result.
        """
        started_at = time.monotonic()
        logfire.info("Capturing route", route=route)

        await self._provider.navigate_to_route(
            page, route, self._config.base_url, timeout_ms=self._config.timeout
        )

        title = await page.title() or ""
        screenshot_path = await self._screenshots.capture_to_file(page, route)
        elements = await self._elements.collect(page)
        performance = await collect_performance_metrics(page, started_at)
        violations = evaluate_thresholds(performance, self._config.performance_thresholds)

        logfire.info(
            "Route captured",
            route=route,
            title=title,
            elements=len(elements),
            load_time_ms=performance.load_time,
            violations=len(violations),
        )

        return NavigationResult(
            url=route,
            title=title,
            screenshot=str(screenshot_path),
            elements=elements,
            performance=performance,
            errors=[v.message for v in violations],
            violations=violations,
            timestamp=int(time.time() * 1000),
        )
