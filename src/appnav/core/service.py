"""Wires a browser session and route provider to an AppNavigator."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import logfire

from appnav.adapters.registry import get_route_provider
from appnav.analyzer.detector import detect_framework
from appnav.core.config import NavigatorConfig
from appnav.crawler.browser import BrowserManager
from appnav.crawler.models import AppMap
from appnav.crawler.navigator import AppNavigator


@asynccontextmanager
async def create_navigator(
    config: NavigatorConfig, project_root: Path | None = None
) -> AsyncIterator[AppNavigator]:
    """Open a browser session and yield a ready navigator.

    The browser is closed on every exit path.
    """
    project_root = project_root or Path.cwd()
    framework = config.framework or detect_framework(project_root).value
    provider = get_route_provider(framework, project_root)

    async with BrowserManager(config) as browser:
        navigator = AppNavigator(browser, provider, config, framework=framework)
        await navigator.initialize()
        yield navigator


async def generate_app_map(config: NavigatorConfig, project_root: Path | None = None) -> AppMap:
    """Run a full capture pass and return the persisted app map."""
    logfire.info("Starting navigator run", base_url=config.base_url)
    async with create_navigator(config, project_root) as navigator:
        return await navigator.generate_app_map()
