"""Route provider — per-framework route discovery and navigation strategy."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

import logfire
from playwright.async_api import Page

from appnav.adapters.routes import (
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    DEFAULT_SETTLE_MS,
    discover_routes_from_links,
    navigate_to_route,
)
from appnav.analyzer.components import DEFAULT_COMPONENT_PATTERNS, inventory_components
from appnav.crawler.models import ComponentInfo, FrameworkType


class ProviderKind(StrEnum):
    """How a provider finds routes."""

    FILE_BASED = "file_based"
    LINK_CRAWL = "link_crawl"
    CUSTOM = "custom"


@dataclass
class RouteProvider:
    """Route strategy for one framework.

    File-based providers carry a route_finder that reads the project tree;
    link-crawl providers only load the base URL and follow its links.
    """

    framework: FrameworkType
    kind: ProviderKind
    project_root: Path
    route_finder: Callable[[Path], list[str]] | None = None
    component_patterns: list[str] = field(
        default_factory=lambda: list(DEFAULT_COMPONENT_PATTERNS)
    )
    dev_command: str = "npm run dev"
    dev_port: int = 3000
    build_command: str = "npm run build"
    port_finder: Callable[[Path, int], int] | None = None

    async def discover_routes(self, page: Page, base_url: str) -> list[str]:
        """Return routes from the project tree, or from page links as a fallback.

        The structural result is used only when it found more than the root.
        """
        logfire.info(
            "Discovering routes",
            framework=self.framework.value,
            kind=self.kind.value,
        )

        if self.route_finder is not None:
            try:
                routes = self.route_finder(self.project_root)
            except OSError as e:
                logfire.warn("Could not read routes from file system", error=str(e))
                routes = ["/"]

            if len(set(routes)) > 1:
                return sorted(set(routes))
            logfire.info("Falling back to link-based route discovery")

        return await discover_routes_from_links(page, base_url)

    async def navigate_to_route(
        self,
        page: Page,
        route: str,
        base_url: str,
        timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
        settle_ms: int = DEFAULT_SETTLE_MS,
    ) -> None:
        await navigate_to_route(page, route, base_url, timeout_ms, settle_ms)

    def analyze_components(self) -> list[ComponentInfo]:
        """Inventory the project's components. Never raises."""
        try:
            return inventory_components(self.project_root, self.component_patterns)
        except Exception as e:
            logfire.error("Error analyzing components", error=str(e))
            return []

    def get_dev_command(self) -> str:
        return self.dev_command

    def get_dev_port(self) -> int:
        """Dev server port, read from project config files where supported."""
        if self.port_finder is None:
            return self.dev_port
        try:
            return self.port_finder(self.project_root, self.dev_port)
        except (OSError, UnicodeDecodeError):
            return self.dev_port

    def get_build_command(self) -> str:
        return self.build_command
