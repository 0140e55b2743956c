"""Registry mapping framework identifiers to route providers."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import logfire

from appnav.adapters.base import ProviderKind, RouteProvider
from appnav.adapters.nextjs import detect_nextjs_dev_port, find_nextjs_routes
from appnav.adapters.sveltekit import detect_sveltekit_dev_port, find_sveltekit_routes
from appnav.crawler.models import FrameworkType


def _sveltekit(project_root: Path) -> RouteProvider:
    return RouteProvider(
        framework=FrameworkType.SVELTEKIT,
        kind=ProviderKind.FILE_BASED,
        project_root=project_root,
        route_finder=find_sveltekit_routes,
        component_patterns=["src/**/*.svelte"],
        dev_port=5173,
        port_finder=detect_sveltekit_dev_port,
    )


def _nextjs(project_root: Path) -> RouteProvider:
    return RouteProvider(
        framework=FrameworkType.NEXTJS,
        kind=ProviderKind.FILE_BASED,
        project_root=project_root,
        route_finder=find_nextjs_routes,
        component_patterns=[
            "components/**/*.{js,jsx,ts,tsx}",
            "src/components/**/*.{js,jsx,ts,tsx}",
            "app/**/*.{js,jsx,ts,tsx}",
            "src/app/**/*.{js,jsx,ts,tsx}",
            "pages/**/*.{js,jsx,ts,tsx}",
            "src/pages/**/*.{js,jsx,ts,tsx}",
        ],
        dev_port=3000,
        port_finder=detect_nextjs_dev_port,
    )


def _react(project_root: Path) -> RouteProvider:
    return RouteProvider(
        framework=FrameworkType.REACT,
        kind=ProviderKind.LINK_CRAWL,
        project_root=project_root,
        component_patterns=[
            "src/**/*.{js,jsx,ts,tsx}",
            "components/**/*.{js,jsx,ts,tsx}",
            "pages/**/*.{js,jsx,ts,tsx}",
        ],
        dev_command="npm start",
        dev_port=3000,
    )


def _vue(project_root: Path) -> RouteProvider:
    return RouteProvider(
        framework=FrameworkType.VUE,
        kind=ProviderKind.LINK_CRAWL,
        project_root=project_root,
        component_patterns=[
            "src/**/*.vue",
            "components/**/*.vue",
            "pages/**/*.vue",
            "layouts/**/*.vue",
        ],
        dev_command="npm run serve",
        dev_port=8080,
    )


def _generic(
    project_root: Path, framework: FrameworkType = FrameworkType.GENERIC
) -> RouteProvider:
    return RouteProvider(
        framework=framework,
        kind=ProviderKind.LINK_CRAWL,
        project_root=project_root,
    )


PROVIDERS: dict[FrameworkType, Callable[[Path], RouteProvider]] = {
    FrameworkType.SVELTEKIT: _sveltekit,
    FrameworkType.NEXTJS: _nextjs,
    FrameworkType.REACT: _react,
    FrameworkType.VUE: _vue,
}


def get_route_provider(
    framework: FrameworkType | str | None, project_root: Path | None = None
) -> RouteProvider:
    """Select the provider for a framework.

    Unknown or unsupported identifiers get the generic link-crawling provider.
    """
    project_root = project_root or Path.cwd()

    try:
        framework_type = FrameworkType(framework) if framework else FrameworkType.GENERIC
    except ValueError:
        logfire.warn("Unknown framework, using generic provider", framework=framework)
        framework_type = FrameworkType.GENERIC

    factory = PROVIDERS.get(framework_type)
    if factory is None:
        provider = _generic(project_root, framework_type)
    else:
        provider = factory(project_root)
    logfire.info(
        "Selected route provider",
        framework=provider.framework.value,
        kind=provider.kind.value,
    )
    return provider


def custom_provider(
    project_root: Path,
    route_finder: Callable[[Path], list[str]],
    framework: FrameworkType = FrameworkType.GENERIC,
    **overrides: object,
) -> RouteProvider:
    """Build a provider around a caller-supplied route finder.

    Keyword overrides set dev_command, dev_port, build_command or
    component_patterns.
    """
    return RouteProvider(
        framework=framework,
        kind=ProviderKind.CUSTOM,
        project_root=project_root,
        route_finder=route_finder,
        **overrides,  # type: ignore[arg-type]
    )
