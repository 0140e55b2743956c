"""Route helpers shared by every route provider."""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlparse

import logfire
from playwright.async_api import Page

DEFAULT_NAVIGATION_TIMEOUT_MS = 30000
# Time given to client-side rendering after the network goes idle
DEFAULT_SETTLE_MS = 1000

_CATCH_ALL = re.compile(r"^\[{1,2}\.\.\.([^\]]+)\]{1,2}$")
_DYNAMIC = re.compile(r"^\[([^\]]+)\]$")
_GROUP = re.compile(r"^\([^)]*\)$")


def normalize_route_path(path: str) -> str:
    """Rewrite a file-system style route into the :param / *rest convention.

    Examples:
        blog/[slug] → /blog/:slug
        docs/[...path] → /docs/*path
        shop/[[...filters]] → /shop/*filters
        (marketing)/pricing → /pricing
    """
    segments: list[str] = []
    for segment in path.strip("/").split("/"):
        if not segment or _GROUP.match(segment):
            continue
        catch_all = _CATCH_ALL.match(segment)
        if catch_all:
            segments.append(f"*{catch_all.group(1)}")
            continue
        dynamic = _DYNAMIC.match(segment)
        if dynamic:
            segments.append(f":{dynamic.group(1)}")
            continue
        segments.append(segment)
    return "/" + "/".join(segments)


def unique_sorted_routes(routes: list[str]) -> list[str]:
    """Deduplicate and sort, always including the root route."""
    return sorted({"/", *routes})


_DEFAULT_PORTS = {"http": 80, "https": 443}


def origin(url: str) -> tuple[str, str, int | None]:
    """(scheme, host, port) with the host lower-cased and default ports filled in."""
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    return scheme, (parsed.hostname or ""), parsed.port or _DEFAULT_PORTS.get(scheme)


def same_origin_paths(hrefs: list[str], base_url: str) -> list[str]:
    """Resolve hrefs against base_url and keep the paths of same-origin targets."""
    base_origin = origin(base_url)
    paths: list[str] = []
    for href in hrefs:
        if not href:
            continue
        target = urljoin(base_url, href)
        try:
            if origin(target) != base_origin:
                continue
        except ValueError:
            # Malformed port
            continue
        parsed = urlparse(target)
        paths.append(parsed.path or "/")
    return paths


async def discover_routes_from_links(page: Page, base_url: str) -> list[str]:
    """Load base_url and collect same-origin anchor targets as routes.

    Any driver failure degrades to ["/"].
    """
    logfire.info("Discovering routes from page links", base_url=base_url)

    try:
        await page.goto(base_url, wait_until="networkidle")
        hrefs = await page.evaluate("""
            () => Array.from(document.querySelectorAll('a[href]'))
                .map(a => a.getAttribute('href'))
                .filter(Boolean)
        """)
    except Exception as e:
        logfire.error("Error discovering routes from links", base_url=base_url, error=str(e))
        return ["/"]

    routes = unique_sorted_routes(same_origin_paths(hrefs or [], base_url))
    logfire.info("Discovered routes from links", count=len(routes), routes=routes)
    return routes


async def navigate_to_route(
    page: Page,
    route: str,
    base_url: str,
    timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
    settle_ms: int = DEFAULT_SETTLE_MS,
) -> None:
    """Navigate to a route and wait for the network to go idle.

    Raises playwright's TimeoutError if the page does not settle in time.
    """
    url = urljoin(base_url, route)
    logfire.info("Navigating to route", url=url)

    await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
    if settle_ms:
        await page.wait_for_timeout(settle_ms)
