"""Next.js route discovery from the app/ and pages/ directories."""

from __future__ import annotations

import json
import re
from pathlib import Path

import logfire

from appnav.adapters.routes import normalize_route_path, unique_sorted_routes

PAGE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")
APP_DIRS = ("app", "src/app")
PAGES_DIRS = ("pages", "src/pages")
# Pages-router files that do not render a route
_SPECIAL_PAGES = re.compile(r"^_(app|document|error)$")


def _app_router_routes(app_dir: Path) -> list[str]:
    routes = []
    for file in app_dir.rglob("page.*"):
        if file.suffix not in PAGE_EXTENSIONS:
            continue
        relative = file.parent.relative_to(app_dir).as_posix()
        routes.append(normalize_route_path("" if relative == "." else relative))
    return routes


def _pages_router_routes(pages_dir: Path) -> list[str]:
    routes = []
    for file in pages_dir.rglob("*"):
        if not file.is_file() or file.suffix not in PAGE_EXTENSIONS:
            continue
        relative = file.relative_to(pages_dir).with_suffix("").as_posix()
        if relative.startswith("api/") or _SPECIAL_PAGES.match(relative):
            continue
        if relative == "index":
            relative = ""
        elif relative.endswith("/index"):
            relative = relative.removesuffix("/index")
        routes.append(normalize_route_path(relative))
    return routes


def find_nextjs_routes(project_root: Path) -> list[str]:
    """Derive routes from both the App Router and the Pages Router layouts.

    Raises OSError if the tree cannot be read.
    """
    routes: list[str] = []
    for name in APP_DIRS:
        app_dir = project_root / name
        if app_dir.is_dir():
            routes.extend(_app_router_routes(app_dir))
    for name in PAGES_DIRS:
        pages_dir = project_root / name
        if pages_dir.is_dir():
            routes.extend(_pages_router_routes(pages_dir))

    routes = unique_sorted_routes(routes)
    logfire.info("Found Next.js routes from file structure", count=len(routes))
    return routes


def detect_nextjs_dev_port(project_root: Path, default: int = 3000) -> int:
    """Read a custom dev port from next.config.js or the package.json dev script."""
    config_path = project_root / "next.config.js"
    if config_path.is_file():
        match = re.search(r"port:\s*(\d+)", config_path.read_text(encoding="utf-8"))
        if match:
            return int(match.group(1))

    package_path = project_root / "package.json"
    try:
        package = json.loads(package_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return default

    dev_script = package.get("scripts", {}).get("dev", "")
    match = re.search(r"-p\s+(\d+)|--port\s+(\d+)", dev_script)
    if match:
        return int(match.group(1) or match.group(2))
    return default
