"""SvelteKit route discovery from src/routes."""

from __future__ import annotations

import re
from pathlib import Path

import logfire

from appnav.adapters.routes import normalize_route_path, unique_sorted_routes

ROUTES_DIR = "src/routes"
CONFIG_FILES = ("vite.config.ts", "vite.config.js", "svelte.config.js")


def find_sveltekit_routes(project_root: Path) -> list[str]:
    """Derive routes from +page.svelte files under src/routes.

    Raises OSError if the tree cannot be read.
    """
    routes_dir = project_root / ROUTES_DIR
    routes: list[str] = []
    if routes_dir.is_dir():
        for file in routes_dir.rglob("+page.svelte"):
            relative = file.parent.relative_to(routes_dir).as_posix()
            routes.append(normalize_route_path("" if relative == "." else relative))

    routes = unique_sorted_routes(routes)
    logfire.info("Found SvelteKit routes from file structure", count=len(routes))
    return routes


def detect_sveltekit_dev_port(project_root: Path, default: int = 5173) -> int:
    """Read a custom dev server port from the Vite or Svelte config."""
    for name in CONFIG_FILES:
        config_path = project_root / name
        if not config_path.is_file():
            continue
        match = re.search(r"port:\s*(\d+)", config_path.read_text(encoding="utf-8"))
        if match:
            return int(match.group(1))
    return default
