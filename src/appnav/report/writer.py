"""Persist the app map and render its derived views."""

from __future__ import annotations

import os
from datetime import UTC, datetime
from pathlib import Path

import logfire
from jinja2 import Environment, FileSystemLoader

from appnav.core.errors import PersistenceError
from appnav.crawler.models import AppMap, NavigationResult, QuickMap, QuickRoute

APP_MAP_FILE = "app-map.json"
QUICK_MAP_FILE = "quick-map.json"
REPORT_FILE = "README.md"

TEMPLATE_DIR = Path(__file__).parent / "templates"


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def _write_text(path: Path, content: str) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"Could not write {path}: {e}") from e
    return path


def save_app_map(app_map: AppMap, output_dir: Path) -> Path:
    """Write the full app map as pretty-printed camelCase JSON."""
    path = _write_text(
        output_dir / APP_MAP_FILE,
        app_map.model_dump_json(by_alias=True, exclude_none=True, indent=2),
    )
    logfire.info("App map saved", path=str(path), routes=len(app_map.routes))
    return path


def load_app_map(path: Path) -> AppMap:
    """Read an app map written by save_app_map."""
    return AppMap.model_validate_json(path.read_text(encoding="utf-8"))


def build_quick_map(app_map: AppMap) -> QuickMap:
    """Project the app map down to per-route counts plus the summary."""
    return QuickMap(
        framework=app_map.framework,
        routes=[
            QuickRoute(
                url=route.url,
                title=route.title,
                element_count=len(route.elements),
                load_time=route.performance.load_time,
                has_errors=bool(route.errors),
            )
            for route in app_map.routes
        ],
        summary=app_map.summary,
    )


def save_quick_map(app_map: AppMap, output_dir: Path) -> Path:
    path = _write_text(
        output_dir / QUICK_MAP_FILE,
        build_quick_map(app_map).model_dump_json(by_alias=True, indent=2),
    )
    logfire.info("Quick map saved", path=str(path))
    return path


def _route_context(route: NavigationResult, output_dir: Path) -> dict:
    buttons = [e for e in route.elements if e.type == "button" or "button" in e.selector]
    links = [e for e in route.elements if e.type == "a"]
    forms = [e for e in route.elements if e.type == "form"]
    return {
        "url": route.url,
        "title": route.title,
        "screenshot": Path(os.path.relpath(route.screenshot, output_dir)).as_posix(),
        "load_time": route.performance.load_time,
        "first_contentful_paint": route.performance.first_contentful_paint,
        "element_count": len(route.elements),
        "errors": route.errors,
        "buttons": len(buttons),
        "visible_buttons": sum(1 for e in buttons if e.visible),
        "links": len(links),
        "visible_links": sum(1 for e in links if e.visible),
        "forms": len(forms),
    }


def render_markdown_report(app_map: AppMap, output_dir: Path) -> str:
    """Render the narrative Markdown report for an app map."""
    generated_at = datetime.fromtimestamp(app_map.generated_at / 1000, tz=UTC)
    template = _environment().get_template("README.md.j2")
    return template.render(
        app_map=app_map,
        summary=app_map.summary,
        generated_at=generated_at.isoformat(),
        routes=[_route_context(route, output_dir) for route in app_map.routes],
        components=app_map.components,
    )


def save_markdown_report(app_map: AppMap, output_dir: Path) -> Path:
    path = _write_text(output_dir / REPORT_FILE, render_markdown_report(app_map, output_dir))
    logfire.info("Markdown report saved", path=str(path))
    return path


def write_reports(app_map: AppMap, output_dir: Path) -> list[Path]:
    """Persist app-map.json, quick-map.json and README.md.

    Raises:
        PersistenceError: If any file cannot be written.
    """
    return [
        save_app_map(app_map, output_dir),
        save_quick_map(app_map, output_dir),
        save_markdown_report(app_map, output_dir),
    ]
