"""Lists UI component source files by walking the project tree."""

from __future__ import annotations

from pathlib import Path

import logfire

from appnav.crawler.models import ComponentInfo

DEFAULT_COMPONENT_PATTERNS = [
    "src/**/*.{js,jsx,ts,tsx,vue,svelte}",
    "components/**/*.{js,jsx,ts,tsx,vue,svelte}",
    "app/**/*.{js,jsx,ts,tsx}",
    "pages/**/*.{js,jsx,ts,tsx,vue}",
    "lib/**/*.{js,jsx,ts,tsx,vue,svelte}",
]

IGNORED_DIRS = {"node_modules", "dist", "build", ".next", ".nuxt", ".svelte-kit", ".git"}


def expand_braces(pattern: str) -> list[str]:
    """Expand a single {a,b,c} group, since pathlib globs do not support braces."""
    start = pattern.find("{")
    end = pattern.find("}", start)
    if start == -1 or end == -1:
        return [pattern]
    head, options, tail = pattern[:start], pattern[start + 1 : end], pattern[end + 1 :]
    expanded: list[str] = []
    for option in options.split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def classify_component(relative_path: str) -> str:
    """Classify a file as page, layout or plain component from its path."""
    lowered = relative_path.lower()
    name = lowered.rsplit("/", 1)[-1]
    if "layout" in name or name.startswith("_app."):
        return "layout"
    if "/pages/" in f"/{lowered}" or "page" in name or "route" in name:
        return "page"
    return "component"


def _is_ignored(relative: Path) -> bool:
    if any(part in IGNORED_DIRS for part in relative.parts):
        return True
    return ".test." in relative.name or ".spec." in relative.name


def inventory_components(
    project_root: Path, patterns: list[str] | None = None
) -> list[ComponentInfo]:
    """Glob component files and describe each one.

    Never raises; an unreadable tree yields an empty or partial list.
    """
    files: set[str] = set()
    for pattern in patterns or DEFAULT_COMPONENT_PATTERNS:
        for glob in expand_braces(pattern):
            try:
                for path in project_root.glob(glob):
                    relative = path.relative_to(project_root)
                    if path.is_file() and not _is_ignored(relative):
                        files.add(relative.as_posix())
            except (OSError, ValueError) as e:
                logfire.warn("Could not read component pattern", pattern=glob, error=str(e))

    components = [
        ComponentInfo(
            name=Path(file).stem,
            path=file,
            type=classify_component(file),
        )
        for file in sorted(files)
    ]
    logfire.info("Inventoried components", count=len(components))
    return components
