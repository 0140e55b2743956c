"""Framework detection from package.json and marker config files."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import logfire

from appnav.crawler.models import FrameworkType

DEFAULT_DEV_PORTS = {
    FrameworkType.SVELTEKIT: 5173,
    FrameworkType.NEXTJS: 3000,
    FrameworkType.NUXT: 3000,
    FrameworkType.VUE: 8080,
    FrameworkType.ANGULAR: 4200,
    FrameworkType.REACT: 3000,
}

_PORT_PATTERN = re.compile(r"-p\s+(\d+)|--port\s+(\d+)|port[=:]\s*(\d+)", re.IGNORECASE)


@dataclass
class ProjectInfo:
    """What detection learned about a project."""

    framework: FrameworkType
    dev_port: int
    dev_command: str = "npm run dev"
    build_command: str = "npm run build"
    name: str | None = None
    version: str | None = None


def read_package_json(project_root: Path) -> dict[str, Any] | None:
    """Load package.json, or None if it is missing or malformed."""
    try:
        return json.loads((project_root / "package.json").read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None


def _has_any(project_root: Path, *names: str) -> bool:
    return any((project_root / name).exists() for name in names)


def detect_framework(project_root: Path) -> FrameworkType:
    """Detect the web framework of a project.

    Checks package.json dependencies first, then framework config files.
    Falls back to GENERIC.
    """
    package = read_package_json(project_root)
    if package is None:
        logfire.warn("Could not read package.json", project_root=str(project_root))
        return FrameworkType.GENERIC

    deps = {
        **package.get("dependencies", {}),
        **package.get("devDependencies", {}),
    }

    if "@sveltejs/kit" in deps or _has_any(project_root, "svelte.config.js"):
        return FrameworkType.SVELTEKIT
    if "next" in deps or _has_any(project_root, "next.config.js", "next.config.mjs"):
        return FrameworkType.NEXTJS
    if (
        "nuxt" in deps
        or "@nuxt/core" in deps
        or _has_any(project_root, "nuxt.config.js", "nuxt.config.ts")
    ):
        return FrameworkType.NUXT
    if "vue" in deps:
        return FrameworkType.VUE
    if "@angular/core" in deps or _has_any(project_root, "angular.json"):
        return FrameworkType.ANGULAR
    if (
        "@remix-run/node" in deps
        or "@remix-run/react" in deps
        or _has_any(project_root, "remix.config.js")
    ):
        return FrameworkType.REMIX
    if "gatsby" in deps or _has_any(project_root, "gatsby-config.js"):
        return FrameworkType.GATSBY
    if "react" in deps:
        return FrameworkType.REACT

    return FrameworkType.GENERIC


def port_from_script(script: str | None) -> int | None:
    """Extract a port from a dev script such as 'next dev -p 4000'."""
    if not script:
        return None
    match = _PORT_PATTERN.search(script)
    if not match:
        return None
    return int(next(group for group in match.groups() if group))


def detect_dev_port(project_root: Path, framework: FrameworkType | None = None) -> int:
    """Detect the dev server port from the dev script, else the framework default."""
    package = read_package_json(project_root) or {}
    port = port_from_script(package.get("scripts", {}).get("dev"))
    if port is not None:
        return port

    if framework is None:
        framework = detect_framework(project_root)
    return DEFAULT_DEV_PORTS.get(framework, 3000)


def detect_project_info(project_root: Path) -> ProjectInfo:
    """Collect framework, port, commands and package metadata."""
    framework = detect_framework(project_root)
    info = ProjectInfo(
        framework=framework,
        dev_port=detect_dev_port(project_root, framework),
    )

    package = read_package_json(project_root)
    if package is None:
        return info

    scripts = package.get("scripts", {})
    info.name = package.get("name")
    info.version = package.get("version")
    for script in ("dev", "start", "serve"):
        if script in scripts:
            info.dev_command = f"npm run {script}"
            break
    return info
