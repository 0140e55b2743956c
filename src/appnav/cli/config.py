"""Project configuration lookup for the appnav CLI."""

from __future__ import annotations

from pathlib import Path

from appnav.core.config import (
    CONFIG_FILE_NAMES,
    NavigatorConfig,
    find_config_file,
    get_settings,
    load_navigator_config,
)
from appnav.core.errors import ConfigError


def resolve_config_path(project_root: Path, config_path: str | None = None) -> Path | None:
    """Pick the config file: explicit path, then APPNAV_CONFIG_FILE, then defaults."""
    explicit = config_path or get_settings().config_file
    if explicit:
        path = Path(explicit)
        if not path.is_absolute():
            path = project_root / path
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        return path
    return find_config_file(project_root)


def load_project_config(
    project_root: Path, config_path: str | None = None
) -> tuple[NavigatorConfig, Path | None]:
    """Load the project's navigator config, or defaults if none exists.

    Returns:
        (config, path of the file it came from or None)
    """
    path = resolve_config_path(project_root, config_path)
    if path is None:
        return NavigatorConfig(), None
    return load_navigator_config(path), path


def default_config_path(project_root: Path) -> Path:
    return project_root / CONFIG_FILE_NAMES[0]


__all__ = ["default_config_path", "load_project_config", "resolve_config_path"]
