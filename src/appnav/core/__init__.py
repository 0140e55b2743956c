"""Core appnav functionality."""

from appnav.core.config import NavigatorConfig, Settings, get_settings

# Lazy imports to avoid a circular import with the crawler package
# Import these directly from appnav.core.service when needed


def __getattr__(name: str):
    """Lazy import to avoid circular imports."""
    if name in ("create_navigator", "generate_app_map"):
        from appnav.core.service import create_navigator, generate_app_map

        return {"create_navigator": create_navigator, "generate_app_map": generate_app_map}[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "NavigatorConfig",
    "Settings",
    "create_navigator",
    "generate_app_map",
    "get_settings",
]
