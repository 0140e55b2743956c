"""Per-framework route discovery and navigation."""

from appnav.adapters.base import ProviderKind, RouteProvider
from appnav.adapters.registry import custom_provider, get_route_provider
from appnav.adapters.routes import normalize_route_path

__all__ = [
    "ProviderKind",
    "RouteProvider",
    "custom_provider",
    "get_route_provider",
    "normalize_route_path",
]
