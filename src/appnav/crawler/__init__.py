"""Playwright-based route capture for the app map."""

from appnav.crawler.models import (
    AppMap,
    CaptureOutcome,
    ComponentInfo,
    ElementInfo,
    FrameworkType,
    NavigationResult,
    PerformanceMetrics,
    Summary,
    Violation,
)

__all__ = [
    "AppMap",
    "CaptureOutcome",
    "ComponentInfo",
    "ElementInfo",
    "FrameworkType",
    "NavigationResult",
    "PerformanceMetrics",
    "Summary",
    "Violation",
]
