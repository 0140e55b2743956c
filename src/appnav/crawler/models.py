"""Data models for route captures and the aggregated app map."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Schema version written into every app map
APP_MAP_VERSION = "1.0.0"


class FrameworkType(StrEnum):
    """Web frameworks the navigator knows about."""

    SVELTEKIT = "sveltekit"
    NEXTJS = "nextjs"
    NUXT = "nuxt"
    VUE = "vue"
    REACT = "react"
    ANGULAR = "angular"
    REMIX = "remix"
    GATSBY = "gatsby"
    GENERIC = "generic"


class MetricName(StrEnum):
    """Performance metrics that can be checked against a threshold."""

    LOAD_TIME = "loadTime"
    FIRST_CONTENTFUL_PAINT = "firstContentfulPaint"
    LARGEST_CONTENTFUL_PAINT = "largestContentfulPaint"
    CUMULATIVE_LAYOUT_SHIFT = "cumulativeLayoutShift"


# Short labels used in violation messages
_METRIC_LABELS = {
    MetricName.LOAD_TIME: "Load time",
    MetricName.FIRST_CONTENTFUL_PAINT: "FCP",
    MetricName.LARGEST_CONTENTFUL_PAINT: "LCP",
    MetricName.CUMULATIVE_LAYOUT_SHIFT: "CLS",
}


class Record(BaseModel):
    """Base for persisted records: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ElementPosition(Record):
    """Integer-rounded bounding box of an element."""

    x: int
    y: int
    width: int
    height: int


class ElementInfo(Record):
    """An interactive element observed on a captured page."""

    selector: str
    type: str
    text: str | None = None
    href: str | None = None
    visible: bool
    position: ElementPosition
    attributes: dict[str, str] = Field(default_factory=dict)


class PerformanceMetrics(Record):
    """Timing signals for one capture.

    Only load_time is guaranteed; the rest are None when the browser did not
    report them.
    """

    load_time: int
    first_contentful_paint: float | None = None
    largest_contentful_paint: float | None = None
    cumulative_layout_shift: float | None = None
    time_to_interactive: float | None = None
    memory_usage: float | None = None


class Violation(Record):
    """A metric observed above its configured threshold."""

    metric: MetricName
    threshold: float
    observed: float
    unit: str = "ms"

    @property
    def message(self) -> str:
        label = _METRIC_LABELS[self.metric]
        return (
            f"{label} ({_fmt(self.observed)}{self.unit}) "
            f"exceeds threshold ({_fmt(self.threshold)}{self.unit})"
        )


def _fmt(value: float) -> str:
    """Render whole numbers without a trailing .0."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


class NavigationResult(Record):
    """The outcome of capturing one route."""

    url: str
    title: str
    screenshot: str
    elements: list[ElementInfo] = Field(default_factory=list)
    performance: PerformanceMetrics
    errors: list[str] = Field(default_factory=list)  # rendered violation messages
    violations: list[Violation] = Field(default_factory=list)
    timestamp: int


class ComponentInfo(Record):
    """A source component found in the project tree."""

    name: str
    path: str
    type: Literal["component", "page", "layout"] = "component"
    props: list[str] | None = None
    used_in: list[str] = Field(default_factory=list)


class Summary(Record):
    """Aggregate statistics for one run."""

    model_config = ConfigDict(frozen=True)

    total_routes: int
    successful_captures: int
    total_elements: int
    average_load_time: int
    total_errors: int
    performance_score: int = Field(ge=0, le=100)


class AppMap(Record):
    """Root aggregate describing every captured route of an application."""

    model_config = ConfigDict(frozen=True)

    routes: list[NavigationResult] = Field(default_factory=list)
    components: list[ComponentInfo] = Field(default_factory=list)
    generated_at: int
    version: str = APP_MAP_VERSION
    framework: str
    base_url: str
    summary: Summary


class QuickRoute(Record):
    """Thin per-route projection used by quick-map.json."""

    url: str
    title: str
    element_count: int
    load_time: int
    has_errors: bool


class QuickMap(Record):
    """Thin projection of an AppMap for fast consumption."""

    framework: str
    routes: list[QuickRoute] = Field(default_factory=list)
    summary: Summary


@dataclass
class CaptureOutcome:
    """Settled result of capturing one route: either a result or an error."""

    route: str
    result: NavigationResult | None = None
    error: str | None = None
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.result is not None
