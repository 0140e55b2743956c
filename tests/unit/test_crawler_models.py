"""Tests for capture data models."""

import json

import pytest
from pydantic import ValidationError

from appnav.crawler.models import (
    AppMap,
    CaptureOutcome,
    ElementInfo,
    ElementPosition,
    MetricName,
    NavigationResult,
    PerformanceMetrics,
    Summary,
    Violation,
)


def _summary(**overrides) -> Summary:
    values = {
        "total_routes": 1,
        "successful_captures": 1,
        "total_elements": 0,
        "average_load_time": 100,
        "total_errors": 0,
        "performance_score": 100,
    }
    values.update(overrides)
    return Summary(**values)


class TestPerformanceMetrics:
    def test_optional_metrics_default_to_none(self):
        metrics = PerformanceMetrics(load_time=1200)
        assert metrics.first_contentful_paint is None
        assert metrics.largest_contentful_paint is None
        assert metrics.cumulative_layout_shift is None
        assert metrics.time_to_interactive is None
        assert metrics.memory_usage is None

    def test_zero_is_distinct_from_missing(self):
        metrics = PerformanceMetrics(load_time=10, cumulative_layout_shift=0)
        assert metrics.cumulative_layout_shift == 0
        assert metrics.cumulative_layout_shift is not None


class TestViolation:
    def test_load_time_message(self):
        violation = Violation(metric=MetricName.LOAD_TIME, threshold=1000, observed=3000)
        assert violation.message == "Load time (3000ms) exceeds threshold (1000ms)"

    def test_cls_message_has_no_unit(self):
        violation = Violation(
            metric=MetricName.CUMULATIVE_LAYOUT_SHIFT, threshold=0.1, observed=0.25, unit=""
        )
        assert violation.message == "CLS (0.25) exceeds threshold (0.1)"

    def test_fractional_timing(self):
        violation = Violation(
            metric=MetricName.FIRST_CONTENTFUL_PAINT, threshold=2000, observed=2500.5
        )
        assert violation.message == "FCP (2500.5ms) exceeds threshold (2000ms)"


class TestSerialization:
    def test_camel_case_keys(self):
        result = NavigationResult(
            url="/",
            title="Home",
            screenshot="shots/home.png",
            performance=PerformanceMetrics(load_time=800, first_contentful_paint=300),
            timestamp=1700000000000,
        )
        data = json.loads(result.model_dump_json(by_alias=True, exclude_none=True))
        assert data["performance"] == {"loadTime": 800, "firstContentfulPaint": 300.0}
        assert data["elements"] == []
        assert data["errors"] == []

    def test_elements_never_absent(self):
        result = NavigationResult.model_validate(
            {
                "url": "/",
                "title": "",
                "screenshot": "a.png",
                "performance": {"loadTime": 1},
                "timestamp": 1,
            }
        )
        assert result.elements == []

    def test_element_info(self):
        element = ElementInfo(
            selector="button:nth-of-type(1)",
            type="button",
            visible=True,
            position=ElementPosition(x=1, y=2, width=3, height=4),
        )
        assert element.attributes == {}
        assert element.text is None


class TestAppMap:
    def test_frozen(self):
        app_map = AppMap(
            generated_at=1, framework="generic", base_url="http://x", summary=_summary()
        )
        with pytest.raises(ValidationError):
            app_map.framework = "nextjs"

    def test_default_version(self):
        app_map = AppMap(
            generated_at=1, framework="generic", base_url="http://x", summary=_summary()
        )
        assert app_map.version == "1.0.0"

    def test_score_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            _summary(performance_score=101)


class TestCaptureOutcome:
    def test_ok(self):
        result = NavigationResult(
            url="/",
            title="",
            screenshot="a.png",
            performance=PerformanceMetrics(load_time=1),
            timestamp=1,
        )
        assert CaptureOutcome(route="/", result=result).ok is True

    def test_failed(self):
        outcome = CaptureOutcome(route="/slow", error="timeout", attempts=3)
        assert outcome.ok is False
        assert outcome.attempts == 3
