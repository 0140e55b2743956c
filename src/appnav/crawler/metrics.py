"""Performance metrics: in-page collection, threshold checks, and scoring."""

from __future__ import annotations

import math
import time

import logfire
from playwright.async_api import Page

from appnav.core.config import PerformanceThresholds
from appnav.crawler.models import (
    MetricName,
    NavigationResult,
    PerformanceMetrics,
    Summary,
    Violation,
)

# Penalty caps per breached metric
LOAD_TIME_MAX_PENALTY = 30
FCP_MAX_PENALTY = 20
CLS_MAX_PENALTY = 25
# Points deducted per second over a timing threshold
PENALTY_PER_SECOND = 10

# How long the in-page script waits for buffered LCP entries
LCP_OBSERVER_TIMEOUT_MS = 100

# LCP entries are only delivered to a buffered PerformanceObserver
_METRICS_SCRIPT = """
    async (timeoutMs) => {
        const paint = (name) => {
            const entry = performance.getEntriesByName(name)[0];
            return entry ? entry.startTime : null;
        };
        const lcp = await new Promise((resolve) => {
            let observer;
            const finish = (value) => {
                if (observer) observer.disconnect();
                resolve(value);
            };
            try {
                observer = new PerformanceObserver((list) => {
                    const entries = list.getEntries();
                    finish(entries.length ? entries[entries.length - 1].startTime : null);
                });
                observer.observe({ type: 'largest-contentful-paint', buffered: true });
            } catch (e) {
                finish(null);
                return;
            }
            setTimeout(() => finish(null), timeoutMs);
        });
        const memory = performance.memory ? performance.memory.usedJSHeapSize : null;
        return {
            firstContentfulPaint: paint('first-contentful-paint'),
            largestContentfulPaint: lcp,
            cumulativeLayoutShift: typeof window.CLS === 'number' ? window.CLS : null,
            timeToInteractive: typeof window.TTI === 'number' ? window.TTI : null,
            memoryUsage: memory ?? null,
        };
    }
"""


def elapsed_ms(started_at: float) -> int:
    """Milliseconds since a time.monotonic() reading."""
    return int((time.monotonic() - started_at) * 1000)


async def collect_performance_metrics(page: Page, started_at: float) -> PerformanceMetrics:
    """Gather load time plus whatever paint/layout signals the browser exposes.

    Missing signals stay None. If the in-page script fails only load_time is
    reported.
    """
    load_time = elapsed_ms(started_at)

    try:
        raw = await page.evaluate(_METRICS_SCRIPT, LCP_OBSERVER_TIMEOUT_MS)
    except Exception as e:
        logfire.warn("Failed to capture performance metrics", url=page.url, error=str(e))
        return PerformanceMetrics(load_time=load_time)

    raw = raw or {}
    return PerformanceMetrics(
        load_time=load_time,
        first_contentful_paint=raw.get("firstContentfulPaint"),
        largest_contentful_paint=raw.get("largestContentfulPaint"),
        cumulative_layout_shift=raw.get("cumulativeLayoutShift"),
        time_to_interactive=raw.get("timeToInteractive"),
        memory_usage=raw.get("memoryUsage"),
    )


def _breached(observed: float | None, threshold: float | None) -> bool:
    return bool(threshold) and observed is not None and observed > threshold


def evaluate_thresholds(
    metrics: PerformanceMetrics, thresholds: PerformanceThresholds
) -> list[Violation]:
    """Compare metrics against thresholds. Never raises."""
    checks = [
        (MetricName.LOAD_TIME, metrics.load_time, thresholds.load_time, "ms"),
        (
            MetricName.FIRST_CONTENTFUL_PAINT,
            metrics.first_contentful_paint,
            thresholds.first_contentful_paint,
            "ms",
        ),
        (
            MetricName.LARGEST_CONTENTFUL_PAINT,
            metrics.largest_contentful_paint,
            thresholds.largest_contentful_paint,
            "ms",
        ),
        (
            MetricName.CUMULATIVE_LAYOUT_SHIFT,
            metrics.cumulative_layout_shift,
            thresholds.cumulative_layout_shift,
            "",
        ),
    ]

    violations: list[Violation] = []
    for metric, observed, threshold, unit in checks:
        if _breached(observed, threshold):
            violations.append(
                Violation(metric=metric, threshold=threshold, observed=observed, unit=unit)
            )
    return violations


def score_route(metrics: PerformanceMetrics, thresholds: PerformanceThresholds) -> float:
    """Score one capture from 0 to 100.

    Load time and FCP lose PENALTY_PER_SECOND points per second over their
    thresholds, capped; CLS loses observed*100 points, capped.
    """
    score = 100.0

    if _breached(metrics.load_time, thresholds.load_time):
        over = (metrics.load_time - thresholds.load_time) / 1000
        score -= min(LOAD_TIME_MAX_PENALTY, over * PENALTY_PER_SECOND)

    if _breached(metrics.first_contentful_paint, thresholds.first_contentful_paint):
        over = (metrics.first_contentful_paint - thresholds.first_contentful_paint) / 1000
        score -= min(FCP_MAX_PENALTY, over * PENALTY_PER_SECOND)

    if _breached(metrics.cumulative_layout_shift, thresholds.cumulative_layout_shift):
        score -= min(CLS_MAX_PENALTY, metrics.cumulative_layout_shift * 100)

    return max(0.0, score)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def performance_score(
    results: list[NavigationResult], thresholds: PerformanceThresholds
) -> int:
    """Rounded mean route score, 0 when nothing was captured."""
    if not results:
        return 0
    total = sum(score_route(r.performance, thresholds) for r in results)
    return min(100, max(0, round_half_up(total / len(results))))


def build_summary(
    total_routes: int,
    results: list[NavigationResult],
    thresholds: PerformanceThresholds,
) -> Summary:
    """Aggregate statistics over the successful captures of a run."""
    average_load_time = 0
    if results:
        average_load_time = round_half_up(
            sum(r.performance.load_time for r in results) / len(results)
        )

    return Summary(
        total_routes=total_routes,
        successful_captures=len(results),
        total_elements=sum(len(r.elements) for r in results),
        average_load_time=average_load_time,
        total_errors=sum(len(r.errors) for r in results),
        performance_score=performance_score(results, thresholds),
    )
