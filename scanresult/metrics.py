"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

CLASSIFY_LATENCY = Histogram(
    "scanresult_classify_latency_seconds",
    "Latency of full classification runs",
    buckets=(0.0005, 0.001, 0.002, 0.005, 0.01, 0.02, 0.04, 0.08),
    registry=REGISTRY,
)

RESULTS_TOTAL = Counter(
    "scanresult_results_total",
    "Number of classified payloads grouped by result type",
    labelnames=("result_type",),
    registry=REGISTRY,
)

PARSER_LATENCY = Histogram(
    "scanresult_parser_latency_seconds",
    "Latency of individual result parser attempts",
    labelnames=("parser",),
    buckets=(0.0001, 0.0005, 0.001, 0.002, 0.005, 0.01, 0.02),
    registry=REGISTRY,
)


def observe_classification(*, latency_ms: float, result_type: str) -> None:
    CLASSIFY_LATENCY.observe(latency_ms / 1000.0)
    RESULTS_TOTAL.labels(result_type=result_type).inc()


def observe_parser(*, parser: str, latency_ms: float) -> None:
    PARSER_LATENCY.labels(parser=parser).observe(latency_ms / 1000.0)


def render_metrics() -> tuple[bytes, str]:
    payload = generate_latest(REGISTRY)
    return payload, CONTENT_TYPE_LATEST
