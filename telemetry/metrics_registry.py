"""
Prometheus instruments for the HTTP request pipeline.

Each ``MetricsRegistry`` owns its own ``CollectorRegistry`` so several
apps (or tests) can live in one process without sharing counters.
"""

from __future__ import annotations

import time
from typing import Callable, Mapping

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    Info,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

LABEL_NAMES = ["method", "route", "status"]
LATENCY_BUCKETS = [0.05, 0.1, 0.25, 0.5, 0.75, 1, 2, 5]

StopTimer = Callable[[Mapping[str, str]], float]


class MetricsRegistry:
    """Request counter, latency histogram and error counter keyed by (method, route, status)."""

    def __init__(self, service_name: str = "order-service", default_metrics: bool = True) -> None:
        self.registry = CollectorRegistry()

        if default_metrics:
            ProcessCollector(registry=self.registry)
            PlatformCollector(registry=self.registry)
            GCCollector(registry=self.registry)

        Info("service", "Service identity", registry=self.registry).info(
            {"service": service_name}
        )

        self.requests = Counter(
            "http_request_total",
            "Total number of HTTP requests",
            LABEL_NAMES,
            registry=self.registry,
        )
        self.duration = Histogram(
            "http_request_duration_seconds",
            "Request latency histogram",
            LABEL_NAMES,
            buckets=LATENCY_BUCKETS,
            registry=self.registry,
        )
        self.errors = Counter(
            "http_request_errors_total",
            "Total number of error responses",
            LABEL_NAMES,
            registry=self.registry,
        )

    # ── Recording ─────────────────────────────────────────────────────────────

    def record_request(self, labels: Mapping[str, str]) -> None:
        self.requests.labels(**labels).inc()

    def record_error(self, labels: Mapping[str, str]) -> None:
        """Count a 5xx response."""
        self.errors.labels(**labels).inc()

    def start_timer(self) -> StopTimer:
        """Start a latency measurement; the returned function records it once."""
        start = time.perf_counter()
        stopped = False

        def stop(labels: Mapping[str, str]) -> float:
            nonlocal stopped
            if stopped:
                raise RuntimeError("request timer already stopped")
            stopped = True
            elapsed = time.perf_counter() - start
            self.duration.labels(**labels).observe(elapsed)
            return elapsed

        return stop

    # ── Exposition ────────────────────────────────────────────────────────────

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def render(self) -> str:
        return generate_latest(self.registry).decode("utf-8")

    def sample_value(self, name: str, labels: Mapping[str, str] | None = None) -> float | None:
        return self.registry.get_sample_value(name, dict(labels or {}))
