from __future__ import annotations

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

OUTCOME_OK = "ok"
OUTCOME_SELF_MANAGED = "self_managed"
OUTCOME_BAD_REQUEST = "bad_request"
OUTCOME_INTERNAL_ERROR = "internal_error"


class HandlerMetrics:
    """Request counters and latency per handler."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        registry = REGISTRY if registry is None else registry
        self.requests_total = Counter(
            "jsonhandler_requests_total",
            "Requests served by JSON handlers",
            ["handler", "outcome"],
            registry=registry,
        )
        self.request_duration_seconds = Histogram(
            "jsonhandler_request_duration_seconds",
            "Time spent decoding, running and encoding a request",
            ["handler"],
            registry=registry,
        )

    def observe(self, handler: str, outcome: str, duration: float) -> None:
        self.requests_total.labels(handler=handler, outcome=outcome).inc()
        self.request_duration_seconds.labels(handler=handler).observe(duration)


_default_metrics: HandlerMetrics | None = None


def default_metrics() -> HandlerMetrics:
    """Return the process-wide metrics registered on the global registry."""
    global _default_metrics
    if _default_metrics is None:
        _default_metrics = HandlerMetrics()
    return _default_metrics


__all__ = [
    "HandlerMetrics",
    "OUTCOME_BAD_REQUEST",
    "OUTCOME_INTERNAL_ERROR",
    "OUTCOME_OK",
    "OUTCOME_SELF_MANAGED",
    "default_metrics",
]
