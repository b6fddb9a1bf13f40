"""Prometheus metrics for completion calls."""

from prometheus_client import Counter, Histogram

completion_latency_ms = Histogram(
    "completion_latency_ms",
    "Completion call latency in milliseconds",
    ["operation", "outcome"],
    buckets=[100, 250, 500, 1000, 2500, 5000, 10000, 30000, 60000, 120000],
)

completion_failures_total = Counter(
    "completion_failures_total",
    "Total failed completion pipelines",
    ["operation", "reason"],
)

degraded_results_total = Counter(
    "degraded_results_total",
    "Operations that fell back to a safe default",
    ["operation"],
)


class PrometheusCompletionMetrics:
    """Prometheus-based completion metrics implementation."""

    def record_latency(self, operation: str, outcome: str, latency_ms: float) -> None:
        """Record completion latency."""
        completion_latency_ms.labels(operation=operation, outcome=outcome).observe(latency_ms)

    def inc_failure(self, operation: str, reason: str) -> None:
        """Increment failure counter."""
        completion_failures_total.labels(operation=operation, reason=reason).inc()

    def inc_degraded(self, operation: str) -> None:
        """Increment degraded-result counter."""
        degraded_results_total.labels(operation=operation).inc()
