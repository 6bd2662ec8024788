"""Prometheus metrics for provider calls and history writes."""

from prometheus_client import Counter, Histogram

PROVIDER_REQUESTS = Counter(
    "provider_requests_total",
    "Requests sent to the weather provider",
    ["endpoint", "outcome"],
)
PROVIDER_LATENCY = Histogram(
    "provider_request_duration_seconds",
    "Weather provider request duration in seconds",
    ["endpoint"],
)
HISTORY_WRITES = Counter(
    "history_writes_total", "City history store writes", ["outcome"]
)
