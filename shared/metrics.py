"""Prometheus metrics for schedule evaluation and profile store calls.

Exposed via /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, make_asgi_app

schedule_evaluations_total = Counter(
    "schedule_evaluations_total",
    "Total sleep schedule evaluations",
    ["outcome"],  # outcome: valid, invalid
)

profile_store_calls_total = Counter(
    "profile_store_calls_total",
    "Total calls to the profile store",
    ["operation", "outcome"],  # operation: fetch, write, delete; outcome: ok, missing, error
)

# API counters
api_requests_total = Counter(
    "api_requests_total",
    "Total API requests",
    ["endpoint", "method", "status_code"],
)

# Histograms
profile_store_duration_seconds = Histogram(
    "profile_store_duration_seconds",
    "Duration of remote profile store calls",
    ["operation"],
)

api_response_duration_seconds = Histogram(
    "api_response_duration_seconds",
    "Duration of API responses",
    ["endpoint"],
)


def create_metrics_app():
    """Create ASGI app for /metrics endpoint."""
    return make_asgi_app()
