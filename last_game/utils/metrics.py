"""
Centralized Prometheus metrics definitions for the Last Game application.

This module uses the prometheus-client library to define all metrics that are
updated while resolving and rendering games. Grouping them here provides a
single overview of the application's instrumentation points.
"""
from prometheus_client import Counter, Gauge, Histogram

# A common prefix for all application-specific metrics.
PREFIX = "last_game"

# --- Chess.com API Metrics ---

API_REQUESTS_TOTAL = Counter(
    f"{PREFIX}_api_requests_total",
    "Total number of requests sent to the Chess.com public API.",
    ["endpoint"],  # e.g., endpoint="archive_index", "archive_month", "leaderboards"
)

API_REQUEST_FAILURES_TOTAL = Counter(
    f"{PREFIX}_api_request_failures_total",
    "Total number of Chess.com API requests that did not return HTTP 200.",
    ["endpoint", "status"],  # status="transport" when no response was received
)

# --- Lookup Metrics ---

LOOKUPS_TOTAL = Counter(
    f"{PREFIX}_lookups_total",
    "Total number of last-game lookups, by outcome.",
    ["outcome"],  # "found", "not_found", "failed"
)

LOOKUPS_IN_PROGRESS = Gauge(
    f"{PREFIX}_lookups_in_progress",
    "Number of lookups currently waiting on the Chess.com API.",
)

LOOKUP_DURATION_SECONDS = Histogram(
    f"{PREFIX}_lookup_duration_seconds",
    "Wall-clock time spent resolving and rendering a single lookup.",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)
