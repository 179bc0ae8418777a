"""Prometheus metrics for cascade.

Provides standard metrics for orchestration passes, provider failures,
remote fetch attempts and cache effectiveness.
"""

from prometheus_client import Counter, Gauge, Histogram

# Orchestration metrics
LOAD_COUNT = Counter(
    "cascade_load_total",
    "Total number of orchestration passes",
    labelnames=["operation", "outcome"],
)

LOAD_LATENCY = Histogram(
    "cascade_load_latency_seconds",
    "Orchestration pass latency in seconds",
    labelnames=["operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

SNAPSHOT_VERSION = Gauge(
    "cascade_snapshot_version",
    "Version of the currently published configuration snapshot",
)

CHANGE_EVENTS = Counter(
    "cascade_change_events_total",
    "Total number of change events emitted",
    labelnames=["source"],
)

# Provider metrics
PROVIDER_FAILURES = Counter(
    "cascade_provider_failures_total",
    "Total number of provider load failures",
    labelnames=["source"],
)

# Remote fetch metrics
FETCH_ATTEMPTS = Counter(
    "cascade_fetch_attempts_total",
    "Total number of remote fetch attempts",
    labelnames=["source", "outcome"],
)

FETCH_CACHE_LOOKUPS = Counter(
    "cascade_fetch_cache_lookups_total",
    "Fetch cache lookups by result",
    labelnames=["source", "result"],
)
