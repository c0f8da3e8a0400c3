"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

BACKEND_REQUESTS = Counter(
    "doclib_backend_requests_total",
    "Calls made to the remote file-storage and audit APIs",
    labelnames=("endpoint", "status"),
    registry=REGISTRY,
)

BACKEND_LATENCY = Histogram(
    "doclib_backend_latency_seconds",
    "Latency of remote API calls",
    labelnames=("endpoint",),
    registry=REGISTRY,
)

STORE_ERRORS = Counter(
    "doclib_store_errors_total",
    "Local store reads or writes that failed and were recovered",
    labelnames=("key", "operation"),
    registry=REGISTRY,
)

SEARCH_COUNT = Counter(
    "doclib_searches_total",
    "Free-text searches executed against the local store",
    registry=REGISTRY,
)

ACTIVITY_COUNT = Counter(
    "doclib_activities_total",
    "User activities recorded",
    labelnames=("type",),
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "BACKEND_REQUESTS",
    "BACKEND_LATENCY",
    "STORE_ERRORS",
    "SEARCH_COUNT",
    "ACTIVITY_COUNT",
    "metrics_response",
]
