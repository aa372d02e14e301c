# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time

from flask import Flask, Response, g, request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_LATENCY = Histogram(
    "expense_tracker_request_latency_seconds",
    "Request latency",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_COUNTER = Counter(
    "expense_tracker_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
)
AUTH_FAILURES = Counter(
    "expense_tracker_auth_failures_total",
    "Rejected bearer tokens and credential checks",
    labelnames=("kind",),
)
RATE_LIMITED = Counter(
    "expense_tracker_rate_limited_total",
    "Requests rejected by the rate limiter",
    labelnames=("bucket",),
)


def configure_metrics(app: Flask, *, enabled: bool) -> None:
    if not enabled:
        return

    @app.before_request
    def _start_timer() -> None:
        g._metrics_t0 = time.perf_counter()

    @app.after_request
    def _observe(resp):
        start = getattr(g, "_metrics_t0", None)
        if start is not None:
            REQUEST_LATENCY.observe(time.perf_counter() - start)
        endpoint = request.endpoint or "unmatched"
        REQUEST_COUNTER.labels(endpoint=endpoint, status=str(resp.status_code)).inc()
        return resp

    @app.get("/metrics")
    def metrics() -> Response:
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)


__all__ = [
    "AUTH_FAILURES",
    "RATE_LIMITED",
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "configure_metrics",
]
