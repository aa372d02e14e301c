# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Fixed-window request throttling.

Each client key gets a counter that resets when its window elapses. Bursts
straddling a window boundary can reach twice the limit; that imprecision is
accepted. State lives in process memory only.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from threading import Lock

from flask import Flask, Request, request

from expense_tracker.infrastructure.observability import RATE_LIMITED
from expense_tracker.shared.errors import RateLimitedError
from expense_tracker.shared.logging import logger

AUTH_BUCKET = "auth"
API_BUCKET = "api"

# Credential-checking endpoints; session reads like /api/auth/me stay on the api bucket
AUTH_THROTTLED_PATHS = frozenset({"/api/auth/register", "/api/auth/login"})


@dataclass(slots=True)
class Window:
    started_at: float
    count: int


class FixedWindowRateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        max_keys: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._max_keys = max(1, int(max_keys))
        self._clock = clock
        self._windows: OrderedDict[str, Window] = OrderedDict()
        self._lock = Lock()
        self._last_sweep = clock()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self._window:
                self._sweep(now)

            window = self._windows.get(key)
            if window is None or now - window.started_at >= self._window:
                self._windows[key] = Window(started_at=now, count=1)
                self._windows.move_to_end(key)
                self._evict_overflow()
                return True

            window.count += 1
            self._windows.move_to_end(key)
            return window.count <= self._limit

    def retry_after(self, key: str) -> float:
        with self._lock:
            window = self._windows.get(key)
            if window is None:
                return 0.0
            return max(0.0, self._window - (self._clock() - window.started_at))

    def sweep(self) -> int:
        with self._lock:
            return self._sweep(self._clock())

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _sweep(self, now: float) -> int:
        stale = [k for k, w in self._windows.items() if now - w.started_at >= self._window]
        for key in stale:
            del self._windows[key]
        self._last_sweep = now
        if stale:
            logger.debug(f"rate_limit: swept {len(stale)} stale keys")
        return len(stale)

    def _evict_overflow(self) -> None:
        # Least recently seen keys go first
        while len(self._windows) > self._max_keys:
            self._windows.popitem(last=False)


class RateLimiter:
    """Named, independently configured buckets sharing one client-key scheme."""

    def __init__(self, buckets: Mapping[str, FixedWindowRateLimiter]) -> None:
        self._buckets = dict(buckets)

    def bucket(self, name: str) -> FixedWindowRateLimiter:
        return self._buckets[name]

    def check(self, client_key: str, bucket: str) -> bool:
        return self._buckets[bucket].allow(client_key)

    def enforce(self, client_key: str, bucket: str) -> None:
        if self.check(client_key, bucket):
            return
        RATE_LIMITED.labels(bucket=bucket).inc()
        logger.warning(f"rate_limit: throttled bucket={bucket} client={client_key}")
        retry_after = self._buckets[bucket].retry_after(client_key)
        raise RateLimitedError(bucket, retry_after)

    def reset(self) -> None:
        for limiter in self._buckets.values():
            limiter.reset()


def client_key(req: Request, *, trust_forwarded_for: bool = False) -> str:
    if trust_forwarded_for:
        forwarded = req.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        if forwarded:
            return forwarded
    return req.remote_addr or "unknown"


def configure_rate_limiting(
    app: Flask,
    limiter: RateLimiter,
    *,
    enabled: bool = True,
    trust_forwarded_for: bool = False,
    auth_paths: frozenset[str] = AUTH_THROTTLED_PATHS,
) -> None:
    if not enabled:
        logger.warning("rate_limit: disabled by configuration")
        return

    @app.before_request
    def _throttle() -> None:
        path = request.path
        if request.method == "OPTIONS" or not path.startswith("/api/"):
            return
        key = client_key(request, trust_forwarded_for=trust_forwarded_for)
        limiter.enforce(key, API_BUCKET)
        if path.rstrip("/") in auth_paths:
            limiter.enforce(key, AUTH_BUCKET)


__all__ = [
    "API_BUCKET",
    "AUTH_BUCKET",
    "AUTH_THROTTLED_PATHS",
    "FixedWindowRateLimiter",
    "RateLimiter",
    "client_key",
    "configure_rate_limiting",
]
