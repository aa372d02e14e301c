from __future__ import annotations

import pytest
from flask import Flask

from expense_tracker.shared.errors import RateLimitedError
from expense_tracker.shared.middleware.error_handler import configure_error_handling
from expense_tracker.shared.middleware.rate_limit import (
    API_BUCKET,
    AUTH_BUCKET,
    FixedWindowRateLimiter,
    RateLimiter,
    configure_rate_limiting,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


def test_sixth_call_in_window_is_throttled(clock: FakeClock) -> None:
    limiter = FixedWindowRateLimiter(5, 900, clock=clock)

    results = [limiter.allow("1.2.3.4") for _ in range(6)]

    assert results == [True, True, True, True, True, False]


def test_first_call_after_window_is_allowed(clock: FakeClock) -> None:
    limiter = FixedWindowRateLimiter(5, 900, clock=clock)
    for _ in range(6):
        limiter.allow("1.2.3.4")

    clock.advance(900)

    assert limiter.allow("1.2.3.4") is True


def test_keys_are_counted_independently(clock: FakeClock) -> None:
    limiter = FixedWindowRateLimiter(1, 60, clock=clock)

    assert limiter.allow("a") is True
    assert limiter.allow("a") is False
    assert limiter.allow("b") is True


def test_retry_after_counts_down(clock: FakeClock) -> None:
    limiter = FixedWindowRateLimiter(1, 60, clock=clock)
    limiter.allow("a")
    clock.advance(45)

    assert limiter.retry_after("a") == pytest.approx(15)
    assert limiter.retry_after("unknown") == 0.0


def test_stale_keys_are_swept(clock: FakeClock) -> None:
    limiter = FixedWindowRateLimiter(5, 60, clock=clock)
    for key in ("a", "b", "c"):
        limiter.allow(key)

    clock.advance(61)
    limiter.allow("d")

    assert len(limiter) == 1


def test_key_count_is_bounded(clock: FakeClock) -> None:
    limiter = FixedWindowRateLimiter(5, 60, max_keys=2, clock=clock)
    for key in ("a", "b", "c"):
        limiter.allow(key)

    assert len(limiter) == 2


def test_enforce_raises_with_retry_after(clock: FakeClock) -> None:
    limiter = RateLimiter({AUTH_BUCKET: FixedWindowRateLimiter(1, 30, clock=clock)})
    limiter.enforce("a", AUTH_BUCKET)

    with pytest.raises(RateLimitedError) as excinfo:
        limiter.enforce("a", AUTH_BUCKET)

    assert excinfo.value.status == 429
    assert excinfo.value.retry_after == 30


def test_middleware_applies_api_and_auth_buckets(clock: FakeClock) -> None:
    app = Flask(__name__)
    configure_error_handling(app)
    limiter = RateLimiter(
        {
            AUTH_BUCKET: FixedWindowRateLimiter(2, 60, clock=clock),
            API_BUCKET: FixedWindowRateLimiter(3, 60, clock=clock),
        }
    )
    configure_rate_limiting(app, limiter)

    @app.post("/api/auth/login")
    def login():
        return "ok"

    @app.get("/api/ping")
    def api_ping():
        return "ok"

    @app.get("/health")
    def health():
        return "ok"

    with app.test_client() as client:
        assert client.post("/api/auth/login").status_code == 200
        assert client.post("/api/auth/login").status_code == 200
        throttled = client.post("/api/auth/login")
        assert throttled.status_code == 429
        assert throttled.get_json() == {"error": "rate_limited"}
        assert throttled.headers["Retry-After"] == "60"

        # Third /api/ call from this client exhausted the api bucket too
        assert client.get("/api/ping").status_code == 429
        assert client.get("/health").status_code == 200


def test_forwarded_for_ignored_unless_trusted(clock: FakeClock) -> None:
    app = Flask(__name__)
    configure_error_handling(app)
    limiter = RateLimiter({API_BUCKET: FixedWindowRateLimiter(1, 60, clock=clock)})
    configure_rate_limiting(app, limiter)

    @app.get("/api/ping")
    def api_ping():
        return "ok"

    with app.test_client() as client:
        assert client.get("/api/ping", headers={"X-Forwarded-For": "9.9.9.1"}).status_code == 200
        spoofed = client.get("/api/ping", headers={"X-Forwarded-For": "9.9.9.2"})
        assert spoofed.status_code == 429


def test_session_reads_do_not_spend_login_attempts(clock: FakeClock) -> None:
    app = Flask(__name__)
    configure_error_handling(app)
    limiter = RateLimiter(
        {
            AUTH_BUCKET: FixedWindowRateLimiter(2, 60, clock=clock),
            API_BUCKET: FixedWindowRateLimiter(100, 60, clock=clock),
        }
    )
    configure_rate_limiting(app, limiter)

    @app.get("/api/auth/me")
    def me():
        return "ok"

    @app.post("/api/auth/login")
    def login():
        return "ok"

    with app.test_client() as client:
        assert [client.get("/api/auth/me").status_code for _ in range(5)] == [200] * 5
        assert client.post("/api/auth/login").status_code == 200
        assert client.post("/api/auth/login").status_code == 200
        assert client.post("/api/auth/login").status_code == 429
