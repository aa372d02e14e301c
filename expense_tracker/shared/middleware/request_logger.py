# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
import time

from flask import Flask, Response, g, request

from expense_tracker.shared.logging import clear_correlation_id, logger, set_correlation_id
from expense_tracker.shared.middleware.rate_limit import client_key

_REDACTED_HEADERS = {"authorization", "cookie", "set-cookie"}
_REDACTED_PARAMS = {"password", "token"}
# Probes hit these constantly; keep them out of INFO logs
_QUIET_PATHS = {"/health", "/metrics"}


def _redacted_headers() -> dict[str, str]:
    return {
        key: "<redacted>" if key.lower() in _REDACTED_HEADERS else value
        for key, value in request.headers.items()
    }


def _redacted_params() -> dict[str, str]:
    return {
        key: "<redacted>" if key.lower() in _REDACTED_PARAMS else value
        for key, value in request.args.items()
    }


def configure_request_logging(
    app: Flask, *, debug_mode: bool = False, trust_forwarded_for: bool = False
) -> None:
    @app.before_request
    def _before_request() -> None:
        correlation_id = request.headers.get("X-Request-ID", "")[:64] or secrets.token_hex(8)
        set_correlation_id(correlation_id)
        g.correlation_id = correlation_id
        g.request_started = time.perf_counter()
        g.client = client_key(request, trust_forwarded_for=trust_forwarded_for)

        if debug_mode:
            logger.debug(
                f"--> {request.method} {request.path} from {g.client} "
                f"query={_redacted_params()} headers={_redacted_headers()} "
                f"body_size={request.content_length or 0}"
            )

    @app.after_request
    def _after_request(response: Response) -> Response:
        started = getattr(g, "request_started", None)
        duration = time.perf_counter() - started if started is not None else 0.0
        message = (
            f"<-- {request.method} {request.path} {response.status_code} "
            f"{duration * 1000:.1f}ms client={getattr(g, 'client', '-')} "
            f"user={g.get('user_id') or '-'}"
        )
        if request.path in _QUIET_PATHS:
            logger.debug(message)
        elif response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)
        response.headers.setdefault("X-Request-ID", getattr(g, "correlation_id", "-"))
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.opt(exception=exc if debug_mode else None).error(
                f"Request error: {type(exc).__name__} on {request.method} {request.path}"
            )
        clear_correlation_id()


__all__ = ["configure_request_logging"]
