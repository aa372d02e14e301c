# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Error hierarchy rendered by :mod:`expense_tracker.shared.errors.http`.

Subclasses usually pin ``code`` and ``status`` as class attributes and are
raised bare; ``context`` carries the extra JSON the client gets back.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any


class AppError(Exception):
    code: str = "app_error"
    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        code: str | None = None,
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        # Instance values shadow the class defaults only when given
        if code is not None:
            self.code = code
        if status is not None:
            self.status = HTTPStatus(status)
        self.context: dict[str, Any] = dict(context or {})
        super().__init__(self.code)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.code}
        if self.context:
            body["context"] = self.context
        return body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, status={int(self.status)})"


class DomainError(AppError):
    code = "domain_error"
    status = HTTPStatus.BAD_REQUEST


class InfrastructureError(AppError):
    code = "infrastructure_error"


class ValidationError(AppError):
    code = "validation_error"
    status = HTTPStatus.BAD_REQUEST


class PersistenceUnavailableError(InfrastructureError):
    code = "persistence_unavailable"
    status = HTTPStatus.SERVICE_UNAVAILABLE


class RateLimitedError(AppError):
    code = "rate_limited"
    status = HTTPStatus.TOO_MANY_REQUESTS

    def __init__(self, bucket: str, retry_after: float) -> None:
        super().__init__()
        self.bucket = bucket
        # Whole seconds for the Retry-After header, never zero
        self.retry_after = max(1, math.ceil(retry_after))
