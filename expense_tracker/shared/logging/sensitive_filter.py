# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

_REDACTED = "***REDACTED***"

# Order matters: bare JWTs are masked before the generic token rules see them
_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\beyJ[\w-]+\.[\w-]+\.[\w-]+"), "***JWT***"),
    (re.compile(r"(bearer\s+)\S{8,}", re.IGNORECASE), rf"\1{_REDACTED}"),
    (re.compile(r"(authorization\s*[:=]\s*['\"]?)[^'\"\s,}]{8,}", re.IGNORECASE), rf"\1{_REDACTED}"),
    (
        re.compile(r"\b((?:jwt[_-]?)?secret|token)(\s*[:=]\s*['\"]?)[^'\"\s,;}]{4,}", re.IGNORECASE),
        rf"\1\2{_REDACTED}",
    ),
    (re.compile(r"\b(password|pwd)(['\"]?\s*[:=]\s*['\"]?)[^'\"\s,}]+", re.IGNORECASE), rf"\1\2{_REDACTED}"),
    (
        re.compile(r"\b(postgres(?:ql)?(?:\+\w+)?|mysql(?:\+\w+)?)://([^:/@\s]+):[^@\s]+@"),
        rf"\1://\2:{_REDACTED}@",
    ),
    # Emails keep their domain so failed logins stay debuggable
    (re.compile(r"[\w.%+-]+@([\w-]+(?:\.[\w-]+)*\.[a-zA-Z]{2,})"), r"***@\1"),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    if "message" in record:
        record["message"] = sanitize_message(record["message"])
    return True
