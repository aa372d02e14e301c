# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Quick-entry arithmetic for the amount field.

Users may type ``12.50+3*2`` instead of a plain number. Only decimal
literals, ``+ - * /`` and parentheses are accepted; the grammar is::

    expr   := term (("+" | "-") term)*
    term   := factor (("*" | "/") factor)*
    factor := ("+" | "-") factor | NUMBER | "(" expr ")"
"""

from __future__ import annotations

import re
from decimal import Decimal, DivisionByZero, InvalidOperation, localcontext

_ALLOWED = re.compile(r"^[0-9+\-*/.()]+$")
_TOKEN = re.compile(r"\d+(?:\.\d*)?|\.\d+|[+\-*/()]")
_FORBIDDEN = ("**", "++", "--")
_MAX_LENGTH = 200
_MAX_DEPTH = 32
CENT = Decimal("0.01")


class _Parser:
    def __init__(self, tokens: list[str]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._depth = 0

    def parse(self) -> Decimal:
        value = self._expr()
        if self._pos != len(self._tokens):
            raise ValueError("trailing input")
        return value

    def _peek(self) -> str | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _take(self) -> str:
        token = self._peek()
        if token is None:
            raise ValueError("unexpected end of expression")
        self._pos += 1
        return token

    def _expr(self) -> Decimal:
        value = self._term()
        while self._peek() in ("+", "-"):
            if self._take() == "+":
                value += self._term()
            else:
                value -= self._term()
        return value

    def _term(self) -> Decimal:
        value = self._factor()
        while self._peek() in ("*", "/"):
            if self._take() == "*":
                value *= self._factor()
            else:
                value /= self._factor()
        return value

    def _factor(self) -> Decimal:
        token = self._take()
        if token in ("+", "-"):
            value = self._factor()
            return value if token == "+" else -value
        if token == "(":
            self._depth += 1
            if self._depth > _MAX_DEPTH:
                raise ValueError("expression nested too deeply")
            value = self._expr()
            if self._take() != ")":
                raise ValueError("unbalanced parentheses")
            self._depth -= 1
            return value
        if token in ("*", "/", ")"):
            raise ValueError(f"unexpected {token!r}")
        return Decimal(token)


def is_expression(text: str) -> bool:
    """Return whether ``text`` contains an arithmetic operator."""

    return bool(re.search(r"[+\-*/]", text))


def evaluate_amount(text: str) -> Decimal | None:
    """Evaluate ``text`` to a non-negative amount rounded to cents.

    Returns ``None`` for anything that is not a well-formed, finite,
    non-negative result.
    """

    clean = re.sub(r"\s", "", text or "")
    if not clean or len(clean) > _MAX_LENGTH or not _ALLOWED.match(clean):
        return None
    if any(seq in clean for seq in _FORBIDDEN):
        return None

    tokens = _TOKEN.findall(clean)
    if "".join(tokens) != clean:
        return None

    try:
        with localcontext() as ctx:
            ctx.prec = 28
            ctx.traps[DivisionByZero] = True
            ctx.traps[InvalidOperation] = True
            result = _Parser(tokens).parse()
            if not result.is_finite() or result < 0:
                return None
            return result.quantize(CENT)
    except (ValueError, ArithmeticError):
        return None


__all__ = ["evaluate_amount", "is_expression"]
