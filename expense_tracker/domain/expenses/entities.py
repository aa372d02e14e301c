# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Expense records and the rules every stored expense obeys."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from expense_tracker.domain.exceptions import InvariantViolation

DEFAULT_CATEGORY = "General"

CATEGORIES: tuple[str, ...] = (
    "General",
    "Food & Dining",
    "Groceries",
    "Transportation",
    "Entertainment",
    "Shopping",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Subscriptions",
    "Personal Care",
    "Others",
)

CENT = Decimal("0.01")
# Largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


@dataclass(slots=True, frozen=True)
class ExpenseDraft:
    """User-supplied fields of an expense, used for both create and update."""

    amount: Decimal
    date: date
    title: str | None = None
    category: str = DEFAULT_CATEGORY
    description: str = ""

    def __post_init__(self) -> None:
        try:
            amount = Decimal(self.amount).quantize(CENT)
        except (InvalidOperation, TypeError, ValueError):
            raise InvariantViolation("amount is not a valid number", field="amount") from None
        if not amount.is_finite() or amount <= 0:
            raise InvariantViolation("amount must be positive", field="amount")
        if amount > MAX_AMOUNT:
            raise InvariantViolation("amount is too large", field="amount")
        object.__setattr__(self, "amount", amount)
        title = (self.title or "").strip()
        object.__setattr__(self, "title", title or None)
        object.__setattr__(self, "category", (self.category or "").strip() or DEFAULT_CATEGORY)
        object.__setattr__(self, "description", (self.description or "").strip())


@dataclass(slots=True, frozen=True)
class Expense:

    id: str
    user_id: str
    amount: Decimal
    date: date
    title: str | None
    category: str
    description: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "amount": float(self.amount),
            "category": self.category,
            "date": self.date.isoformat(),
            "description": self.description,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass(slots=True, frozen=True)
class ExpenseQuery:
    """Filters for listing a user's expenses."""

    search: str | None = None
    month: int | None = None
    year: int | None = None
    category: str | None = None

    def __post_init__(self) -> None:
        if (self.month is None) != (self.year is None):
            raise InvariantViolation("month and year must be given together", field="month")
        if self.month is not None and not 1 <= self.month <= 12:
            raise InvariantViolation("month must be between 1 and 12", field="month")
        search = (self.search or "").strip()
        object.__setattr__(self, "search", search or None)

    def month_range(self) -> tuple[date, date] | None:
        """Return the ``[start, end)`` date range of the requested month."""

        if self.month is None or self.year is None:
            return None
        start = date(self.year, self.month, 1)
        if self.month == 12:
            end = date(self.year + 1, 1, 1)
        else:
            end = date(self.year, self.month + 1, 1)
        return start, end
