from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.domain.exceptions import InvariantViolation
from expense_tracker.domain.expenses.entities import ExpenseDraft, ExpenseQuery


def test_draft_normalizes_fields() -> None:
    draft = ExpenseDraft(
        amount=Decimal("12.345"),
        date=date(2024, 3, 5),
        title="  ",
        category="",
        description="  lunch ",
    )

    assert draft.amount == Decimal("12.35")
    assert draft.title is None
    assert draft.category == "General"
    assert draft.description == "lunch"


@pytest.mark.parametrize(
    "amount",
    [Decimal("0"), Decimal("-1"), Decimal("1e30"), Decimal("10000000000"), Decimal("NaN")],
)
def test_draft_rejects_unstorable_amounts(amount: Decimal) -> None:
    with pytest.raises(InvariantViolation) as excinfo:
        ExpenseDraft(amount=amount, date=date(2024, 3, 5))

    assert excinfo.value.status == 400
    assert excinfo.value.to_dict()["context"]["fields"] == ["amount"]


def test_query_requires_month_and_year_together() -> None:
    with pytest.raises(InvariantViolation):
        ExpenseQuery(month=3)


def test_query_month_range_wraps_december() -> None:
    start, end = ExpenseQuery(month=12, year=2024).month_range()

    assert start == date(2024, 12, 1)
    assert end == date(2025, 1, 1)
