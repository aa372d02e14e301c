from __future__ import annotations

from datetime import date as calendar_date
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from expense_tracker.domain.expenses.amount_expression import evaluate_amount, is_expression
from expense_tracker.domain.expenses.entities import (
    DEFAULT_CATEGORY,
    MAX_AMOUNT,
    ExpenseDraft,
    ExpenseQuery,
)


def _invalid_amount() -> PydanticCustomError:
    return PydanticCustomError("amount_invalid", "Please enter a valid amount", {})


class ExpenseRequestDTO(BaseModel):
    """Body of create and update requests; update replaces every field."""

    amount: Decimal
    date: calendar_date
    title: str | None = Field(None, max_length=255)
    category: str | None = Field(None, max_length=64)
    description: str | None = Field(None, max_length=2000)

    model_config = ConfigDict(extra="forbid")

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value: object) -> Decimal:
        if isinstance(value, bool) or value is None:
            raise _invalid_amount()
        if isinstance(value, str):
            text = value.strip()
            if not text:
                raise _invalid_amount()
            if is_expression(text):
                result = evaluate_amount(text)
                if result is None:
                    raise _invalid_amount()
                return result
            try:
                return Decimal(text)
            except InvalidOperation:
                raise _invalid_amount() from None
        if isinstance(value, (int, float)):
            return Decimal(str(value))
        raise _invalid_amount()

    @field_validator("amount", mode="after")
    @classmethod
    def require_positive(cls, value: Decimal) -> Decimal:
        if not value.is_finite() or value <= 0:
            raise _invalid_amount()
        if value > MAX_AMOUNT:
            raise PydanticCustomError(
                "amount_too_large",
                "Amount may not exceed {max_amount}",
                {"max_amount": str(MAX_AMOUNT)},
            )
        return value

    def to_draft(self) -> ExpenseDraft:
        return ExpenseDraft(
            amount=self.amount,
            date=self.date,
            title=self.title,
            category=self.category or DEFAULT_CATEGORY,
            description=self.description or "",
        )


class ExpenseQueryDTO(BaseModel):
    search: str | None = Field(None, max_length=200)
    month: int | None = Field(None, ge=1, le=12)
    year: int | None = Field(None, ge=1900, le=9999)
    category: str | None = Field(None, max_length=64)

    model_config = ConfigDict(extra="ignore")

    def to_query(self) -> ExpenseQuery:
        # A lone month or year is ignored rather than rejected
        if self.month is None or self.year is None:
            return ExpenseQuery(search=self.search, category=self.category or None)
        return ExpenseQuery(
            search=self.search,
            month=self.month,
            year=self.year,
            category=self.category or None,
        )
