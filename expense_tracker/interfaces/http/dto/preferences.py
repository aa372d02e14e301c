from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PreferencesUpdateDTO(BaseModel):
    theme: Literal["light", "dark"] | None = None
    currency: str | None = Field(None, pattern=r"^[A-Z]{3}$")
    notifications: bool | None = None
    language: str | None = Field(None, pattern=r"^[a-z]{2}(-[A-Z]{2})?$")

    model_config = ConfigDict(extra="forbid")

    @field_validator("currency", mode="before")
    @classmethod
    def upper_currency(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)
