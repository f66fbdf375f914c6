from __future__ import annotations

import datetime as dt
import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import BASE_CURRENCY, CATEGORIES, DEFAULT_CATEGORY, DEFAULT_PAYER


def coerce_amount(value: Any) -> float:
    """Return a non-negative float; anything unusable becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        return 0.0
    return amount


def normalize_currency(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        return BASE_CURRENCY
    return value.strip().upper()


def normalize_category(value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() in CATEGORIES:
        return value.strip().lower()
    return DEFAULT_CATEGORY


def normalize_payer(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_PAYER
    return value.strip()


def normalize_split_count(value: Any) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 1
    return count if count >= 1 else 1


def iso_date_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()[:10]
    text = str(value).strip()
    return text or None


def _check_currency(v: Optional[str]) -> Optional[str]:
    if v is None or not v.strip():
        return None
    v = v.strip().upper()
    if len(v) != 3 or not v.isalpha():
        raise ValueError("currency must be a 3-letter code")
    return v


def _check_category(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip().lower()
    if v not in CATEGORIES:
        raise ValueError("unsupported category")
    return v


class ExpenseRecord(BaseModel):
    """Expense as consumed by the ledger: every field already defaulted.

    Construct from raw persistence rows or dicts via ``model_validate``; the
    validators below are the single place where missing or malformed values
    are folded into their defaults.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[str] = None
    title: Optional[str] = None
    amount: float = 0.0
    currency: str = BASE_CURRENCY
    category: str = DEFAULT_CATEGORY
    payer: str = DEFAULT_PAYER
    split_count: int = 1
    date: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> float:
        return coerce_amount(v)

    @field_validator("currency", mode="before")
    @classmethod
    def _currency(cls, v: Any) -> str:
        return normalize_currency(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: Any) -> str:
        return normalize_category(v)

    @field_validator("payer", mode="before")
    @classmethod
    def _payer(cls, v: Any) -> str:
        return normalize_payer(v)

    @field_validator("split_count", mode="before")
    @classmethod
    def _split_count(cls, v: Any) -> int:
        return normalize_split_count(v)

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> Optional[str]:
        return iso_date_or_none(v)

    @property
    def per_person_amount(self) -> float:
        return self.amount / self.split_count


class ExpenseIn(BaseModel):
    title: Optional[str] = None
    amount: float = Field(0, ge=0)
    currency: Optional[str] = None
    category: Optional[str] = None
    payer: Optional[str] = None
    split_count: int = Field(1, ge=1)
    date: Optional[dt.date] = None

    @field_validator("currency")
    @classmethod
    def valid_currency(cls, v: Optional[str]) -> Optional[str]:
        return _check_currency(v)

    @field_validator("category")
    @classmethod
    def valid_category(cls, v: Optional[str]) -> Optional[str]:
        return _check_category(v)


class ExpenseOut(BaseModel):
    id: int
    title: Optional[str] = None
    amount: float
    currency: str
    category: str
    payer: str
    split_count: int
    date: Optional[dt.date] = None
    base_amount: float
    per_person_amount: float
    created_at: dt.datetime
    updated_at: dt.datetime


class ExpenseUpdateIn(BaseModel):
    """Partial update model; at least one field must be provided."""

    title: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    category: Optional[str] = None
    payer: Optional[str] = None
    split_count: Optional[int] = Field(None, ge=1)
    date: Optional[dt.date] = None

    @field_validator("currency")
    @classmethod
    def valid_currency(cls, v: Optional[str]) -> Optional[str]:
        return _check_currency(v)

    @field_validator("category")
    @classmethod
    def valid_category(cls, v: Optional[str]) -> Optional[str]:
        return _check_category(v)

    @model_validator(mode="after")
    def at_least_one(self) -> "ExpenseUpdateIn":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided for update")
        return self
