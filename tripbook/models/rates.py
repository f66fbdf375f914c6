from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import BASE_CURRENCY


class ExchangeRateSnapshot(BaseModel):
    """Rates expressed as units of each currency per 1 unit of ``base``.

    A snapshot is immutable; refreshing produces a new one.
    """

    model_config = ConfigDict(frozen=True)

    base: str = BASE_CURRENCY
    rates: Dict[str, float] = Field(default_factory=dict)
    fetched_at: Optional[datetime] = None
    provider: Optional[str] = None

    @field_validator("base")
    @classmethod
    def upper_base(cls, v: str) -> str:
        return v.upper()

    @field_validator("rates")
    @classmethod
    def upper_codes(cls, v: Dict[str, float]) -> Dict[str, float]:
        return {code.upper(): rate for code, rate in v.items()}


class RatesStatus(BaseModel):
    loaded: bool
    snapshot: Optional[ExchangeRateSnapshot] = None
