from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class LocalSettingsOut(BaseModel):
    city_name: str
    currency_code: str
    weather_api_key_configured: bool
    participant_count: Optional[int] = None


class LocalSettingsIn(BaseModel):
    city_name: Optional[str] = None
    currency_code: Optional[str] = None
    weather_api_key: Optional[str] = None
    # 0 clears the override
    participant_count: Optional[int] = Field(None, ge=0)

    @field_validator("city_name")
    @classmethod
    def _city(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("city_name cannot be empty")
        return v.strip() if v is not None else None

    @field_validator("currency_code")
    @classmethod
    def _currency(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("currency_code must be a 3-letter code")
        return v

    @model_validator(mode="after")
    def at_least_one(self) -> "LocalSettingsIn":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        return self
