from __future__ import annotations

import datetime as dt
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .expense import iso_date_or_none


class ItineraryEntry(BaseModel):
    """Itinerary item as seen by the date indexer."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[str] = None
    title: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    notes: Optional[str] = None
    linked_note_id: Optional[str] = None

    @field_validator("id", "linked_note_id", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> Optional[str]:
        return iso_date_or_none(v)

    @field_validator("time", mode="before")
    @classmethod
    def _time(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        if isinstance(v, dt.time):
            return v.strftime("%H:%M")
        return str(v).strip() or None


def _check_time(v: Optional[str]) -> Optional[str]:
    if v is None or not v.strip():
        return None
    try:
        parsed = dt.datetime.strptime(v.strip(), "%H:%M")
    except ValueError as e:
        raise ValueError("time must be HH:MM") from e
    return parsed.strftime("%H:%M")


class ItineraryIn(BaseModel):
    title: str
    date: Optional[dt.date] = None
    time: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    notes: Optional[str] = None
    linked_note_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip()

    @field_validator("time")
    @classmethod
    def valid_time(cls, v: Optional[str]) -> Optional[str]:
        return _check_time(v)


class ItineraryUpdateIn(BaseModel):
    title: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    notes: Optional[str] = None
    linked_note_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip() if v is not None else None

    @field_validator("time")
    @classmethod
    def valid_time(cls, v: Optional[str]) -> Optional[str]:
        return _check_time(v)

    @model_validator(mode="after")
    def at_least_one(self) -> "ItineraryUpdateIn":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided for update")
        return self


class ItineraryOut(BaseModel):
    id: int
    title: str
    date: Optional[dt.date] = None
    time: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    notes: Optional[str] = None
    linked_note_id: Optional[int] = None
    created_at: dt.datetime
    updated_at: dt.datetime


class DateSelectionIn(BaseModel):
    selected_date: str

    @field_validator("selected_date")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("selected_date cannot be empty")
        return v.strip()


class ItineraryIndexOut(BaseModel):
    unique_dates: List[str]
    default_selected: Optional[str] = None
    selected_date: Optional[str] = None
    auto_selected: bool = False
    maps_link: Optional[str] = None
