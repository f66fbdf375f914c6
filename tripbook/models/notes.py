from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


def _not_blank(v: Optional[str], name: str) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError(f"{name} cannot be empty")
    return v.strip() if v is not None else None


class NoteIn(BaseModel):
    """A ticket, booking confirmation or free-form note."""

    title: str
    content: Optional[str] = None
    url: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _not_blank(v, "title")  # type: ignore[return-value]


class NoteUpdateIn(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    url: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v, "title")

    @model_validator(mode="after")
    def at_least_one(self) -> "NoteUpdateIn":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided for update")
        return self


class NoteOut(NoteIn):
    id: int
    created_at: datetime
    updated_at: datetime


class ChecklistItem(BaseModel):
    id: str
    name: str
    checked: bool = False


class ChecklistIn(BaseModel):
    category: str

    @field_validator("category")
    @classmethod
    def _category(cls, v: str) -> str:
        return _not_blank(v, "category")  # type: ignore[return-value]


class ChecklistItemIn(BaseModel):
    name: str = Field(..., max_length=200)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _not_blank(v, "name")  # type: ignore[return-value]


class ChecklistOut(BaseModel):
    id: int
    category: str
    items: List[ChecklistItem]
    created_at: datetime
    updated_at: datetime