"""Pydantic domain models for Tripbook."""

from .constants import (
    BASE_CURRENCY,
    CURRENCIES,
    CATEGORIES,
    DEFAULT_CATEGORY,
    DEFAULT_PAYER,
    UNSCHEDULED,
)  # re-export
from .expense import ExpenseRecord, ExpenseIn, ExpenseOut, ExpenseUpdateIn
from .itinerary import ItineraryEntry, ItineraryIn, ItineraryOut, ItineraryUpdateIn
from .notes import ChecklistItem, ChecklistOut, NoteIn, NoteOut
from .rates import ExchangeRateSnapshot

__all__ = [
    "BASE_CURRENCY",
    "CURRENCIES",
    "CATEGORIES",
    "DEFAULT_CATEGORY",
    "DEFAULT_PAYER",
    "UNSCHEDULED",
    "ExpenseRecord",
    "ExpenseIn",
    "ExpenseOut",
    "ExpenseUpdateIn",
    "ItineraryEntry",
    "ItineraryIn",
    "ItineraryOut",
    "ItineraryUpdateIn",
    "ChecklistItem",
    "ChecklistOut",
    "NoteIn",
    "NoteOut",
    "ExchangeRateSnapshot",
]
