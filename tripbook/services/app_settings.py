"""Local settings and UI state backed by the metadata table.

All accessors are resilient: a missing or invalid value falls back to its
default instead of raising.

Metadata keys:
  - city_name: str (default "Tokyo"), weather lookups and the dashboard
  - currency_code: str (default "JPY"), the trip's main foreign currency
  - weather_api_key: str, overrides settings.weather_api_key when set
  - participant_count: int >= 1, settlement head-count override
  - itinerary_selected_date / itinerary_auto_selected: sticky day selection
"""

from __future__ import annotations
from typing import Optional

from tripbook.core.config import Settings
from tripbook.db.dal import Database
from tripbook.services.itinerary_index import DateSelection

DEFAULT_CITY = "Tokyo"
DEFAULT_CURRENCY_CODE = "JPY"

SELECTED_DATE_KEY = "itinerary_selected_date"
AUTO_SELECTED_KEY = "itinerary_auto_selected"
PARTICIPANT_COUNT_KEY = "participant_count"


def _get_bool(db: Database, key: str, default: bool = False) -> bool:
    val = db.get_metadata(key)
    if val is None:
        return default
    return val in ("1", "true", "True", "yes", "on")


# ------------- Trip location / currency ----------


def get_city_name(db: Database) -> str:
    return db.get_metadata("city_name") or DEFAULT_CITY


def set_city_name(db: Database, city: str) -> None:
    if not city.strip():
        raise ValueError("city name cannot be empty")
    db.set_metadata("city_name", city.strip())


def get_currency_code(db: Database) -> str:
    code = (db.get_metadata("currency_code") or "").upper()
    return code if len(code) == 3 and code.isalpha() else DEFAULT_CURRENCY_CODE


def set_currency_code(db: Database, code: str) -> None:
    code = code.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValueError("currency code must be 3 letters")
    db.set_metadata("currency_code", code)


# ------------- Weather -----------------------------


def get_weather_api_key(db: Database, settings: Settings) -> Optional[str]:
    return db.get_metadata("weather_api_key") or settings.weather_api_key


def set_weather_api_key(db: Database, key: str) -> None:
    if key.strip():
        db.set_metadata("weather_api_key", key.strip())
    else:
        db.delete_metadata("weather_api_key")


# ------------- Settlement --------------------------


def get_participant_count(db: Database) -> Optional[int]:
    val = db.get_metadata(PARTICIPANT_COUNT_KEY)
    try:
        count = int(val) if val is not None else 0
    except ValueError:
        return None
    return count if count > 0 else None


def set_participant_count(db: Database, count: Optional[int]) -> None:
    """Store the head-count override; None or 0 clears it."""
    if not count:
        db.delete_metadata(PARTICIPANT_COUNT_KEY)
        return
    if count < 0:
        raise ValueError("participant count cannot be negative")
    db.set_metadata(PARTICIPANT_COUNT_KEY, str(count))


# ------------- Itinerary selection -----------------


def get_date_selection(db: Database) -> DateSelection:
    return DateSelection(
        auto_selected=_get_bool(db, AUTO_SELECTED_KEY, False),
        selected_date=db.get_metadata(SELECTED_DATE_KEY) or None,
    )


def save_date_selection(db: Database, selection: DateSelection) -> None:
    db.set_metadata(AUTO_SELECTED_KEY, "1" if selection.auto_selected else "0")
    if selection.selected_date:
        db.set_metadata(SELECTED_DATE_KEY, selection.selected_date)
    else:
        db.delete_metadata(SELECTED_DATE_KEY)


def clear_date_selection(db: Database) -> None:
    db.delete_metadata(SELECTED_DATE_KEY, AUTO_SELECTED_KEY)


__all__ = [
    "get_city_name",
    "set_city_name",
    "get_currency_code",
    "set_currency_code",
    "get_weather_api_key",
    "set_weather_api_key",
    "get_participant_count",
    "set_participant_count",
    "get_date_selection",
    "save_date_selection",
    "clear_date_selection",
]
