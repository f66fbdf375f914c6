"""Domain constants and enumerations for validation and defaulting."""

from typing import Tuple

BASE_CURRENCY = "TWD"
# Offered in forms; any 3-letter code is accepted on input.
CURRENCIES: Tuple[str, ...] = ("TWD", "JPY", "KRW", "USD", "EUR", "CNY", "THB")

CATEGORIES: Tuple[str, ...] = (
    "food",
    "transport",
    "shopping",
    "ticket",
    "stay",
    "other",
)
DEFAULT_CATEGORY = "other"

# Sentinel payer meaning "the person using the app"
DEFAULT_PAYER = "me"

# Itinerary bucket for entries without a date; always sorts last
UNSCHEDULED = "unscheduled"
