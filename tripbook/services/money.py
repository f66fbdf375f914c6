"""Money / rounding helpers for display values.

Ledger totals stay unrounded; only per-expense display amounts pass through
here so the API and any templated view round the same way.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP


def round_money(value: float, places: int = 2) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round2(value: float) -> float:
    return round_money(value, 2)
