from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Union

from tripbook.models.constants import BASE_CURRENCY
from tripbook.models.expense import coerce_amount, normalize_currency
from tripbook.models.rates import ExchangeRateSnapshot

"""Base-currency conversion (TWD).

A rate snapshot stores "units of X per 1 TWD", so converting a foreign amount
back to TWD divides by the rate.

When no snapshot is loaded yet, or the snapshot has no usable rate for the
currency, the amount is returned unchanged. Totals may then mix units; the
summary endpoint reports such currencies via ``unconverted_currencies``.
"""

RatesLike = Union[ExchangeRateSnapshot, Mapping[str, Any], None]


def _rate_table(rates: RatesLike) -> Mapping[str, Any]:
    if rates is None:
        return {}
    if isinstance(rates, ExchangeRateSnapshot):
        return rates.rates
    table = rates.get("rates")
    return table if isinstance(table, Mapping) else {}


def lookup_rate(currency: str, rates: RatesLike) -> Optional[float]:
    """Return the usable rate for ``currency`` or None."""
    raw = _rate_table(rates).get(currency)
    if raw is None or isinstance(raw, bool):
        return None
    try:
        rate = float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(rate) or math.isinf(rate) or rate <= 0:
        return None
    return rate


def to_base(amount: Any, currency: Any, rates: RatesLike) -> float:
    value = coerce_amount(amount)
    if not value:
        return 0.0
    code = normalize_currency(currency)
    if code == BASE_CURRENCY:
        return value
    rate = lookup_rate(code, rates)
    if rate is None:
        return value
    return value / rate


def is_convertible(currency: Any, rates: RatesLike) -> bool:
    code = normalize_currency(currency)
    return code == BASE_CURRENCY or lookup_rate(code, rates) is not None
