from __future__ import annotations

"""Rate provider abstraction.

A provider returns a complete snapshot in one call; callers never merge
partial results into an existing snapshot.
"""
from abc import ABC, abstractmethod

from tripbook.models.constants import BASE_CURRENCY
from tripbook.models.rates import ExchangeRateSnapshot


class RateProvider(ABC):
    name: str = "abstract"
    base_currency: str = BASE_CURRENCY

    @abstractmethod
    def fetch_snapshot(self) -> ExchangeRateSnapshot:
        """Return units of each currency per 1 unit of the base currency."""
        raise NotImplementedError
