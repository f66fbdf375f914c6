from __future__ import annotations

"""Concrete rate providers and factory.

'static' serves a built-in table (offline use, tests); 'external-http' reads
the latest table for the base currency from exchangerate-api.com.
"""
from datetime import datetime, timezone
from typing import Dict, Type

from tripbook.core.config import Settings
from tripbook.models.rates import ExchangeRateSnapshot
from tripbook.services.http_client import HttpError, get_json
from .base import RateProvider

# Units per 1 TWD; rough placeholders
_STATIC_RATES: Dict[str, float] = {
    "TWD": 1.0,
    "JPY": 4.7,
    "KRW": 42.5,
    "USD": 0.031,
    "EUR": 0.029,
    "CNY": 0.22,
    "THB": 1.12,
}


class StaticRateProvider(RateProvider):
    name = "static"

    def __init__(self, settings: Settings | None = None):
        pass

    def fetch_snapshot(self) -> ExchangeRateSnapshot:  # type: ignore[override]
        return ExchangeRateSnapshot(
            base=self.base_currency,
            rates=dict(_STATIC_RATES),
            fetched_at=datetime.now(timezone.utc),
            provider=self.name,
        )


class ExternalHTTPRateProvider(RateProvider):
    name = "external-http"

    def __init__(self, settings: Settings):
        self._url = f"{str(settings.exchange_api_base_url).rstrip('/')}/{self.base_currency}"
        self._timeout = settings.http_timeout_seconds

    def fetch_snapshot(self) -> ExchangeRateSnapshot:  # type: ignore[override]
        data = get_json(self._url, timeout=self._timeout, retries=2)
        if not isinstance(data, dict):
            raise HttpError(f"unexpected payload from {self._url}")
        base = str(data.get("base") or self.base_currency).upper()
        if base != self.base_currency:
            raise HttpError(
                f"rates from {self._url} are based on {base}, expected {self.base_currency}"
            )
        raw = data.get("rates")
        if not isinstance(raw, dict) or not raw:
            raise HttpError(f"no rates in response from {self._url}")
        rates: Dict[str, float] = {}
        for code, value in raw.items():
            try:
                rate = float(value)
            except (TypeError, ValueError):
                continue
            if rate > 0:
                rates[str(code).upper()] = rate
        return ExchangeRateSnapshot(
            base=self.base_currency,
            rates=rates,
            fetched_at=datetime.now(timezone.utc),
            provider=self.name,
        )


_PROVIDER_REGISTRY: Dict[str, Type[RateProvider]] = {
    "static": StaticRateProvider,
    "external-http": ExternalHTTPRateProvider,
}


def make_rate_provider(kind: str, settings: Settings) -> RateProvider:
    cls = _PROVIDER_REGISTRY.get(kind)
    if not cls:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    return cls(settings)  # type: ignore[call-arg]
