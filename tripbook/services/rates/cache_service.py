from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from tripbook.core.config import Settings
from tripbook.models.rates import ExchangeRateSnapshot
from tripbook.services.http_client import HttpError
from .base import RateProvider
from .providers import make_rate_provider

"""Central rate snapshot service.

Holds the latest ``ExchangeRateSnapshot`` for a configurable TTL
(settings.rates_cache_ttl_seconds). A refresh replaces the snapshot wholesale.
If a refresh fails the previous snapshot stays in place (or None before the
first success) and a retry is scheduled after a short back-off, so readers
always get either a complete snapshot or None.
"""

FAILURE_RETRY_AFTER = timedelta(minutes=5)

logger = logging.getLogger("tripbook.rates")


class RateSnapshotService:
    def __init__(
        self,
        provider: RateProvider,
        ttl_seconds: int,
        clock: Callable[[], datetime] | None = None,
    ):
        self._provider = provider
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._snapshot: Optional[ExchangeRateSnapshot] = None
        self._next_refresh: Optional[datetime] = None

    @property
    def provider_name(self) -> str:
        return self._provider.name

    def peek(self) -> Optional[ExchangeRateSnapshot]:
        """Return the held snapshot without triggering a refresh."""
        return self._snapshot

    def current(self) -> Optional[ExchangeRateSnapshot]:
        now = self._clock()
        if self._next_refresh is None or now >= self._next_refresh:
            self.refresh()
        return self._snapshot

    def refresh(self) -> Optional[ExchangeRateSnapshot]:
        now = self._clock()
        try:
            snapshot = self._provider.fetch_snapshot()
        except HttpError as e:
            logger.warning(
                "rate refresh via %s failed: %s", self._provider.name, e
            )
            self._next_refresh = now + FAILURE_RETRY_AFTER
            return self._snapshot
        self._snapshot = snapshot
        self._next_refresh = now + self._ttl
        logger.info(
            "rate snapshot refreshed via %s (%d currencies)",
            self._provider.name,
            len(snapshot.rates),
        )
        return snapshot


def build_rate_snapshot_service(settings: Settings) -> RateSnapshotService:
    provider = make_rate_provider(settings.exchange_rate_provider, settings)
    return RateSnapshotService(provider, settings.rates_cache_ttl_seconds)

