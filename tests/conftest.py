"""Shared test fixtures for Tripbook."""

from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from tripbook.core.config import Settings
from tripbook.main import create_app
from tripbook.models.rates import ExchangeRateSnapshot
from tripbook.services.http_client import HttpError
from tripbook.services.rates.base import RateProvider
from tripbook.services.rates.cache_service import RateSnapshotService

TEST_RATES: Dict[str, float] = {"USD": 0.03, "JPY": 5.0, "EUR": 0.025}


class FakeRateProvider(RateProvider):
    name = "fake"

    def __init__(self, rates: Optional[Dict[str, float]] = None, fail: bool = False):
        self.rates = dict(TEST_RATES if rates is None else rates)
        self.fail = fail
        self.calls = 0

    def fetch_snapshot(self) -> ExchangeRateSnapshot:
        self.calls += 1
        if self.fail:
            raise HttpError("rate service offline", status=503)
        return ExchangeRateSnapshot(rates=dict(self.rates), provider=self.name)


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings(
        _env_file=None,
        data_dir=tmp_path,
        db_filename="test.sqlite3",
        debug=False,
        weather_api_key=None,
        exchange_rate_provider="static",
    )
    s.init_post_load()
    return s


@pytest.fixture
def rate_provider() -> FakeRateProvider:
    return FakeRateProvider()


@pytest.fixture
def client(settings, rate_provider) -> TestClient:
    app = create_app(
        settings_override=settings,
        rate_service=RateSnapshotService(rate_provider, ttl_seconds=3600),
    )
    with TestClient(app) as c:
        yield c


@pytest.fixture
def offline_client(settings) -> TestClient:
    """Client whose rate provider never succeeds (no snapshot loaded)."""
    app = create_app(
        settings_override=settings,
        rate_service=RateSnapshotService(FakeRateProvider(fail=True), ttl_seconds=3600),
    )
    with TestClient(app) as c:
        yield c
