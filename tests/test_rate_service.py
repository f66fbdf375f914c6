import http.client
from datetime import datetime, timedelta, timezone

import pytest

from tripbook.services import http_client
from tripbook.services.http_client import HttpError
from tripbook.services.rates import providers
from tripbook.services.rates.cache_service import (
    FAILURE_RETRY_AFTER,
    RateSnapshotService,
    build_rate_snapshot_service,
)
from tripbook.services.rates.providers import ExternalHTTPRateProvider, StaticRateProvider

from conftest import FakeRateProvider


class Clock:
    def __init__(self):
        self.now = datetime(2024, 5, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


def test_snapshot_cached_until_ttl_expires():
    clock, provider = Clock(), FakeRateProvider()
    svc = RateSnapshotService(provider, ttl_seconds=60, clock=clock)
    first = svc.current()
    assert svc.current() is first
    assert provider.calls == 1

    clock.now += timedelta(seconds=61)
    provider.rates = {"USD": 0.04}
    second = svc.current()
    assert provider.calls == 2
    assert second.rates == {"USD": 0.04}
    # replaced wholesale, the old table is untouched
    assert first.rates["JPY"] == 5.0


def test_failed_first_refresh_yields_none_and_backs_off():
    clock, provider = Clock(), FakeRateProvider(fail=True)
    svc = RateSnapshotService(provider, ttl_seconds=60, clock=clock)
    assert svc.current() is None
    assert svc.current() is None
    assert provider.calls == 1

    clock.now += FAILURE_RETRY_AFTER
    provider.fail = False
    assert svc.current() is not None


def test_failed_refresh_keeps_previous_snapshot():
    provider = FakeRateProvider()
    svc = RateSnapshotService(provider, ttl_seconds=60)
    good = svc.refresh()
    provider.fail = True
    assert svc.refresh() is good
    assert svc.peek() is good


def test_static_provider_snapshot(settings):
    snap = StaticRateProvider(settings).fetch_snapshot()
    assert snap.base == "TWD"
    assert snap.provider == "static"
    assert snap.rates["TWD"] == 1.0
    assert build_rate_snapshot_service(settings).provider_name == "static"


def test_external_provider_parses_response(settings, monkeypatch):
    calls = {}

    def fake_get_json(url, **kwargs):
        calls["url"] = url
        return {"base": "TWD", "rates": {"TWD": 1, "usd": 0.031, "XXX": 0, "BAD": "n/a"}}

    monkeypatch.setattr(providers, "get_json", fake_get_json)
    snap = ExternalHTTPRateProvider(settings).fetch_snapshot()
    assert calls["url"] == "https://api.exchangerate-api.com/v4/latest/TWD"
    assert snap.rates == {"TWD": 1.0, "USD": 0.031}
    assert snap.provider == "external-http"


def test_external_provider_rejects_empty_payload(settings, monkeypatch):
    monkeypatch.setattr(providers, "get_json", lambda url, **kw: {"result": "error"})
    with pytest.raises(HttpError):
        ExternalHTTPRateProvider(settings).fetch_snapshot()


def test_unknown_provider_kind_is_rejected(settings):
    with pytest.raises(ValueError):
        providers.make_rate_provider("carrier-pigeon", settings)


def _seeded_external_service(settings, monkeypatch):
    monkeypatch.setattr(
        providers, "get_json", lambda url, **kw: {"base": "TWD", "rates": {"JPY": 4.8}}
    )
    clock = Clock()
    svc = RateSnapshotService(ExternalHTTPRateProvider(settings), ttl_seconds=60, clock=clock)
    good = svc.current()
    clock.now += timedelta(seconds=61)
    return svc, good


def test_non_object_payload_keeps_previous_snapshot(settings, monkeypatch):
    svc, good = _seeded_external_service(settings, monkeypatch)
    monkeypatch.setattr(providers, "get_json", lambda url, **kw: ["unexpected"])
    assert svc.current() is good


def test_truncated_response_keeps_previous_snapshot(settings, monkeypatch):
    svc, good = _seeded_external_service(settings, monkeypatch)

    class Truncated:
        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def read(self):
            raise http.client.IncompleteRead(b'{"rates": {')

    monkeypatch.setattr(providers, "get_json", http_client.get_json)
    monkeypatch.setattr(http_client.urllib.request, "urlopen", lambda url, timeout: Truncated())
    monkeypatch.setattr(http_client.time, "sleep", lambda s: None)
    assert svc.current() is good


def test_connection_reset_becomes_http_error(monkeypatch):
    def reset(url, timeout):
        raise ConnectionResetError("peer reset")

    monkeypatch.setattr(http_client.urllib.request, "urlopen", reset)
    monkeypatch.setattr(http_client.time, "sleep", lambda s: None)
    with pytest.raises(HttpError):
        http_client.get_json("https://rates.invalid/latest/TWD", retries=1)


def test_foreign_base_is_rejected(settings, monkeypatch):
    monkeypatch.setattr(
        providers, "get_json", lambda url, **kw: {"base": "USD", "rates": {"JPY": 150.0}}
    )
    with pytest.raises(HttpError):
        ExternalHTTPRateProvider(settings).fetch_snapshot()
