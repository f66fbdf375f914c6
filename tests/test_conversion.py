import pytest

from tripbook.models.rates import ExchangeRateSnapshot
from tripbook.services.rates.conversion import is_convertible, lookup_rate, to_base

SNAPSHOT = ExchangeRateSnapshot(rates={"USD": 0.03, "JPY": 5.0})


@pytest.mark.parametrize("rates", [None, SNAPSHOT, {"rates": {"TWD": 2.0}}])
def test_base_currency_is_identity(rates):
    assert to_base(1234.5, "TWD", rates) == 1234.5


def test_missing_snapshot_leaves_amount_unchanged():
    assert to_base(100, "USD", None) == 100


def test_unknown_currency_leaves_amount_unchanged():
    assert to_base(100, "KRW", SNAPSHOT) == 100
    assert not is_convertible("KRW", SNAPSHOT)


def test_foreign_amount_divides_by_rate():
    assert to_base(100, "USD", SNAPSHOT) == pytest.approx(3333.3333333)
    assert to_base(500, "JPY", SNAPSHOT) == pytest.approx(100.0)


def test_plain_mapping_snapshot_is_accepted():
    assert to_base(100, "USD", {"base": "TWD", "rates": {"USD": 0.03}}) == pytest.approx(
        100 / 0.03
    )


def test_currency_code_is_case_insensitive():
    assert to_base(500, "jpy", SNAPSHOT) == pytest.approx(100.0)


@pytest.mark.parametrize("amount", [None, "abc", float("nan"), -5, 0, ""])
def test_unusable_amounts_become_zero(amount):
    assert to_base(amount, "USD", SNAPSHOT) == 0


def test_numeric_string_amount_is_coerced():
    assert to_base("1000", "TWD", None) == 1000.0


def test_missing_currency_defaults_to_base():
    assert to_base(42, None, SNAPSHOT) == 42


@pytest.mark.parametrize("bad_rate", [0, -1, "x", None])
def test_unusable_rate_falls_back_to_identity(bad_rate):
    rates = {"rates": {"USD": bad_rate}}
    assert lookup_rate("USD", rates) is None
    assert to_base(10, "USD", rates) == 10
