import math

import pytest

from tripbook.services.expense_aggregation import aggregate
from tripbook.services.settlement import resolve_participant_count, settle


def test_two_payers_settle_against_equal_share():
    agg = aggregate(
        [
            {"amount": 1000, "currency": "TWD", "payer": "Alice"},
            {"amount": 500, "currency": "TWD", "payer": "Bob"},
        ],
        None,
    )
    view = settle(agg.by_payer, agg.total)
    assert view.unique_payers == ["Alice", "Bob"]
    assert view.participant_count == 2
    assert view.average_share == 750
    assert view.net_balances == {"Alice": 250, "Bob": -250}


def test_empty_ledger_settles_to_zero():
    view = settle({}, 0)
    assert view.participant_count == 1
    assert view.average_share == 0
    assert view.unique_payers == []
    assert view.net_balances == {}
    assert view.payer_totals == {}


def test_explicit_head_count_overrides_payers():
    view = settle({"Alice": 900.0, "Bob": 100.0}, 1000.0, 5)
    assert view.participant_count == 5
    assert view.average_share == 200
    assert view.net_balances == {"Alice": 700, "Bob": -100}
    # participants who paid nothing owe the full share
    assert view.balance_for("Carol") == -200


@pytest.mark.parametrize("explicit", [None, 0, -3, True, 2.5, "4"])
def test_invalid_override_falls_back_to_payer_count(explicit):
    assert resolve_participant_count(3, explicit) == 3
    assert resolve_participant_count(0, explicit) == 1


def test_balances_sum_to_zero_without_override():
    by_payer = {"Alice": 1234.56, "Bob": 78.9, "me": 3333.3333333, "Dan": 0.01}
    total = sum(by_payer.values())
    view = settle(by_payer, total)
    assert math.isclose(sum(view.net_balances.values()), 0.0, abs_tol=1e-9 * total)


def test_payer_order_is_preserved_not_sorted():
    view = settle({"Zoe": 1.0, "Adam": 2.0, "Mia": 3.0}, 6.0)
    assert view.unique_payers == ["Zoe", "Adam", "Mia"]


def test_result_does_not_alias_input():
    by_payer = {"Alice": 10.0}
    view = settle(by_payer, 10.0)
    by_payer["Bob"] = 5.0
    assert view.payer_totals == {"Alice": 10.0}
