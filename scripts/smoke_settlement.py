"""Smoke script for the ledger pipeline.

Demonstrates:
 1. Raw expense dicts (string amounts, blank payers) normalized with defaults.
 2. Conversion to TWD with the built-in static rate table.
 3. Per-payer settlement, with and without a head-count override.

NOTE: This is a lightweight diagnostic and not a formal test.
"""

from pprint import pprint

from tripbook.services.expense_aggregation import aggregate
from tripbook.services.rates.providers import StaticRateProvider
from tripbook.services.settlement import settle

EXPENSES = [
    {"title": "Sushi", "amount": "4700", "currency": "JPY", "category": "food", "payer": "Alice"},
    {"title": "Airport bus", "amount": 280, "payer": ""},
    {"title": "Museum", "amount": 30, "currency": "usd", "category": "ticket", "payer": "Bob"},
]


def run():
    snapshot = StaticRateProvider().fetch_snapshot()
    agg = aggregate(EXPENSES, snapshot)
    out = {
        "total": agg.total,
        "by_category": agg.by_category,
        "by_payer": agg.by_payer,
        "settle_by_payers": settle(agg.by_payer, agg.total),
        "settle_four_people": settle(agg.by_payer, agg.total, participant_count=4),
    }
    pprint(out)


if __name__ == "__main__":
    run()
