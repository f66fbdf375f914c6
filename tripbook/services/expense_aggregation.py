"""Expense aggregation in base currency.

Folds a collection of expense records into a grand total, a per-category map
and a per-payer map. Category and payer keys appear in first-appearance order
and only for values that occur at least once (no zero-filled categories).

Input records may be ``ExpenseRecord`` instances or raw mappings (e.g. DAL
rows); raw mappings are normalized through ``ExpenseRecord`` so defaults for
currency, category and payer are applied in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Union

from tripbook.models.expense import ExpenseRecord
from tripbook.services.rates.conversion import RatesLike, is_convertible, to_base

ExpenseLike = Union[ExpenseRecord, Mapping[str, Any]]


@dataclass(frozen=True)
class ExpenseAggregate:
    total: float
    by_category: Dict[str, float]
    by_payer: Dict[str, float]


def normalize_expense(raw: ExpenseLike) -> ExpenseRecord:
    if isinstance(raw, ExpenseRecord):
        return raw
    return ExpenseRecord.model_validate(dict(raw))


def normalize_expenses(expenses: Iterable[ExpenseLike]) -> List[ExpenseRecord]:
    return [normalize_expense(e) for e in expenses]


def aggregate(expenses: Iterable[ExpenseLike], rates: RatesLike) -> ExpenseAggregate:
    total = 0.0
    by_category: Dict[str, float] = {}
    by_payer: Dict[str, float] = {}
    for record in normalize_expenses(expenses):
        value = to_base(record.amount, record.currency, rates)
        total += value
        by_category[record.category] = by_category.get(record.category, 0.0) + value
        by_payer[record.payer] = by_payer.get(record.payer, 0.0) + value
    return ExpenseAggregate(total=total, by_category=by_category, by_payer=by_payer)


def unconverted_currencies(
    expenses: Iterable[ExpenseLike], rates: RatesLike
) -> List[str]:
    """Currencies counted at face value because no rate is known for them."""
    missing: List[str] = []
    for record in normalize_expenses(expenses):
        if record.amount and not is_convertible(record.currency, rates):
            if record.currency not in missing:
                missing.append(record.currency)
    return missing


def distinct_payers(expenses: Iterable[ExpenseLike]) -> List[str]:
    seen: Dict[str, None] = {}
    for record in normalize_expenses(expenses):
        seen.setdefault(record.payer, None)
    return list(seen)
