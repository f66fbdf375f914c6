"""Settlement against an equal share.

Each payer's net balance is what they paid minus the average share of the
total. Positive means the payer is owed money, negative means they owe.
Balances are reported per payer only; no pairwise transfers are derived.

The participant count is the caller's explicit head-count when it is a
positive integer, otherwise the number of distinct payers with a floor of
one so an empty ledger still settles to zeros.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class SettlementView:
    payer_totals: Dict[str, float]
    unique_payers: List[str]
    participant_count: int
    average_share: float
    net_balances: Dict[str, float]

    def balance_for(self, payer: str) -> float:
        return self.net_balances.get(payer, -self.average_share)


def resolve_participant_count(
    unique_payer_count: int, explicit: Optional[Any] = None
) -> int:
    if isinstance(explicit, int) and not isinstance(explicit, bool) and explicit > 0:
        return explicit
    return max(1, unique_payer_count)


def settle(
    by_payer: Mapping[str, float],
    total: float,
    participant_count: Optional[int] = None,
) -> SettlementView:
    payer_totals = dict(by_payer)
    unique_payers = list(payer_totals)
    count = resolve_participant_count(len(unique_payers), participant_count)
    average = total / count
    net_balances = {p: payer_totals[p] - average for p in unique_payers}
    return SettlementView(
        payer_totals=payer_totals,
        unique_payers=unique_payers,
        participant_count=count,
        average_share=average,
        net_balances=net_balances,
    )
