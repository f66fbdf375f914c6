from dataclasses import asdict
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from tripbook.db.dal import Database
from tripbook.models.constants import BASE_CURRENCY
from tripbook.models.expense import ExpenseIn, ExpenseOut, ExpenseRecord, ExpenseUpdateIn
from tripbook.models.rates import ExchangeRateSnapshot
from tripbook.routers.deps import get_db, get_rate_service
from tripbook.services.app_settings import get_participant_count
from tripbook.services.expense_aggregation import (
    aggregate,
    distinct_payers,
    unconverted_currencies,
)
from tripbook.services.money import round2
from tripbook.services.rates.cache_service import RateSnapshotService
from tripbook.services.rates.conversion import to_base
from tripbook.services.settlement import settle

router = APIRouter(prefix="/expenses", tags=["expenses"])


# Response Models --------------------------------------------------
class SettlementOut(BaseModel):
    payer_totals: Dict[str, float]
    unique_payers: List[str]
    participant_count: int
    average_share: float
    net_balances: Dict[str, float]


class ExpenseSummaryOut(BaseModel):
    base_currency: str
    total: float
    by_category: Dict[str, float]
    by_payer: Dict[str, float]
    settlement: SettlementOut
    rates_loaded: bool
    unconverted_currencies: List[str]


# Helpers ----------------------------------------------------------


def _parse_ts(raw: str) -> datetime:
    return datetime.fromisoformat(raw.replace("Z", ""))


def _row_to_expense_out(
    row: dict, rates: Optional[ExchangeRateSnapshot]
) -> ExpenseOut:
    record = ExpenseRecord.model_validate(row)
    return ExpenseOut(
        id=row["id"],
        title=record.title,
        amount=record.amount,
        currency=record.currency,
        category=record.category,
        payer=record.payer,
        split_count=record.split_count,
        date=date.fromisoformat(record.date) if record.date else None,
        base_amount=round2(to_base(record.amount, record.currency, rates)),
        per_person_amount=round2(record.per_person_amount),
        created_at=_parse_ts(row["created_at"]),
        updated_at=_parse_ts(row["updated_at"]),
    )


def _record_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply ledger defaults before anything reaches the database."""
    record = ExpenseRecord.model_validate(data)
    return record.model_dump(exclude={"id"})


# Routes -----------------------------------------------------------
@router.post(
    "/", response_model=ExpenseOut, status_code=201, summary="Create an expense"
)
async def create_expense(
    payload: ExpenseIn,
    db: Database = Depends(get_db),
    rate_service: RateSnapshotService = Depends(get_rate_service),
):
    expense_id = db.insert_expense(_record_values(payload.model_dump()))
    row = db.get_expense(expense_id)
    if not row:
        raise HTTPException(status_code=500, detail="expense not found after insert")
    return _row_to_expense_out(row, rate_service.current())


@router.get(
    "/", response_model=List[ExpenseOut], summary="List expenses with optional filters"
)
async def list_expenses_endpoint(
    start_date: Optional[date] = Query(None, description="Filter: start date inclusive"),
    end_date: Optional[date] = Query(None, description="Filter: end date inclusive"),
    payer: Optional[str] = Query(None, description="Filter by payer name"),
    category: Optional[str] = Query(None, description="Filter by category"),
    db: Database = Depends(get_db),
    rate_service: RateSnapshotService = Depends(get_rate_service),
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=400, detail="start_date cannot be after end_date"
        )
    rows = db.list_expenses(
        start_date=start_date, end_date=end_date, payer=payer, category=category
    )
    rates = rate_service.current()
    return [_row_to_expense_out(r, rates) for r in rows]


@router.get(
    "/summary",
    response_model=ExpenseSummaryOut,
    summary="Base-currency totals, category breakdown and settlement",
)
async def expense_summary(
    participants: Optional[int] = Query(
        None,
        ge=0,
        description="Head-count override; 0 or absent uses the stored override, else distinct payers",
    ),
    db: Database = Depends(get_db),
    rate_service: RateSnapshotService = Depends(get_rate_service),
):
    rows = db.list_expenses()
    rates = rate_service.current()
    agg = aggregate(rows, rates)
    head_count = participants or get_participant_count(db)
    view = settle(agg.by_payer, agg.total, head_count)
    return ExpenseSummaryOut(
        base_currency=BASE_CURRENCY,
        total=agg.total,
        by_category=agg.by_category,
        by_payer=agg.by_payer,
        settlement=SettlementOut(**asdict(view)),
        rates_loaded=rates is not None,
        unconverted_currencies=unconverted_currencies(rows, rates),
    )


@router.get(
    "/payers",
    response_model=List[str],
    summary="Distinct payer names in first-appearance order",
)
async def list_payers(db: Database = Depends(get_db)):
    return distinct_payers(db.list_expenses())


@router.get("/{expense_id}", response_model=ExpenseOut, summary="Get an expense")
async def get_expense(
    expense_id: int,
    db: Database = Depends(get_db),
    rate_service: RateSnapshotService = Depends(get_rate_service),
):
    row = db.get_expense(expense_id)
    if not row:
        raise HTTPException(status_code=404, detail="expense not found")
    return _row_to_expense_out(row, rate_service.current())


@router.patch(
    "/{expense_id}", response_model=ExpenseOut, summary="Edit an expense (partial)"
)
async def patch_expense(
    expense_id: int,
    payload: ExpenseUpdateIn,
    db: Database = Depends(get_db),
    rate_service: RateSnapshotService = Depends(get_rate_service),
):
    row = db.get_expense(expense_id)
    if not row:
        raise HTTPException(status_code=404, detail="expense not found")
    merged = {**row, **payload.model_dump(exclude_unset=True)}
    try:
        db.update_expense(expense_id, _record_values(merged))
    except ValueError:
        raise HTTPException(status_code=404, detail="expense not found")
    updated = db.get_expense(expense_id)
    if not updated:
        raise HTTPException(status_code=500, detail="expense disappeared after update")
    return _row_to_expense_out(updated, rate_service.current())


@router.delete("/{expense_id}", status_code=204, summary="Delete an expense")
async def delete_expense(expense_id: int, db: Database = Depends(get_db)):
    try:
        db.delete_expense(expense_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="expense not found")
    return None
