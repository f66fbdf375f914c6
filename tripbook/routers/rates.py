from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from tripbook.models.constants import BASE_CURRENCY
from tripbook.models.expense import normalize_currency
from tripbook.models.rates import RatesStatus
from tripbook.routers.deps import get_rate_service
from tripbook.services.money import round_money
from tripbook.services.rates.cache_service import RateSnapshotService
from tripbook.services.rates.conversion import lookup_rate, to_base

"""Rates router.

Endpoints:
    - GET /rates            -> current snapshot, or loaded=false before the first fetch
    - POST /rates/refresh   -> force a refresh; the previous snapshot survives failures
    - GET /rates/convert    -> preview of an amount in the base currency
"""

router = APIRouter(prefix="/rates", tags=["rates"])


class ConversionPreview(BaseModel):
    amount: float
    currency: str
    base_currency: str
    base_amount: float
    # base units per 1 unit of currency; None when no rate is known
    rate_to_base: Optional[float] = None


@router.get("/", response_model=RatesStatus, summary="Current exchange rate snapshot")
async def get_rates(svc: RateSnapshotService = Depends(get_rate_service)):
    snapshot = svc.current()
    return RatesStatus(loaded=snapshot is not None, snapshot=snapshot)


@router.post("/refresh", response_model=RatesStatus, summary="Refresh exchange rates now")
async def refresh_rates(svc: RateSnapshotService = Depends(get_rate_service)):
    snapshot = svc.refresh()
    if snapshot is None:
        raise HTTPException(status_code=502, detail="exchange rates unavailable")
    return RatesStatus(loaded=True, snapshot=snapshot)


@router.get(
    "/convert",
    response_model=ConversionPreview,
    summary="Convert an amount to the base currency",
)
async def convert_amount(
    amount: float = Query(..., ge=0),
    currency: str = Query(..., min_length=3, max_length=3),
    svc: RateSnapshotService = Depends(get_rate_service),
):
    snapshot = svc.current()
    code = normalize_currency(currency)
    if code == BASE_CURRENCY:
        rate_to_base: Optional[float] = 1.0
    else:
        rate = lookup_rate(code, snapshot)
        rate_to_base = round_money(1 / rate, 4) if rate else None
    return ConversionPreview(
        amount=amount,
        currency=code,
        base_currency=BASE_CURRENCY,
        base_amount=round_money(to_base(amount, code, snapshot), 2),
        rate_to_base=rate_to_base,
    )
