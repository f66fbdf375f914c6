from fastapi import APIRouter, Depends

from tripbook.core.config import Settings
from tripbook.routers.deps import get_app_settings, get_rate_service
from tripbook.services.rates.cache_service import RateSnapshotService

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness and rate snapshot status")
async def health(
    settings: Settings = Depends(get_app_settings),
    svc: RateSnapshotService = Depends(get_rate_service),
):
    return {
        "status": "ok",
        "version": settings.version,
        "rate_provider": svc.provider_name,
        "rates_loaded": svc.peek() is not None,
    }
