from fastapi import APIRouter, Depends, HTTPException

from tripbook.core.config import Settings
from tripbook.db.dal import Database
from tripbook.models.settings import LocalSettingsIn, LocalSettingsOut
from tripbook.routers.deps import get_app_settings, get_db
from tripbook.services.app_settings import (
    get_city_name,
    get_currency_code,
    get_participant_count,
    get_weather_api_key,
    set_city_name,
    set_currency_code,
    set_participant_count,
    set_weather_api_key,
)

router = APIRouter(prefix="/settings", tags=["settings"])


def _current(db: Database, settings: Settings) -> LocalSettingsOut:
    return LocalSettingsOut(
        city_name=get_city_name(db),
        currency_code=get_currency_code(db),
        weather_api_key_configured=bool(get_weather_api_key(db, settings)),
        participant_count=get_participant_count(db),
    )


@router.get("/", response_model=LocalSettingsOut, summary="Local trip settings")
async def read_settings(
    db: Database = Depends(get_db), settings: Settings = Depends(get_app_settings)
):
    return _current(db, settings)


@router.put("/", response_model=LocalSettingsOut, summary="Update local trip settings")
async def update_settings(
    payload: LocalSettingsIn,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        if payload.city_name is not None:
            set_city_name(db, payload.city_name)
        if payload.currency_code is not None:
            set_currency_code(db, payload.currency_code)
        if payload.weather_api_key is not None:
            set_weather_api_key(db, payload.weather_api_key)
        if "participant_count" in payload.model_fields_set:
            set_participant_count(db, payload.participant_count)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _current(db, settings)
