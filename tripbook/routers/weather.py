from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from tripbook.core.config import Settings
from tripbook.db.dal import Database
from tripbook.routers.deps import get_app_settings, get_db
from tripbook.services.app_settings import get_city_name, get_weather_api_key
from tripbook.services.weather import WeatherError, fetch_current_weather

router = APIRouter(prefix="/weather", tags=["weather"])


class WeatherOut(BaseModel):
    city: str
    description: Optional[str] = None
    icon: Optional[str] = None
    temperature: Optional[float] = None
    feels_like: Optional[float] = None
    humidity: Optional[int] = None
    wind_speed: Optional[float] = None


def _lookup(city: str, db: Database, settings: Settings) -> WeatherOut:
    try:
        report = fetch_current_weather(
            city, settings, api_key=get_weather_api_key(db, settings)
        )
    except WeatherError as e:
        raise HTTPException(status_code=e.status_code, detail=e.reason) from e
    return WeatherOut(**asdict(report))


@router.get("/", response_model=WeatherOut, summary="Current weather for a city")
async def current_weather(
    city: Optional[str] = Query(None, description="Defaults to the configured city"),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    return _lookup(city or get_city_name(db), db, settings)


@router.get(
    "/itinerary/{entry_id}",
    response_model=WeatherOut,
    summary="Current weather where an itinerary entry takes place",
)
async def entry_weather(
    entry_id: int,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    row = db.get_itinerary(entry_id)
    if not row:
        raise HTTPException(status_code=404, detail="itinerary entry not found")
    return _lookup(row.get("city") or get_city_name(db), db, settings)
