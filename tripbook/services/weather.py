"""Current-weather lookup against OpenWeatherMap.

Errors are reported as ``WeatherError`` with a short reason the UI can show
as-is: an unset key, a rejected key (HTTP 401) or an unknown city.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from tripbook.core.config import Settings
from tripbook.services.http_client import HttpError, get_json

logger = logging.getLogger("tripbook.weather")


class WeatherError(Exception):
    def __init__(self, reason: str, status_code: int):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


@dataclass(frozen=True)
class WeatherReport:
    city: str
    description: Optional[str]
    icon: Optional[str]
    temperature: Optional[float]
    feels_like: Optional[float]
    humidity: Optional[int]
    wind_speed: Optional[float]


def _parse_report(city: str, data: Dict[str, Any]) -> WeatherReport:
    weather = (data.get("weather") or [{}])[0]
    main = data.get("main") or {}
    wind = data.get("wind") or {}
    return WeatherReport(
        city=data.get("name") or city,
        description=weather.get("description"),
        icon=weather.get("icon"),
        temperature=main.get("temp"),
        feels_like=main.get("feels_like"),
        humidity=main.get("humidity"),
        wind_speed=wind.get("speed"),
    )


def fetch_current_weather(
    city: str, settings: Settings, api_key: Optional[str] = None
) -> WeatherReport:
    key = api_key or settings.weather_api_key
    if not key:
        raise WeatherError("weather API key not configured", 400)
    if not city or not city.strip():
        raise WeatherError("city is required", 400)
    try:
        data = get_json(
            str(settings.weather_api_base_url),
            params={
                "q": city.strip(),
                "units": settings.weather_units,
                "appid": key,
                "lang": settings.weather_lang,
            },
            timeout=settings.http_timeout_seconds,
            retries=1,
        )
    except HttpError as e:
        logger.warning("weather lookup for %r failed: %s", city, e)
        if e.status == 401:
            raise WeatherError("invalid or inactive API key", 401) from e
        if e.status == 404:
            raise WeatherError("city not found", 404) from e
        raise WeatherError("weather service unavailable", 502) from e
    return _parse_report(city.strip(), data)
