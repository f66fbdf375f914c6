"""Shared FastAPI dependencies.

The application factory stores its Settings and rate service on
``app.state`` so tests can run against an isolated database and provider.
"""

from fastapi import Depends, Request

from tripbook.core.config import Settings
from tripbook.db.dal import Database
from tripbook.services.rates.cache_service import RateSnapshotService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(settings: Settings = Depends(get_app_settings)) -> Database:
    return Database(settings.db_path)


def get_rate_service(request: Request) -> RateSnapshotService:
    return request.app.state.rate_service
