import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .db.migrate import apply_migrations
from .core import errors
from .routers import (
    checklists,
    expenses,
    health,
    itinerary,
    notes,
    rates,
    settings as settings_router,
    weather,
)
from .services.rates.cache_service import RateSnapshotService, build_rate_snapshot_service


def create_app(
    settings_override: Settings | None = None,
    rate_service: RateSnapshotService | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    rate_service: inject a prepared rate snapshot service (tests, offline use);
    built from settings.exchange_rate_provider otherwise.
    """
    settings = settings_override or get_settings()
    init_logging(debug=settings.debug)

    # Ensure database schema (idempotent) so test-injected fresh DBs have tables
    try:
        apply_migrations(settings.db_path)  # type: ignore[arg-type]
    except Exception:
        logging.getLogger("tripbook").exception("failed to apply migrations on startup")
        raise

    app = FastAPI(title=settings.app_name, debug=settings.debug, version=settings.version)
    app.state.settings = settings
    app.state.rate_service = rate_service or build_rate_snapshot_service(settings)

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(expenses.router)
    app.include_router(itinerary.router)
    app.include_router(notes.router)
    app.include_router(checklists.router)
    app.include_router(rates.router)
    app.include_router(weather.router)
    app.include_router(settings_router.router)

    @app.get("/")
    async def root():
        return {"message": "Tripbook API", "version": settings.version}

    return app
