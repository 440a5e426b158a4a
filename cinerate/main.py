"""Application factory for the CineRate API."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cinerate.config import AppConfig, load_config
from cinerate.db.base import Database, create_database_engine, get_database
from cinerate.db.migrations_runner import apply_migrations
from cinerate.http.problem import (
    handle_api_error,
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from cinerate.http.request_id import RequestIdMiddleware
from cinerate.logging_setup import configure_logging
from cinerate.logic.errors import ApiError, StorageError
from cinerate.routes import api_router

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the FastAPI application.

    `config` defaults to `load_config()`. `database` defaults to a handle over
    a new engine for `config.database.url`; when `auto_migrate` is on the SQL
    migrations are applied before the app is returned.
    """
    configure_logging()
    config = config or load_config()
    if database is None:
        database = Database(create_database_engine(config.database.url, echo=config.database.echo))
    if config.database.auto_migrate:
        applied = apply_migrations(database.engine)
        logger.info("startup_migrations_done applied=%s", len(applied))

    app = FastAPI(title="CineRate API")
    app.state.config = config
    app.state.database = database

    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    @app.get("/health")
    def health(db: Database = Depends(get_database)):
        try:
            db.fetch_one("SELECT 1 AS ok")
        except StorageError as exc:
            logger.warning("health_db_unavailable detail=%s", exc.detail)
            return {"status": "degraded", "db": False}
        return {"status": "ok", "db": True}

    @app.on_event("shutdown")
    def _dispose_engine() -> None:
        database.dispose()

    logger.info("app_created dialect=%s", database.dialect_name)
    return app


__all__ = ["create_app"]
