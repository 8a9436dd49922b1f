from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from talent_questionnaire.config import AppConfig, load_config
from talent_questionnaire.db.base import get_engine
from talent_questionnaire.db.migrations_runner import apply_migrations
from talent_questionnaire.http.problem import (
    handle_aggregate_error,
    handle_http_exception,
    handle_questionnaire_error,
    handle_request_validation_error,
    handle_unexpected_error,
)
from talent_questionnaire.http.request_id import RequestIdMiddleware
from talent_questionnaire.logging_setup import configure_logging
from talent_questionnaire.logic.errors import AggregateError, QuestionnaireError
from talent_questionnaire.logic.services import Services
from talent_questionnaire.middleware.cors import apply_cors
from talent_questionnaire.routes import api_router

logger = logging.getLogger(__name__)


def _health_check(engine: Engine):
    def check() -> dict:
        try:
            with engine.connect() as conn:
                conn.execute(sql_text("SELECT 1"))
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}

    return check


def create_app(config: Optional[AppConfig] = None, engine: Optional[Engine] = None) -> FastAPI:
    """Build the application.

    ``engine`` overrides the configured DSN (tests pass a fresh in-memory
    engine). Migrations and the optional starter seed run here, before the
    first request, so nothing happens at import time.
    """
    config = config or load_config()
    configure_logging(config.logging.level)

    engine = engine or get_engine(config.database.dsn)
    if config.migrations.auto_apply:
        try:
            apply_migrations(engine, config.migrations_directory())
        except Exception:
            logger.error("Failed to apply migrations at startup", exc_info=True)
            raise
    else:
        logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")

    services = Services.for_engine(engine)
    if config.seed.on_startup:
        services.seeder.seed_all()

    app = FastAPI(title="Talent Questionnaire Service")
    app.state.config = config
    app.state.services = services

    app.add_exception_handler(AggregateError, handle_aggregate_error)
    app.add_exception_handler(QuestionnaireError, handle_questionnaire_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    apply_cors(app, origins=config.cors.origins)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    health_check = _health_check(engine)

    @app.get("/health")
    def health():  # pragma: no cover - trivial
        return health_check()

    logger.info("app_created dialect=%s seed_on_startup=%s", engine.dialect.name, config.seed.on_startup)
    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
