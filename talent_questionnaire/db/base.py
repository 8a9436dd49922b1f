"""SQLAlchemy engine construction.

The service targets PostgreSQL in production but supports SQLite for local
development and CI. No declarative models are defined here; this module only
manages connection lifecycle. Repositories receive an Engine explicitly.
"""

from __future__ import annotations

import logging
import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def _db_url() -> str:
    return (
        os.getenv("TEST_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or "sqlite+pysqlite:///:memory:"
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
    cur = dbapi_connection.cursor()
    try:
        cur.execute("PRAGMA foreign_keys=ON;")
    finally:
        cur.close()


def build_engine(url: str | None = None) -> Engine:
    """Create a new Engine for ``url`` without caching it.

    For SQLite in-memory URLs, use a StaticPool so every connection sees the
    same database. SQLite connections always enforce foreign keys.
    """
    resolved_url = url or _db_url()
    kwargs: dict = {"future": True, "pool_pre_ping": True}
    is_sqlite = resolved_url.startswith("sqlite")
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in resolved_url:
            kwargs["poolclass"] = StaticPool
    engine = create_engine(resolved_url, **kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    logger.info("engine_built dialect=%s", engine.dialect.name)
    return engine


# Module-level cached Engine shared by the running application
_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None


def get_engine(url: str | None = None) -> Engine:
    """Return a process-wide Engine for the given URL, building it on first use."""
    global _ENGINE, _ENGINE_URL
    resolved_url = url or _db_url()
    if _ENGINE is None or _ENGINE_URL != resolved_url:
        _ENGINE = build_engine(resolved_url)
        _ENGINE_URL = resolved_url
    return _ENGINE
