"""Database bootstrap utilities for the questionnaire service.

Exposes engine construction and the migrations runner that applies SQL files
from the local migrations directory. ORM models are not used; repositories
issue SQL through SQLAlchemy Core.
"""

from talent_questionnaire.db.base import build_engine, get_engine
from talent_questionnaire.db.migrations_runner import apply_migrations

__all__ = [
    "build_engine",
    "get_engine",
    "apply_migrations",
]
