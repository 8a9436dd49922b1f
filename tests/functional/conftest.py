"""Functional test bootstrap.

Every test gets its own in-memory SQLite database with the SQLite
migrations applied, so tests never share rows. The FastAPI app is built
around that engine through ``create_app(engine=...)``.
"""

from __future__ import annotations

import pathlib

import pytest
from fastapi.testclient import TestClient

from talent_questionnaire.config import AppConfig, DatabaseConfig, MigrationsConfig
from talent_questionnaire.db.base import build_engine
from talent_questionnaire.db.migrations_runner import apply_migrations
from talent_questionnaire.logic.events import get_buffered_events
from talent_questionnaire.logic.services import Services
from talent_questionnaire.main import create_app

_ROOT = pathlib.Path(__file__).resolve().parents[2]
SQLITE_MIGRATIONS = _ROOT / "sqlite_migrations"
MEMORY_URL = "sqlite+pysqlite:///:memory:"

@pytest.fixture
def admin_headers() -> dict:
    return {"X-User-Id": "admin-1", "X-User-Role": "admin"}


@pytest.fixture
def super_admin_headers() -> dict:
    return {"X-User-Id": "root-1", "X-User-Role": "super_admin"}


@pytest.fixture
def user_headers():
    def _headers(user_id: str = "u1", role: str = "talent") -> dict:
        return {"X-User-Id": user_id, "X-User-Role": role}

    return _headers


@pytest.fixture(autouse=True)
def clear_events():
    get_buffered_events(clear=True)
    yield
    get_buffered_events(clear=True)


@pytest.fixture
def sqlite_migrations_dir() -> str:
    return str(SQLITE_MIGRATIONS)


@pytest.fixture
def engine():
    eng = build_engine(MEMORY_URL)
    apply_migrations(eng, migrations_dir=str(SQLITE_MIGRATIONS))
    yield eng
    eng.dispose()


@pytest.fixture
def services(engine) -> Services:
    return Services.for_engine(engine)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        database=DatabaseConfig(dsn=MEMORY_URL),
        migrations=MigrationsConfig(auto_apply=True, directory=str(SQLITE_MIGRATIONS)),
    )


@pytest.fixture
def client(engine, app_config) -> TestClient:
    return TestClient(create_app(config=app_config, engine=engine))


@pytest.fixture
def acting(services):
    """A small category with one select and one multiselect question."""
    category = services.categories.create_category(
        {"name": "Acting", "slug": "acting", "target_roles": ["talent"], "sort_order": 1}
    )
    years = services.questions.create_question(
        {
            "category_id": category.id,
            "question": "How many years of acting experience do you have?",
            "slug": "years_experience",
            "question_type": "select",
            "options": [
                {"value": "0-1", "label": "0-1 years"},
                {"value": "2-5", "label": "2-5 years"},
                {"value": "6-10", "label": "6-10 years"},
                {"value": "11-15", "label": "11-15 years"},
            ],
            "sort_order": 1,
        }
    )
    specialty = services.questions.create_question(
        {
            "category_id": category.id,
            "question": "What are your primary acting specialties?",
            "slug": "primary_specialty",
            "question_type": "multiselect",
            "options": [
                {"value": "film", "label": "Film"},
                {"value": "theater", "label": "Theater"},
                {"value": "voice_over", "label": "Voice Over"},
            ],
            "sort_order": 2,
        }
    )
    return {"category": category, "years": years, "specialty": specialty}
