"""Functional tests for configuration loading, logging context and events."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from talent_questionnaire import __main__ as entrypoint
from talent_questionnaire.config import DEFAULT_DSN, load_config
from talent_questionnaire.logging_setup import RequestIdFilter, request_id_var
from talent_questionnaire.logic.events import (
    EVENT_BUFFER_LIMIT,
    RESPONSE_SAVED,
    get_buffered_events,
    publish,
    subscribe,
)

_ENV_KEYS = [
    "TEST_DATABASE_URL",
    "DATABASE_URL",
    "AUTO_APPLY_MIGRATIONS",
    "MIGRATIONS_DIR",
    "QUESTIONNAIRE_SEED_ON_STARTUP",
    "CORS_ORIGINS",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_defaults_without_any_source(clean_env):
    cfg = load_config()
    assert cfg.database.dsn == DEFAULT_DSN
    assert cfg.migrations.auto_apply is True
    assert cfg.migrations_directory() == "sqlite_migrations"
    assert cfg.seed.on_startup is False
    assert cfg.cors.origins == ["*"]
    assert cfg.logging.level == "INFO"


def test_environment_beats_files_and_json(clean_env, monkeypatch):
    (clean_env / "questionnaire_config.json").write_text(
        '{"database": {"dsn": "sqlite+pysqlite:///./from-json.db"}, "cors": {"origins": ["https://a.example"]}}',
        encoding="utf-8",
    )
    (clean_env / "config").mkdir()
    (clean_env / "config" / "seed.on_startup").write_text("yes\n", encoding="utf-8")
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg2://u:p@db/questionnaire")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    cfg = load_config()
    assert cfg.database.dsn == "postgresql+psycopg2://u:p@db/questionnaire"
    assert cfg.migrations_directory() == "migrations"
    assert cfg.seed.on_startup is True
    assert cfg.cors.origins == ["https://a.example"]
    assert cfg.logging.level == "DEBUG"


def test_test_database_url_takes_precedence(clean_env, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///./prod.db")
    monkeypatch.setenv("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")
    assert load_config().database.dsn == "sqlite+pysqlite:///:memory:"


def test_unknown_log_level_is_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(PydanticValidationError):
        load_config()


def test_request_id_filter_stamps_records():
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "hello", None, None)
    RequestIdFilter().filter(record)
    assert record.request_id == "-"

    token = request_id_var.set("req-9")
    try:
        RequestIdFilter().filter(record)
    finally:
        request_id_var.reset(token)
    assert record.request_id == "req-9"


def test_subscribers_see_events_until_unsubscribed():
    seen = []
    unsubscribe = subscribe(seen.append)
    try:
        publish(RESPONSE_SAVED, {"user_id": "u1", "question_id": 1})
    finally:
        unsubscribe()
    publish(RESPONSE_SAVED, {"user_id": "u1", "question_id": 2})

    assert [e["payload"]["question_id"] for e in seen] == [1]
    assert len(get_buffered_events()) == 2


def test_event_buffer_keeps_only_the_most_recent_events():
    for n in range(EVENT_BUFFER_LIMIT + 5):
        publish(RESPONSE_SAVED, {"user_id": "u1", "question_id": n})
    events = get_buffered_events()
    assert len(events) == EVENT_BUFFER_LIMIT
    assert events[0]["payload"]["question_id"] == 5
    assert events[-1]["payload"]["question_id"] == EVENT_BUFFER_LIMIT + 4


def test_failing_subscriber_is_logged_and_later_subscribers_still_run(caplog):
    def explode(event):
        raise RuntimeError("listener down")

    seen = []
    unsubscribe_broken = subscribe(explode)
    unsubscribe_ok = subscribe(seen.append)
    try:
        with caplog.at_level("ERROR"):
            publish(RESPONSE_SAVED, {"user_id": "u1", "question_id": 1})
    finally:
        unsubscribe_broken()
        unsubscribe_ok()
    assert len(seen) == 1
    assert "event_subscriber_failed" in caplog.text


def test_entrypoint_serves_the_app_with_uvicorn(mocker):
    app = object()
    mocker.patch.object(entrypoint, "create_app", return_value=app)
    run = mocker.patch.object(entrypoint.uvicorn, "run")
    entrypoint.main(["--host", "0.0.0.0", "--port", "9001"])
    run.assert_called_once_with(app, host="0.0.0.0", port=9001, log_config=None)
