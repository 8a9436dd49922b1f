"""Configuration utilities for the questionnaire service.

This module loads application configuration with the following rules:
- Primary source: `questionnaire_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG_FILE = Path("questionnaire_config.json")
DEFAULT_DSN = "sqlite+pysqlite:///./questionnaire.db"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Unreadable override files are ignored, the next source applies
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _as_bool(text: Optional[str]) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes", "on"}


class DatabaseConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v.strip()

    @property
    def is_sqlite(self) -> bool:
        return self.dsn.startswith("sqlite")


class MigrationsConfig(BaseModel):
    auto_apply: bool = Field(default=True)
    directory: Optional[str] = None


class SeedConfig(BaseModel):
    on_startup: bool = Field(default=False)


class CorsConfig(BaseModel):
    origins: List[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def level_must_be_known(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        up = str(v).strip().upper()
        if up not in allowed:
            raise ValueError(f"logging.level must be one of {sorted(allowed)}")
        return up


class AppConfig(BaseModel):
    database: DatabaseConfig
    migrations: MigrationsConfig = Field(default_factory=MigrationsConfig)
    seed: SeedConfig = Field(default_factory=SeedConfig)
    cors: CorsConfig = Field(default_factory=CorsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def migrations_directory(self) -> str:
        """Return the migrations directory matching the configured dialect."""
        if self.migrations.directory:
            return self.migrations.directory
        return "sqlite_migrations" if self.database.is_sqlite else "migrations"


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) questionnaire_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_CONFIG_FILE)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return ",".join(str(v) for v in cur)
        return str(cur) if cur is not None else default

    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or DEFAULT_DSN
    )

    auto_apply_text = _env("AUTO_APPLY_MIGRATIONS") or _read_config_file("migrations.auto_apply") or _base("migrations.auto_apply", "true")
    migrations_dir = _env("MIGRATIONS_DIR") or _read_config_file("migrations.directory") or _base("migrations.directory")

    seed_text = _env("QUESTIONNAIRE_SEED_ON_STARTUP") or _read_config_file("seed.on_startup") or _base("seed.on_startup", "false")

    origins_text = _env("CORS_ORIGINS") or _read_config_file("cors.origins") or _base("cors.origins", "*")
    origins = [o.strip() for o in str(origins_text).split(",") if o.strip()]

    log_level = _env("LOG_LEVEL") or _read_config_file("logging.level") or _base("logging.level", "INFO")

    try:
        return AppConfig(
            database=DatabaseConfig(dsn=dsn),
            migrations=MigrationsConfig(auto_apply=_as_bool(auto_apply_text), directory=migrations_dir),
            seed=SeedConfig(on_startup=_as_bool(seed_text)),
            cors=CorsConfig(origins=origins or ["*"]),
            logging=LoggingConfig(level=log_level),
        )
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "MigrationsConfig",
    "SeedConfig",
    "CorsConfig",
    "LoggingConfig",
    "load_config",
]
