"""Configuration module for the OTP CRM data layer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from otpcrm.core.exceptions import ConfigurationError

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    DB_CONNECTIVITY_REQUIRED: bool
    DB_ECHO: bool
    LOG_LEVEL: str
    LOG_FILE: str
    LEAD_ID_PAD_WIDTH: int
    LEAD_ID_MAX_RETRIES: int
    DEFAULT_LIST_LIMIT: int
    ACTIVITY_PAGE_SIZE: int

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    @property
    def default_list_limit(self) -> int | None:
        """Implicit page size for list queries, ``None`` when unbounded."""
        return self.DEFAULT_LIST_LIMIT or None


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    debug = _as_bool(os.getenv("DEBUG"), default=(resolved_env != "production"))

    config = Config(
        APP_NAME="OTP CRM",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=debug if resolved_env != "production" else False,
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./otpcrm.db"),
        DB_CONNECTIVITY_REQUIRED=_as_bool(
            os.getenv("DB_CONNECTIVITY_REQUIRED"), default=(resolved_env == "production")
        ),
        DB_ECHO=_as_bool(os.getenv("DB_ECHO"), default=False),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
        LEAD_ID_PAD_WIDTH=int(os.getenv("LEAD_ID_PAD_WIDTH", "4")),
        LEAD_ID_MAX_RETRIES=int(os.getenv("LEAD_ID_MAX_RETRIES", "5")),
        DEFAULT_LIST_LIMIT=int(os.getenv("DEFAULT_LIST_LIMIT", "0")),
        ACTIVITY_PAGE_SIZE=int(os.getenv("ACTIVITY_PAGE_SIZE", "100")),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in {"sqlite", "sqlite+pysqlite", "postgresql", "postgresql+psycopg2"}:
        raise ConfigurationError(
            "DATABASE_URL must use sqlite:// or postgresql:// style URL."
        )
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    if not 1 <= config.LEAD_ID_PAD_WIDTH <= 9:
        raise ConfigurationError("LEAD_ID_PAD_WIDTH must be between 1 and 9.")
    if config.LEAD_ID_MAX_RETRIES < 1:
        raise ConfigurationError("LEAD_ID_MAX_RETRIES must be >= 1.")
    if config.DEFAULT_LIST_LIMIT < 0:
        raise ConfigurationError("DEFAULT_LIST_LIMIT must be >= 0.")
    if config.ACTIVITY_PAGE_SIZE < 1:
        raise ConfigurationError("ACTIVITY_PAGE_SIZE must be >= 1.")
    if config.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    if config.is_production and "change_me" in config.DATABASE_URL.lower():
        raise ConfigurationError("Production DATABASE_URL uses placeholder credentials.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
