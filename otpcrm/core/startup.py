"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging

from otpcrm.core.config import get_config
from otpcrm.core.logging_config import configure_logging
from otpcrm.database.db import get_active_database_url, verify_database_connection

logger = logging.getLogger(__name__)


def validate_startup_config() -> None:
    """Check store connectivity, then log the lead-id and paging settings in effect."""
    config = get_config()
    database_ok = verify_database_connection()
    active_database_url = get_active_database_url()
    if not database_ok and config.DB_CONNECTIVITY_REQUIRED:
        raise RuntimeError("Database connectivity check failed.")
    if not database_ok:
        logger.warning(
            "startup.database.connectivity_optional_failed",
            extra={"event": "startup.database.connectivity_optional_failed"},
        )

    if config.is_production and active_database_url.startswith("sqlite"):
        # SQLite ignores FOR UPDATE; lead ids rely on unique-key retries alone.
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected", "max_attempts": config.LEAD_ID_MAX_RETRIES},
        )
    if config.is_production and config.default_list_limit is None:
        logger.warning(
            "startup.lists.unbounded",
            extra={"event": "startup.lists.unbounded"},
        )

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "lead_id_pad_width": config.LEAD_ID_PAD_WIDTH,
            "max_attempts": config.LEAD_ID_MAX_RETRIES,
            "default_list_limit": config.default_list_limit,
            "activity_page_size": config.ACTIVITY_PAGE_SIZE,
        },
    )


def bootstrap() -> None:
    """Initialize logging and validate runtime configuration."""
    configure_logging()
    validate_startup_config()
