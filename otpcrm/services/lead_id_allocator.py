"""Year-scoped sequential lead identifiers.

Lead codes look like ``26-0001``: a two-digit year prefix, a separator and a
zero-padded counter that restarts at 1 for every new prefix. ``leads.lead_id``
is unique, so two writers that compute the same code cannot both commit; the
loser rolls back, re-reads the latest code and tries again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from otpcrm.core.config import get_config
from otpcrm.core.exceptions import TransactionError, TransientError
from otpcrm.models.base import utcnow
from otpcrm.models.lead import Lead

logger = logging.getLogger(__name__)

LEAD_ID_SEPARATOR = "-"


def year_prefix(year: int) -> str:
    """Two-digit year prefix, e.g. ``2026 -> "26"``."""
    return f"{year % 100:02d}"


def format_lead_id(prefix: str, number: int, width: int) -> str:
    return f"{prefix}{LEAD_ID_SEPARATOR}{number:0{width}d}"


def extract_lead_number(lead_id: str | None, prefix: str) -> int:
    """Numeric suffix of ``lead_id`` under ``prefix``; 0 when absent or malformed."""
    if not lead_id:
        return 0
    head = f"{prefix}{LEAD_ID_SEPARATOR}"
    if not lead_id.startswith(head):
        return 0
    suffix = lead_id[len(head):]
    if not suffix.isdigit():
        return 0
    return int(suffix)


class LeadIdAllocator:
    """Derives the next lead code for a year and inserts leads under it."""

    def __init__(self, pad_width: int | None = None, max_attempts: int | None = None) -> None:
        config = get_config()
        self.pad_width = pad_width or config.LEAD_ID_PAD_WIDTH
        self.max_attempts = max_attempts or config.LEAD_ID_MAX_RETRIES

    def latest_lead_id(self, session: Session, prefix: str) -> str | None:
        stmt = (
            select(Lead.lead_id)
            .where(Lead.lead_id.startswith(f"{prefix}{LEAD_ID_SEPARATOR}", autoescape=True))
            .order_by(Lead.id.desc())
            .limit(1)
            .with_for_update()
        )
        return session.scalar(stmt)

    def highest_lead_number(self, session: Session, prefix: str) -> int:
        """Largest well-formed counter under ``prefix``; 0 when there is none."""
        stmt = select(Lead.lead_id).where(Lead.lead_id.startswith(f"{prefix}{LEAD_ID_SEPARATOR}", autoescape=True))
        return max((extract_lead_number(code, prefix) for code in session.scalars(stmt)), default=0)

    def allocate_lead_id(self, session: Session, current_year: int | None = None) -> str:
        """Return the next code for ``current_year``.

        The counter continues from the most recently inserted code under the
        prefix. If that code is malformed, the highest well-formed counter is
        used instead. A failed read raises ``TransactionError``; nothing is
        allocated.
        """
        prefix = year_prefix(current_year or utcnow().year)
        try:
            latest = self.latest_lead_id(session, prefix)
            number = extract_lead_number(latest, prefix)
            if latest is not None and number == 0:
                number = self.highest_lead_number(session, prefix)
        except SQLAlchemyError as exc:
            logger.error(
                "lead_id.read_failed",
                extra={"event": "lead_id.read_failed", "prefix": prefix, "error": str(exc)},
            )
            raise TransactionError("Could not read the latest lead id.") from exc
        return format_lead_id(prefix, number + 1, self.pad_width)

    def insert_with_lead_id(
        self,
        session: Session,
        build: Callable[[str], Lead],
        *,
        current_year: int | None = None,
        after_insert: Callable[[Lead], None] | None = None,
    ) -> Lead:
        """Allocate a code, insert ``build(code)`` and commit, retrying on code collisions.

        ``after_insert`` runs inside the same transaction, after the lead row
        has its primary key.
        """
        for attempt in range(1, self.max_attempts + 1):
            lead_code: str | None = None
            try:
                lead_code = self.allocate_lead_id(session, current_year)
                lead = build(lead_code)
                session.add(lead)
                session.flush()
                if after_insert is not None:
                    after_insert(lead)
                session.commit()
            except TransactionError:
                session.rollback()
                raise
            except IntegrityError as exc:
                session.rollback()
                if lead_code is None or not self._is_taken(session, lead_code):
                    logger.exception(
                        "lead.create.integrity_failed",
                        extra={"event": "lead.create.integrity_failed", "lead_code": lead_code},
                    )
                    raise TransactionError("Lead insert violated a constraint.") from exc
                logger.warning(
                    "lead_id.conflict_retry",
                    extra={
                        "event": "lead_id.conflict_retry",
                        "lead_code": lead_code,
                        "attempt": attempt,
                        "max_attempts": self.max_attempts,
                    },
                )
                continue
            except SQLAlchemyError as exc:
                session.rollback()
                logger.exception(
                    "lead.create.failed",
                    extra={"event": "lead.create.failed", "lead_code": lead_code},
                )
                raise TransactionError("Lead creation failed and was rolled back.") from exc

            logger.info(
                "lead_id.allocated",
                extra={"event": "lead_id.allocated", "lead_code": lead_code, "lead_id": lead.id, "attempt": attempt},
            )
            return lead

        logger.error(
            "lead_id.allocation_exhausted",
            extra={"event": "lead_id.allocation_exhausted", "max_attempts": self.max_attempts},
        )
        raise TransientError(f"Could not allocate a unique lead id after {self.max_attempts} attempts.")

    @staticmethod
    def _is_taken(session: Session, lead_code: str) -> bool:
        return session.scalar(select(Lead.id).where(Lead.lead_id == lead_code)) is not None
