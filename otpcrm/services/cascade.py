"""Lead deletion together with every row that references the lead."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from otpcrm.core.exceptions import TransactionError
from otpcrm.models.base import Base
from otpcrm.models.call import Call
from otpcrm.models.lead import Lead
from otpcrm.models.scheduled_call import ScheduledCall
from otpcrm.models.timesheet import Timesheet

logger = logging.getLogger(__name__)

CascadeAction = Literal["delete", "detach"]

# Dependents of a lead, processed in this order before the lead row itself.
# Activities reference leads only through a tagged target id and are kept.
CASCADE_POLICY: tuple[tuple[type[Base], CascadeAction], ...] = (
    (Call, "delete"),
    (ScheduledCall, "delete"),
    (Timesheet, "delete"),
)


class DeleteOutcome(str, enum.Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"


@dataclass
class CascadeResult:
    outcome: DeleteOutcome
    counts: dict[str, int] = field(default_factory=dict)

    @property
    def deleted(self) -> bool:
        return self.outcome is DeleteOutcome.DELETED


class LeadCascadeDeleter:
    """Removes a lead and its dependents in a single transaction."""

    def __init__(self, policy: tuple[tuple[type[Base], CascadeAction], ...] = CASCADE_POLICY) -> None:
        self.policy = policy

    def delete_lead_cascade(
        self,
        session: Session,
        lead_pk: int,
        *,
        after_delete: Callable[[dict[str, int]], None] | None = None,
    ) -> CascadeResult:
        """Delete lead ``lead_pk`` and its dependents, committing once.

        ``after_delete`` receives the per-table counts and runs inside the
        same transaction, so rows it adds commit or roll back with the delete.

        Returns ``NOT_FOUND`` without touching the store when the lead does
        not exist. Any storage error rolls the whole unit back and raises
        ``TransactionError``.
        """
        counts: dict[str, int] = {}
        try:
            lead = session.get(Lead, lead_pk)
            if lead is None:
                logger.info(
                    "lead.cascade_delete.not_found",
                    extra={"event": "lead.cascade_delete.not_found", "lead_id": lead_pk},
                )
                return CascadeResult(DeleteOutcome.NOT_FOUND)

            for model, action in self.policy:
                counts[model.__tablename__] = self._apply(session, model, action, lead_pk)

            session.delete(lead)
            if after_delete is not None:
                after_delete(counts)
            session.flush()
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception(
                "lead.cascade_delete.failed",
                extra={"event": "lead.cascade_delete.failed", "lead_id": lead_pk, "counts": counts},
            )
            raise TransactionError(f"Deleting lead {lead_pk} failed and was rolled back.") from exc

        logger.info(
            "lead.cascade_delete.completed",
            extra={"event": "lead.cascade_delete.completed", "lead_id": lead_pk, "counts": counts},
        )
        return CascadeResult(DeleteOutcome.DELETED, counts)

    @staticmethod
    def _apply(session: Session, model: type[Base], action: CascadeAction, lead_pk: int) -> int:
        column = model.lead_id
        if action == "delete":
            stmt = delete(model).where(column == lead_pk)
        elif action == "detach":
            stmt = update(model).where(column == lead_pk).values(lead_id=None)
        else:
            raise ValueError(f"Unknown cascade action: {action}")
        result = session.execute(stmt)
        return result.rowcount or 0
