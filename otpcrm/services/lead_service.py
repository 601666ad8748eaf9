"""Lead service: allocation-backed creation, filtered listing and cascade deletion."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from otpcrm.models.activity import Activity
from otpcrm.models.base import utcnow
from otpcrm.models.enums import ActionType, TargetType
from otpcrm.models.lead import Lead
from otpcrm.schemas.common import parse_payload
from otpcrm.schemas.filters import LeadFilters
from otpcrm.schemas.leads import LeadCreate, LeadUpdate
from otpcrm.services.base_service import BaseService
from otpcrm.services.cascade import DeleteOutcome, LeadCascadeDeleter
from otpcrm.services.lead_id_allocator import LeadIdAllocator
from otpcrm.services.query_composer import compose_lead_query
from otpcrm.utils.validators import sanitize_fields

logger = logging.getLogger(__name__)

LEAD_TEXT_FIELDS = (
    "property_address",
    "city",
    "state",
    "zip_code",
    "owner_name",
    "owner_phone",
    "owner_email",
    "source",
    "notes",
)
# Present in the update schema but never nullable in storage.
_REQUIRED_ON_UPDATE = ("property_address", "status")


class LeadService(BaseService):
    """Service for lead CRUD.

    Leads are created through ``LeadIdAllocator`` so every row gets a unique
    year-prefixed ``lead_id``; deletes go through ``LeadCascadeDeleter``.
    """

    def __init__(
        self,
        db: Session | None = None,
        allocator: LeadIdAllocator | None = None,
        deleter: LeadCascadeDeleter | None = None,
    ) -> None:
        super().__init__(db)
        self.allocator = allocator or LeadIdAllocator()
        self.deleter = deleter or LeadCascadeDeleter()

    def get_lead(self, lead_id: int) -> Lead | None:
        return self._get(Lead, lead_id)

    def get_lead_by_code(self, lead_code: str) -> Lead | None:
        return self.db.scalar(select(Lead).where(Lead.lead_id == lead_code))

    def list_leads(self, filters: LeadFilters | Mapping[str, Any] | None = None) -> list[Lead]:
        return self._fetch_all(compose_lead_query(self.db, filters))

    def create_lead(
        self,
        data: LeadCreate | Mapping[str, Any],
        created_by_user_id: int | None = None,
        *,
        current_year: int | None = None,
    ) -> Lead:
        payload = sanitize_fields(parse_payload(LeadCreate, data).model_dump(), LEAD_TEXT_FIELDS)

        def build(lead_code: str) -> Lead:
            return Lead(lead_id=lead_code, **payload)

        def record_creation(lead: Lead) -> None:
            if created_by_user_id is None:
                return
            self.db.add(
                Activity(
                    user_id=created_by_user_id,
                    action_type=ActionType.CREATE.value,
                    target_type=TargetType.LEAD.value,
                    target_id=lead.id,
                    details={"leadId": lead.lead_id},
                )
            )

        lead = self.allocator.insert_with_lead_id(
            self.db,
            build,
            current_year=current_year,
            after_insert=record_creation,
        )
        self.db.refresh(lead)
        logger.info(
            "lead.created",
            extra={
                "event": "lead.created",
                "lead_id": lead.id,
                "lead_code": lead.lead_id,
                "user_id": created_by_user_id,
            },
        )
        return lead

    def update_lead(
        self,
        lead_id: int,
        data: LeadUpdate | Mapping[str, Any],
        actor_user_id: int | None = None,
    ) -> Lead | None:
        lead = self.get_lead(lead_id)
        if lead is None:
            return None

        changes = parse_payload(LeadUpdate, data).model_dump(exclude_unset=True)
        for name in _REQUIRED_ON_UPDATE:
            if name in changes and changes[name] is None:
                changes.pop(name)
        sanitize_fields(changes, LEAD_TEXT_FIELDS)

        for field_name, value in changes.items():
            setattr(lead, field_name, value)
        lead.updated_at = utcnow()
        if actor_user_id is not None:
            self.db.add(
                Activity(
                    user_id=actor_user_id,
                    action_type=ActionType.UPDATE.value,
                    target_type=TargetType.LEAD.value,
                    target_id=lead.id,
                    details={"fields": sorted(changes)},
                )
            )
        self.commit()
        self.db.refresh(lead)
        logger.info(
            "lead.updated",
            extra={"event": "lead.updated", "lead_id": lead.id, "user_id": actor_user_id},
        )
        return lead

    def delete_lead(self, lead_id: int, actor_user_id: int | None = None) -> DeleteOutcome:
        """Cascade-delete a lead; the actor's audit entry commits in the same transaction."""

        def record_deletion(counts: dict[str, int]) -> None:
            if actor_user_id is None:
                return
            self.db.add(
                Activity(
                    user_id=actor_user_id,
                    action_type=ActionType.DELETE.value,
                    target_type=TargetType.LEAD.value,
                    target_id=lead_id,
                    details={"counts": dict(counts)},
                )
            )

        return self.deleter.delete_lead_cascade(self.db, lead_id, after_delete=record_deletion).outcome
