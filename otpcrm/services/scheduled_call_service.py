"""Scheduled call service."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from otpcrm.models.base import utcnow
from otpcrm.models.scheduled_call import ScheduledCall
from otpcrm.schemas.calls import ScheduledCallCreate, ScheduledCallUpdate
from otpcrm.schemas.common import parse_payload
from otpcrm.schemas.filters import ScheduledCallFilters
from otpcrm.services.base_service import BaseService
from otpcrm.services.query_composer import compose_scheduled_call_query
from otpcrm.utils.validators import sanitize_fields

_NOT_NULL_FIELDS = ("scheduled_time", "status")


class ScheduledCallService(BaseService):
    """Upcoming calls per lead and caller. Listing is ordered soonest first."""

    def get_scheduled_call(self, scheduled_call_id: int) -> ScheduledCall | None:
        return self._get(ScheduledCall, scheduled_call_id)

    def list_scheduled_calls(
        self, filters: ScheduledCallFilters | Mapping[str, Any] | None = None
    ) -> list[ScheduledCall]:
        return self._fetch_all(compose_scheduled_call_query(filters))

    def create_scheduled_call(self, data: ScheduledCallCreate | Mapping[str, Any]) -> ScheduledCall:
        payload = sanitize_fields(parse_payload(ScheduledCallCreate, data).model_dump(), ("notes",))
        now = utcnow()
        return self._insert(ScheduledCall(**payload, created_at=now, updated_at=now))

    def update_scheduled_call(
        self,
        scheduled_call_id: int,
        data: ScheduledCallUpdate | Mapping[str, Any],
    ) -> ScheduledCall | None:
        scheduled_call = self.get_scheduled_call(scheduled_call_id)
        if scheduled_call is None:
            return None
        changes = parse_payload(ScheduledCallUpdate, data).model_dump(exclude_unset=True)
        for name in _NOT_NULL_FIELDS:
            if name in changes and changes[name] is None:
                changes.pop(name)
        changes = sanitize_fields(changes, ("notes",))
        changes["updated_at"] = utcnow()
        return self._merge(scheduled_call, changes)

    def delete_scheduled_call(self, scheduled_call_id: int) -> bool:
        return self._delete(ScheduledCall, scheduled_call_id)
