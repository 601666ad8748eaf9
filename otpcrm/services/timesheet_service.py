"""Timesheet service."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from otpcrm.models.base import utcnow
from otpcrm.models.timesheet import Timesheet
from otpcrm.schemas.common import parse_payload
from otpcrm.schemas.filters import TimesheetFilters
from otpcrm.schemas.timesheets import TimesheetCreate, TimesheetUpdate
from otpcrm.services.base_service import BaseService
from otpcrm.services.query_composer import compose_timesheet_query
from otpcrm.utils.validators import sanitize_fields

_NOT_NULL_FIELDS = ("date", "hours_worked", "approved")


class TimesheetService(BaseService):
    def get_timesheet(self, timesheet_id: int) -> Timesheet | None:
        return self._get(Timesheet, timesheet_id)

    def list_timesheets(self, filters: TimesheetFilters | Mapping[str, Any] | None = None) -> list[Timesheet]:
        return self._fetch_all(compose_timesheet_query(filters))

    def create_timesheet(self, data: TimesheetCreate | Mapping[str, Any]) -> Timesheet:
        payload = sanitize_fields(parse_payload(TimesheetCreate, data).model_dump(), ("description",))
        return self._insert(Timesheet(**payload))

    def update_timesheet(
        self,
        timesheet_id: int,
        data: TimesheetUpdate | Mapping[str, Any],
    ) -> Timesheet | None:
        """Apply the supplied fields and bump ``updated_at``; ``None`` when absent."""
        timesheet = self.get_timesheet(timesheet_id)
        if timesheet is None:
            return None
        changes = parse_payload(TimesheetUpdate, data).model_dump(exclude_unset=True)
        for name in _NOT_NULL_FIELDS:
            if name in changes and changes[name] is None:
                changes.pop(name)
        changes = sanitize_fields(changes, ("description",))
        changes["updated_at"] = utcnow()
        return self._merge(timesheet, changes)

    def delete_timesheet(self, timesheet_id: int) -> bool:
        return self._delete(Timesheet, timesheet_id)
