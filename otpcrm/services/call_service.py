"""Call log service."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from otpcrm.models.base import utcnow
from otpcrm.models.call import Call
from otpcrm.schemas.calls import CallCreate, CallUpdate
from otpcrm.schemas.common import parse_payload
from otpcrm.schemas.filters import CallFilters
from otpcrm.services.base_service import BaseService
from otpcrm.services.query_composer import compose_call_query
from otpcrm.utils.validators import sanitize_fields

CALL_TEXT_FIELDS = ("outcome", "notes")


class CallService(BaseService):
    def get_call(self, call_id: int) -> Call | None:
        return self._get(Call, call_id)

    def list_calls(self, filters: CallFilters | Mapping[str, Any] | None = None) -> list[Call]:
        return self._fetch_all(compose_call_query(filters))

    def create_call(self, data: CallCreate | Mapping[str, Any]) -> Call:
        payload = sanitize_fields(parse_payload(CallCreate, data).model_dump(), CALL_TEXT_FIELDS)
        if payload.get("call_time") is None:
            payload["call_time"] = utcnow()
        return self._insert(Call(**payload))

    def update_call(self, call_id: int, data: CallUpdate | Mapping[str, Any]) -> Call | None:
        call = self.get_call(call_id)
        if call is None:
            return None
        changes = parse_payload(CallUpdate, data).model_dump(exclude_unset=True)
        if "call_time" in changes and changes["call_time"] is None:
            changes.pop("call_time")
        return self._merge(call, sanitize_fields(changes, CALL_TEXT_FIELDS))

    def delete_call(self, call_id: int) -> bool:
        return self._delete(Call, call_id)
