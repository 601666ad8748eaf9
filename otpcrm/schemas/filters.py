"""Filter request schemas for list queries.

Filter inputs arrive as loosely typed mappings. Each recognized field is
coerced or defaulted here; unknown keys are ignored.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Literal

from pydantic import field_validator
from pydantic.alias_generators import to_camel

from otpcrm.models.enums import LeadStatus, ScheduledCallStatus
from otpcrm.schemas.common import CamelModel
from otpcrm.utils.validators import coerce_optional_int, split_csv

# Public sort key -> Lead attribute name.
LEAD_SORT_FIELDS: dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "status": "status",
    "ownerName": "owner_name",
    "propertyAddress": "property_address",
    "city": "city",
    "state": "state",
    "leadId": "lead_id",
}
DEFAULT_LEAD_SORT = "createdAt"

SortOrder = Literal["asc", "desc"]


def _as_datetime(value: Any) -> Any:
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _as_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        if "T" in stripped or " " in stripped:
            try:
                return datetime.fromisoformat(stripped.replace("Z", "+00:00")).date()
            except ValueError:
                return stripped
        return stripped
    return value


class PageFilters(CamelModel):
    limit: int | None = None
    offset: int | None = None

    @field_validator("limit", "offset", mode="before")
    @classmethod
    def _numeric_or_none(cls, value: Any) -> int | None:
        return coerce_optional_int(value)


class LeadFilters(PageFilters):
    status: list[LeadStatus] | None = None
    search: str | None = None
    assigned_to_user_id: int | None = None
    created_by_user_id: int | None = None
    sort_by: str = DEFAULT_LEAD_SORT
    sort_order: SortOrder = "desc"

    @field_validator("status", mode="before")
    @classmethod
    def _split_status(cls, value: Any) -> list[Any] | None:
        values = split_csv(value)
        return values or None

    @field_validator("search", mode="before")
    @classmethod
    def _blank_search(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("assigned_to_user_id", "created_by_user_id", mode="before")
    @classmethod
    def _optional_id(cls, value: Any) -> int | None:
        return coerce_optional_int(value)

    @field_validator("sort_by", mode="before")
    @classmethod
    def _allowed_sort(cls, value: Any) -> str:
        if isinstance(value, str):
            candidate = value.strip()
            if candidate in LEAD_SORT_FIELDS:
                return candidate
            if to_camel(candidate) in LEAD_SORT_FIELDS:
                return to_camel(candidate)
        return DEFAULT_LEAD_SORT

    @field_validator("sort_order", mode="before")
    @classmethod
    def _known_order(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip().lower() == "asc":
            return "asc"
        return "desc"

    @property
    def sort_attribute(self) -> str:
        return LEAD_SORT_FIELDS[self.sort_by]


class CallFilters(PageFilters):
    lead_id: int | None = None
    user_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("lead_id", "user_id", mode="before")
    @classmethod
    def _optional_id(cls, value: Any) -> int | None:
        return coerce_optional_int(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _datetime_bound(cls, value: Any) -> Any:
        return _as_datetime(value)

    @field_validator("start_date", "end_date")
    @classmethod
    def _utc_bound(cls, value: datetime | None) -> datetime | None:
        # Stored timestamps are UTC; offset-aware bounds are shifted to match.
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc)
        return value


class ScheduledCallFilters(CallFilters):
    status: ScheduledCallStatus | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _blank_status(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TimesheetFilters(PageFilters):
    user_id: int | None = None
    lead_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    approved: bool | None = None

    @field_validator("lead_id", "user_id", mode="before")
    @classmethod
    def _optional_id(cls, value: Any) -> int | None:
        return coerce_optional_int(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _date_bound(cls, value: Any) -> Any:
        return _as_date(value)


class ActivityFilters(PageFilters):
    user_id: int | None = None
    action_type: str | None = None
    target_type: str | None = None
    target_id: int | None = None

    @field_validator("user_id", "target_id", mode="before")
    @classmethod
    def _optional_id(cls, value: Any) -> int | None:
        return coerce_optional_int(value)
