"""Call and scheduled call request schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from otpcrm.models.enums import ScheduledCallStatus
from otpcrm.schemas.common import CamelModel


class CallCreate(CamelModel):
    lead_id: int
    user_id: int | None = None
    call_time: datetime | None = None
    duration_seconds: int | None = Field(default=None, ge=0)
    outcome: str | None = Field(default=None, max_length=64)
    notes: str | None = Field(default=None, max_length=10000)


class CallUpdate(CamelModel):
    user_id: int | None = None
    call_time: datetime | None = None
    duration_seconds: int | None = Field(default=None, ge=0)
    outcome: str | None = Field(default=None, max_length=64)
    notes: str | None = Field(default=None, max_length=10000)


class ScheduledCallCreate(CamelModel):
    lead_id: int
    scheduled_time: datetime
    assigned_caller_id: int | None = None
    status: ScheduledCallStatus = ScheduledCallStatus.PENDING
    notes: str | None = Field(default=None, max_length=10000)


class ScheduledCallUpdate(CamelModel):
    scheduled_time: datetime | None = None
    assigned_caller_id: int | None = None
    status: ScheduledCallStatus | None = None
    notes: str | None = Field(default=None, max_length=10000)
