"""Timesheet request schemas."""

from __future__ import annotations

import datetime as dt

from pydantic import Field

from otpcrm.schemas.common import CamelModel


class TimesheetCreate(CamelModel):
    user_id: int
    date: dt.date
    lead_id: int | None = None
    hours_worked: float = Field(default=0.0, ge=0, le=24)
    description: str | None = Field(default=None, max_length=10000)
    approved: bool = False
    approved_by_user_id: int | None = None


class TimesheetUpdate(CamelModel):
    date: dt.date | None = None
    lead_id: int | None = None
    hours_worked: float | None = Field(default=None, ge=0, le=24)
    description: str | None = Field(default=None, max_length=10000)
    approved: bool | None = None
    approved_by_user_id: int | None = None
