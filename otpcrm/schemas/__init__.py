"""Request and filter schemas."""

from otpcrm.schemas.calls import CallCreate, CallUpdate, ScheduledCallCreate, ScheduledCallUpdate
from otpcrm.schemas.common import CamelModel, parse_payload
from otpcrm.schemas.filters import (
    ActivityFilters,
    CallFilters,
    LeadFilters,
    ScheduledCallFilters,
    TimesheetFilters,
)
from otpcrm.schemas.leads import LeadCreate, LeadUpdate
from otpcrm.schemas.team import ActivityCreate, TeamMemberUpsert, UserCreate, UserUpdate
from otpcrm.schemas.timesheets import TimesheetCreate, TimesheetUpdate

__all__ = [
    "ActivityCreate",
    "ActivityFilters",
    "CallCreate",
    "CallFilters",
    "CallUpdate",
    "CamelModel",
    "LeadCreate",
    "LeadFilters",
    "LeadUpdate",
    "ScheduledCallCreate",
    "ScheduledCallFilters",
    "ScheduledCallUpdate",
    "TeamMemberUpsert",
    "TimesheetCreate",
    "TimesheetFilters",
    "TimesheetUpdate",
    "UserCreate",
    "UserUpdate",
    "parse_payload",
]
