"""SQLAlchemy model package for the CRM schema."""

from otpcrm.models.activity import Activity
from otpcrm.models.base import Base
from otpcrm.models.call import Call
from otpcrm.models.enums import (
    ActionType,
    LeadStatus,
    ScheduledCallStatus,
    TargetType,
    TeamMemberStatus,
    UserRole,
)
from otpcrm.models.lead import Lead
from otpcrm.models.scheduled_call import ScheduledCall
from otpcrm.models.team_member import TeamMember
from otpcrm.models.timesheet import Timesheet
from otpcrm.models.user import User

__all__ = [
    "ActionType",
    "Activity",
    "Base",
    "Call",
    "Lead",
    "LeadStatus",
    "ScheduledCall",
    "ScheduledCallStatus",
    "TargetType",
    "TeamMember",
    "TeamMemberStatus",
    "Timesheet",
    "User",
    "UserRole",
]
