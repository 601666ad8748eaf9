"""Single entry point bundling every entity service over one session."""

from __future__ import annotations

from sqlalchemy.orm import Session

from otpcrm.database import db as db_module
from otpcrm.services.activity_service import ActivityService
from otpcrm.services.call_service import CallService
from otpcrm.services.lead_service import LeadService
from otpcrm.services.scheduled_call_service import ScheduledCallService
from otpcrm.services.team_member_service import TeamMemberService
from otpcrm.services.timesheet_service import TimesheetService
from otpcrm.services.user_service import UserService


class Repository:
    """Entity services sharing one session.

    Usage::

        with Repository() as repo:
            lead = repo.leads.create_lead({"propertyAddress": "1 Main St"}, created_by_user_id=7)
            repo.calls.list_calls({"leadId": lead.id})
    """

    def __init__(self, db: Session | None = None) -> None:
        self.db = db or db_module.new_session()
        self.leads = LeadService(self.db)
        self.calls = CallService(self.db)
        self.scheduled_calls = ScheduledCallService(self.db)
        self.timesheets = TimesheetService(self.db)
        self.team_members = TeamMemberService(self.db)
        self.activities = ActivityService(self.db)
        self.users = UserService(self.db)

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "Repository":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.db.rollback()
        self.close()
