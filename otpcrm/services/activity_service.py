"""Activity (audit trail) service."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from otpcrm.models.activity import Activity
from otpcrm.models.base import Base
from otpcrm.models.call import Call
from otpcrm.models.enums import TargetType
from otpcrm.models.lead import Lead
from otpcrm.models.scheduled_call import ScheduledCall
from otpcrm.models.team_member import TeamMember
from otpcrm.models.timesheet import Timesheet
from otpcrm.models.user import User
from otpcrm.schemas.common import parse_payload
from otpcrm.schemas.filters import ActivityFilters
from otpcrm.schemas.team import ActivityCreate
from otpcrm.services.base_service import BaseService
from otpcrm.services.query_composer import compose_activity_query

TARGET_MODELS: dict[str, type[Base]] = {
    TargetType.LEAD.value: Lead,
    TargetType.CALL.value: Call,
    TargetType.SCHEDULED_CALL.value: ScheduledCall,
    TargetType.TIMESHEET.value: Timesheet,
    TargetType.USER.value: User,
    TargetType.TEAM_MEMBER.value: TeamMember,
}


class ActivityService(BaseService):
    def get_activity(self, activity_id: int) -> Activity | None:
        return self._get(Activity, activity_id)

    def list_activities(self, filters: ActivityFilters | Mapping[str, Any] | None = None) -> list[Activity]:
        return self._fetch_all(compose_activity_query(filters))

    def create_activity(self, data: ActivityCreate | Mapping[str, Any]) -> Activity:
        return self._insert(Activity(**parse_payload(ActivityCreate, data).model_dump()))

    def resolve_target(self, activity: Activity) -> Base | None:
        """Load the row an activity points at.

        ``target_id`` carries no foreign key, so the target may be gone or the
        tag unknown; both yield ``None``.
        """
        model = TARGET_MODELS.get(activity.target_type)
        if model is None or activity.target_id is None:
            return None
        return self._get(model, activity.target_id)
