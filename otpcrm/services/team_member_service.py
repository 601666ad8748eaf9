"""Team member presence service, keyed by user id."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from otpcrm.core.exceptions import ValidationError
from otpcrm.models.base import utcnow
from otpcrm.models.team_member import TeamMember
from otpcrm.schemas.common import parse_payload
from otpcrm.schemas.team import TeamMemberUpsert
from otpcrm.services.base_service import BaseService

logger = logging.getLogger(__name__)


class TeamMemberService(BaseService):
    """At most one team member row exists per user."""

    def get_team_member(self, user_id: int) -> TeamMember | None:
        return self.db.scalar(select(TeamMember).where(TeamMember.user_id == user_id))

    def list_team_members(self) -> list[TeamMember]:
        stmt = select(TeamMember).order_by(TeamMember.last_activity_at.desc(), TeamMember.id.desc())
        limit = self._default_limit()
        if limit is not None:
            stmt = stmt.limit(limit)
        return self._fetch_all(stmt)

    def create_or_update_team_member(self, data: TeamMemberUpsert | Mapping[str, Any]) -> TeamMember:
        """Upsert by ``user_id`` and stamp ``last_activity_at``.

        A concurrent insert for the same user makes ours fail on the unique
        key; the row it created is then updated instead.
        """
        parsed = parse_payload(TeamMemberUpsert, data)
        existing = self.get_team_member(parsed.user_id)
        if existing is not None:
            return self._touch(existing, parsed)

        member = TeamMember(
            user_id=parsed.user_id,
            role=parsed.role,
            status=parsed.status,
            last_activity_at=utcnow(),
        )
        self.db.add(member)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            existing = self.get_team_member(parsed.user_id)
            if existing is None:
                raise ValidationError(f"User {parsed.user_id} does not exist.") from exc
            logger.info(
                "team_member.insert_race",
                extra={"event": "team_member.insert_race", "user_id": parsed.user_id},
            )
            return self._touch(existing, parsed)

        self.db.refresh(member)
        logger.info(
            "team_member.created",
            extra={"event": "team_member.created", "user_id": parsed.user_id},
        )
        return member

    def delete_team_member(self, user_id: int) -> bool:
        member = self.get_team_member(user_id)
        if member is None:
            return False
        self.db.delete(member)
        self.commit()
        return True

    def _touch(self, member: TeamMember, parsed: TeamMemberUpsert) -> TeamMember:
        # Omitted fields keep their stored values; schema defaults apply to inserts only.
        changes = parsed.model_dump(exclude_unset=True)
        changes.pop("user_id", None)
        changes["last_activity_at"] = utcnow()
        return self._merge(member, changes)
