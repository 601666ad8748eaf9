"""Team member model module."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from otpcrm.models.base import Base, CreatedAtMixin, utcnow
from otpcrm.models.enums import TeamMemberStatus, UserRole


class TeamMember(Base, CreatedAtMixin):
    __tablename__ = "team_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    role: Mapped[str] = mapped_column(String(32), default=UserRole.CALLER.value, nullable=False)
    status: Mapped[str] = mapped_column(String(32), default=TeamMemberStatus.ACTIVE.value, nullable=False)
    last_activity_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
