"""Activity (audit log) model module."""

from __future__ import annotations

from sqlalchemy import JSON, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from otpcrm.models.base import Base, CreatedAtMixin


class Activity(Base, CreatedAtMixin):
    __tablename__ = "activities"
    __table_args__ = (
        Index("idx_activities_user_action_target", "user_id", "action_type", "target_type"),
        Index("idx_activities_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    action_type: Mapped[str] = mapped_column(String(32), nullable=False)
    # Tagged reference: target_type names the table, target_id is not a foreign key.
    target_type: Mapped[str] = mapped_column(String(32), nullable=False)
    target_id: Mapped[int | None] = mapped_column(Integer)
    details: Mapped[dict | None] = mapped_column(JSON)
