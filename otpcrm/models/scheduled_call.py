"""Scheduled call model module."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from otpcrm.models.base import Base, TimestampMixin
from otpcrm.models.enums import ScheduledCallStatus


class ScheduledCall(Base, TimestampMixin):
    __tablename__ = "scheduled_calls"
    __table_args__ = (
        Index("idx_scheduled_calls_lead", "lead_id"),
        Index("idx_scheduled_calls_caller_time", "assigned_caller_id", "scheduled_time"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    lead_id: Mapped[int] = mapped_column(ForeignKey("leads.id"), nullable=False)
    assigned_caller_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"))
    scheduled_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(32), default=ScheduledCallStatus.PENDING.value, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
