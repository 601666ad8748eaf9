"""Timesheet model module."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import Boolean, Date, Float, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from otpcrm.models.base import Base, TimestampMixin


class Timesheet(Base, TimestampMixin):
    __tablename__ = "timesheets"
    __table_args__ = (
        Index("idx_timesheets_user_date", "user_id", "date"),
        Index("idx_timesheets_lead", "lead_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    # Not every timesheet is lead-specific.
    lead_id: Mapped[int | None] = mapped_column(ForeignKey("leads.id"))
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    hours_worked: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    approved_by_user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"))
