"""User, team member and activity request schemas."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from otpcrm.models.enums import TeamMemberStatus, UserRole
from otpcrm.schemas.common import CamelModel


class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=150)
    email: str = Field(min_length=3, max_length=320)
    full_name: str | None = Field(default=None, max_length=255)
    hashed_password: str | None = Field(default=None, max_length=255)
    role: UserRole = UserRole.CALLER


class UserUpdate(CamelModel):
    username: str | None = Field(default=None, min_length=1, max_length=150)
    email: str | None = Field(default=None, min_length=3, max_length=320)
    full_name: str | None = Field(default=None, max_length=255)
    hashed_password: str | None = Field(default=None, max_length=255)
    role: UserRole | None = None


class TeamMemberUpsert(CamelModel):
    user_id: int
    role: UserRole = UserRole.CALLER
    status: TeamMemberStatus = TeamMemberStatus.ACTIVE


class ActivityCreate(CamelModel):
    action_type: str = Field(min_length=1, max_length=32)
    target_type: str = Field(min_length=1, max_length=32)
    user_id: int | None = None
    target_id: int | None = None
    details: dict[str, Any] | None = None
