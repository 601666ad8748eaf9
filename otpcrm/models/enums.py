"""Canonical enum values for the CRM schema."""

from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    CALLER = "caller"
    VIEWER = "viewer"


class LeadStatus(str, enum.Enum):
    NEW = "new"
    CONTACTED = "contacted"
    FOLLOW_UP = "follow_up"
    NEGOTIATING = "negotiating"
    UNDER_CONTRACT = "under_contract"
    CLOSED = "closed"
    DEAD = "dead"


class ScheduledCallStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    MISSED = "missed"


class TeamMemberStatus(str, enum.Enum):
    ACTIVE = "active"
    ON_CALL = "on_call"
    BREAK = "break"
    OFFLINE = "offline"


class ActionType(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    CALL = "call"
    SCHEDULE = "schedule"


class TargetType(str, enum.Enum):
    LEAD = "lead"
    CALL = "call"
    SCHEDULED_CALL = "scheduled_call"
    TIMESHEET = "timesheet"
    USER = "user"
    TEAM_MEMBER = "team_member"
