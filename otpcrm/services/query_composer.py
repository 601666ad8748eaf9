"""Compose filtered, ordered and paged SELECT statements for list endpoints.

Each ``compose_*`` function accepts either a parsed filter model or a raw
mapping (camelCase or snake_case keys) and returns an unexecuted ``Select``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import Select, and_, asc, desc, false, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from otpcrm.core.config import get_config
from otpcrm.core.exceptions import DependencyError
from otpcrm.models.activity import Activity
from otpcrm.models.call import Call
from otpcrm.models.enums import ActionType, TargetType
from otpcrm.models.lead import Lead
from otpcrm.models.scheduled_call import ScheduledCall
from otpcrm.models.timesheet import Timesheet
from otpcrm.schemas.common import parse_payload
from otpcrm.schemas.filters import (
    ActivityFilters,
    CallFilters,
    LeadFilters,
    ScheduledCallFilters,
    TimesheetFilters,
)

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"

FilterInput = Mapping[str, Any] | None


def _like_pattern(term: str) -> str:
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"


def _apply_page(
    stmt: Select[Any],
    limit: int | None,
    offset: int | None,
    default_limit: int | None = None,
) -> Select[Any]:
    if limit is None:
        limit = default_limit
    if limit is not None:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)
    return stmt


def lead_ids_created_by(session: Session, user_id: int) -> list[int]:
    """Lead primary keys whose ``create`` activity was recorded for ``user_id``."""
    stmt = (
        select(Activity.target_id)
        .where(
            Activity.action_type == ActionType.CREATE.value,
            Activity.target_type == TargetType.LEAD.value,
            Activity.user_id == user_id,
            Activity.target_id.is_not(None),
        )
        .distinct()
    )
    try:
        return list(session.scalars(stmt).all())
    except SQLAlchemyError as exc:
        session.rollback()
        raise DependencyError(f"Activity lookup for creator {user_id} failed.") from exc


def compose_lead_query(session: Session, filters: LeadFilters | FilterInput = None) -> Select[tuple[Lead]]:
    """Build the lead list query.

    Predicates are AND-combined. A ``createdByUserId`` with no recorded
    creations yields an empty result; a failed creator lookup drops that
    constraint and logs ``query.created_by_filter.degraded``.
    """
    parsed = parse_payload(LeadFilters, filters)
    conditions = []

    if parsed.status:
        conditions.append(Lead.status.in_(parsed.status))

    if parsed.assigned_to_user_id is not None:
        conditions.append(Lead.assigned_to_user_id == parsed.assigned_to_user_id)

    if parsed.created_by_user_id is not None:
        try:
            created_ids = lead_ids_created_by(session, parsed.created_by_user_id)
        except DependencyError as exc:
            logger.warning(
                "query.created_by_filter.degraded",
                extra={
                    "event": "query.created_by_filter.degraded",
                    "user_id": parsed.created_by_user_id,
                    "error": str(exc.__cause__ or exc),
                },
            )
        else:
            conditions.append(Lead.id.in_(created_ids) if created_ids else false())

    if parsed.search:
        pattern = _like_pattern(parsed.search)
        conditions.append(
            or_(
                Lead.property_address.ilike(pattern, escape=LIKE_ESCAPE),
                Lead.owner_name.ilike(pattern, escape=LIKE_ESCAPE),
                Lead.owner_phone.ilike(pattern, escape=LIKE_ESCAPE),
                Lead.owner_email.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    direction = asc if parsed.sort_order == "asc" else desc
    stmt = select(Lead)
    if conditions:
        stmt = stmt.where(and_(*conditions))
    stmt = stmt.order_by(direction(getattr(Lead, parsed.sort_attribute)), direction(Lead.id))
    return _apply_page(stmt, parsed.limit, parsed.offset, get_config().default_list_limit)


def compose_call_query(filters: CallFilters | FilterInput = None) -> Select[tuple[Call]]:
    parsed = parse_payload(CallFilters, filters)
    stmt = select(Call)
    if parsed.lead_id is not None:
        stmt = stmt.where(Call.lead_id == parsed.lead_id)
    if parsed.user_id is not None:
        stmt = stmt.where(Call.user_id == parsed.user_id)
    if parsed.start_date is not None:
        stmt = stmt.where(Call.call_time >= parsed.start_date)
    if parsed.end_date is not None:
        stmt = stmt.where(Call.call_time <= parsed.end_date)
    stmt = stmt.order_by(Call.call_time.desc(), Call.id.desc())
    return _apply_page(stmt, parsed.limit, parsed.offset, get_config().default_list_limit)


def compose_scheduled_call_query(
    filters: ScheduledCallFilters | FilterInput = None,
) -> Select[tuple[ScheduledCall]]:
    # userId filters on the assigned caller.
    parsed = parse_payload(ScheduledCallFilters, filters)
    stmt = select(ScheduledCall)
    if parsed.status:
        stmt = stmt.where(ScheduledCall.status == parsed.status)
    if parsed.user_id is not None:
        stmt = stmt.where(ScheduledCall.assigned_caller_id == parsed.user_id)
    if parsed.lead_id is not None:
        stmt = stmt.where(ScheduledCall.lead_id == parsed.lead_id)
    if parsed.start_date is not None:
        stmt = stmt.where(ScheduledCall.scheduled_time >= parsed.start_date)
    if parsed.end_date is not None:
        stmt = stmt.where(ScheduledCall.scheduled_time <= parsed.end_date)
    stmt = stmt.order_by(ScheduledCall.scheduled_time.asc(), ScheduledCall.id.asc())
    return _apply_page(stmt, parsed.limit, parsed.offset, get_config().default_list_limit)


def compose_timesheet_query(filters: TimesheetFilters | FilterInput = None) -> Select[tuple[Timesheet]]:
    parsed = parse_payload(TimesheetFilters, filters)
    stmt = select(Timesheet)
    if parsed.user_id is not None:
        stmt = stmt.where(Timesheet.user_id == parsed.user_id)
    if parsed.lead_id is not None:
        stmt = stmt.where(Timesheet.lead_id == parsed.lead_id)
    if parsed.start_date is not None:
        stmt = stmt.where(Timesheet.date >= parsed.start_date)
    if parsed.end_date is not None:
        stmt = stmt.where(Timesheet.date <= parsed.end_date)
    if parsed.approved is not None:
        stmt = stmt.where(Timesheet.approved == parsed.approved)
    stmt = stmt.order_by(Timesheet.date.desc(), Timesheet.id.desc())
    return _apply_page(stmt, parsed.limit, parsed.offset, get_config().default_list_limit)


def compose_activity_query(filters: ActivityFilters | FilterInput = None) -> Select[tuple[Activity]]:
    """Activity feed, newest first, paged by ``ACTIVITY_PAGE_SIZE`` unless a limit is given."""
    parsed = parse_payload(ActivityFilters, filters)
    stmt = select(Activity)
    if parsed.user_id is not None:
        stmt = stmt.where(Activity.user_id == parsed.user_id)
    if parsed.action_type:
        stmt = stmt.where(Activity.action_type == parsed.action_type)
    if parsed.target_type:
        stmt = stmt.where(Activity.target_type == parsed.target_type)
    if parsed.target_id is not None:
        stmt = stmt.where(Activity.target_id == parsed.target_id)
    stmt = stmt.order_by(Activity.created_at.desc(), Activity.id.desc())
    return _apply_page(stmt, parsed.limit, parsed.offset or 0, get_config().ACTIVITY_PAGE_SIZE)
