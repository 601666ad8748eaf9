from __future__ import annotations

import datetime as dt

import pytest

import otpcrm.services.query_composer as composer
from otpcrm.core.config import get_config
from otpcrm.core.exceptions import DependencyError, ValidationError
from otpcrm.models import Activity, Call, ScheduledCall, Timesheet
from otpcrm.models.enums import LeadStatus


def _codes(session, stmt) -> list[str]:
    return [lead.lead_id for lead in session.scalars(stmt)]


def _record_creation(session, user_id: int, lead_pk: int) -> None:
    session.add(Activity(user_id=user_id, action_type="create", target_type="lead", target_id=lead_pk))
    session.commit()


@pytest.fixture
def leads(make_lead):
    return [
        make_lead(
            "26-0001",
            property_address="123 Main Street",
            owner_name="Dana Owner",
            status=LeadStatus.NEW.value,
            city="Austin",
        ),
        make_lead(
            "26-0002",
            property_address="9 Elm Ave",
            owner_name="Sam Seller",
            owner_phone="555-0100",
            status=LeadStatus.CONTACTED.value,
            city="Boston",
        ),
        make_lead(
            "26-0003",
            property_address="50% Off Road",
            owner_email="deals@example.com",
            status=LeadStatus.DEAD.value,
            city="Chicago",
        ),
    ]


def test_no_filters_returns_everything(session, leads):
    assert sorted(_codes(session, composer.compose_lead_query(session))) == ["26-0001", "26-0002", "26-0003"]


def test_unknown_sort_field_behaves_like_default(session, leads):
    defaulted = _codes(session, composer.compose_lead_query(session, {}))
    unknown = _codes(session, composer.compose_lead_query(session, {"sortBy": "password", "sortOrder": "sideways"}))
    assert unknown == defaulted


def test_sort_by_city_ascending(session, leads):
    stmt = composer.compose_lead_query(session, {"sortBy": "city", "sortOrder": "asc"})
    assert _codes(session, stmt) == ["26-0001", "26-0002", "26-0003"]

    stmt = composer.compose_lead_query(session, {"sort_by": "city", "sort_order": "desc"})
    assert _codes(session, stmt) == ["26-0003", "26-0002", "26-0001"]


def test_status_filter_accepts_comma_separated_values(session, leads):
    stmt = composer.compose_lead_query(session, {"status": "new, dead", "sortBy": "leadId", "sortOrder": "asc"})
    assert _codes(session, stmt) == ["26-0001", "26-0003"]


def test_unknown_status_is_rejected(session, leads):
    with pytest.raises(ValidationError):
        composer.compose_lead_query(session, {"status": "bogus"})


def test_search_is_case_insensitive_substring(session, leads):
    assert _codes(session, composer.compose_lead_query(session, {"search": "123 main"})) == ["26-0001"]
    assert _codes(session, composer.compose_lead_query(session, {"search": "0100"})) == ["26-0002"]
    assert _codes(session, composer.compose_lead_query(session, {"search": "DEALS@"})) == ["26-0003"]


def test_search_treats_wildcards_literally(session, leads):
    assert _codes(session, composer.compose_lead_query(session, {"search": "%"})) == ["26-0003"]
    assert _codes(session, composer.compose_lead_query(session, {"search": "_"})) == []


def test_created_by_restricts_to_recorded_creations(session, leads, user):
    _record_creation(session, user.id, leads[1].id)
    stmt = composer.compose_lead_query(session, {"createdByUserId": user.id})
    assert _codes(session, stmt) == ["26-0002"]


def test_created_by_without_creations_returns_empty(session, leads, user):
    stmt = composer.compose_lead_query(session, {"createdByUserId": user.id})
    assert _codes(session, stmt) == []


def test_created_by_lookup_failure_degrades(session, leads, user, monkeypatch, caplog):
    def _fail(*_args, **_kwargs):
        raise DependencyError("activity store unavailable")

    monkeypatch.setattr(composer, "lead_ids_created_by", _fail)

    stmt = composer.compose_lead_query(session, {"createdByUserId": user.id})

    assert len(_codes(session, stmt)) == 3
    assert any(getattr(record, "event", None) == "query.created_by_filter.degraded" for record in caplog.records)


def test_filters_are_and_combined(session, leads, user):
    _record_creation(session, user.id, leads[0].id)
    _record_creation(session, user.id, leads[1].id)
    stmt = composer.compose_lead_query(session, {"createdByUserId": user.id, "status": ["contacted"]})
    assert _codes(session, stmt) == ["26-0002"]


def test_non_numeric_limit_is_ignored(session, leads):
    assert len(_codes(session, composer.compose_lead_query(session, {"limit": "abc", "offset": "-1"}))) == 3


def test_limit_and_offset_page_through_results(session, leads):
    page = {"sortBy": "leadId", "sortOrder": "asc", "limit": 2}
    assert _codes(session, composer.compose_lead_query(session, page)) == ["26-0001", "26-0002"]
    assert _codes(session, composer.compose_lead_query(session, {**page, "offset": "2"})) == ["26-0003"]


def test_configured_default_limit_applies_when_limit_absent(session, leads, monkeypatch):
    monkeypatch.setenv("DEFAULT_LIST_LIMIT", "1")
    get_config.cache_clear()
    assert len(_codes(session, composer.compose_lead_query(session))) == 1


def test_call_query_filters_and_orders_newest_first(session, leads, user):
    lead = leads[0]
    session.add_all(
        [
            Call(lead_id=lead.id, user_id=user.id, call_time=dt.datetime(2026, 3, 1, 9)),
            Call(lead_id=lead.id, user_id=user.id, call_time=dt.datetime(2026, 3, 5, 9)),
            Call(lead_id=leads[1].id, user_id=user.id, call_time=dt.datetime(2026, 3, 9, 9)),
        ]
    )
    session.commit()

    rows = list(session.scalars(composer.compose_call_query({"leadId": lead.id})))
    assert [row.call_time.day for row in rows] == [5, 1]

    ranged = list(
        session.scalars(composer.compose_call_query({"startDate": "2026-03-02T00:00:00", "endDate": "2026-03-09T09:00:00"}))
    )
    assert [row.call_time.day for row in ranged] == [9, 5]


def test_call_query_compares_offset_bounds_in_utc(session, leads, user):
    session.add(Call(lead_id=leads[0].id, user_id=user.id, call_time=dt.datetime(2026, 3, 5, 9)))
    session.commit()

    # 10:00+05:00 is 05:00 UTC, before the 09:00 UTC call.
    assert list(session.scalars(composer.compose_call_query({"endDate": "2026-03-05T10:00:00+05:00"}))) == []
    # 13:00+05:00 is 08:00 UTC, before the call.
    included = list(session.scalars(composer.compose_call_query({"startDate": "2026-03-05T13:00:00+05:00"})))
    assert [row.call_time.hour for row in included] == [9]


def test_scheduled_call_query_orders_soonest_first(session, leads, user):
    session.add_all(
        [
            ScheduledCall(lead_id=leads[0].id, assigned_caller_id=user.id, scheduled_time=dt.datetime(2026, 4, 3)),
            ScheduledCall(lead_id=leads[0].id, assigned_caller_id=user.id, scheduled_time=dt.datetime(2026, 4, 1)),
            ScheduledCall(
                lead_id=leads[1].id,
                assigned_caller_id=None,
                scheduled_time=dt.datetime(2026, 4, 2),
                status="cancelled",
            ),
        ]
    )
    session.commit()

    mine = list(session.scalars(composer.compose_scheduled_call_query({"userId": user.id, "status": "pending"})))
    assert [row.scheduled_time.day for row in mine] == [1, 3]

    everything = list(session.scalars(composer.compose_scheduled_call_query()))
    assert [row.scheduled_time.day for row in everything] == [1, 2, 3]


def test_timesheet_query_uses_date_granularity(session, leads, user):
    session.add_all(
        [
            Timesheet(user_id=user.id, lead_id=leads[0].id, date=dt.date(2026, 5, 1), hours_worked=2),
            Timesheet(user_id=user.id, date=dt.date(2026, 5, 2), hours_worked=3, approved=True),
            Timesheet(user_id=user.id, date=dt.date(2026, 5, 3), hours_worked=4),
        ]
    )
    session.commit()

    stmt = composer.compose_timesheet_query({"startDate": "2026-05-01T18:30:00", "endDate": dt.datetime(2026, 5, 2, 6)})
    assert [row.date.day for row in session.scalars(stmt)] == [2, 1]

    approved = list(session.scalars(composer.compose_timesheet_query({"approved": True})))
    assert [row.date.day for row in approved] == [2]


def test_activity_query_defaults_to_configured_page(session, user, monkeypatch):
    monkeypatch.setenv("ACTIVITY_PAGE_SIZE", "2")
    get_config.cache_clear()
    for target_id in range(3):
        session.add(Activity(user_id=user.id, action_type="call", target_type="lead", target_id=target_id))
    session.commit()

    assert len(list(session.scalars(composer.compose_activity_query()))) == 2
    assert len(list(session.scalars(composer.compose_activity_query({"limit": 10})))) == 3
