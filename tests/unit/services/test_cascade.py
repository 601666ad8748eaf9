from __future__ import annotations

import datetime as dt

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

import otpcrm.services.cascade as cascade_module
from otpcrm.core.exceptions import TransactionError
from otpcrm.models import Activity, Call, Lead, ScheduledCall, Timesheet
from otpcrm.services.cascade import CASCADE_POLICY, DeleteOutcome, LeadCascadeDeleter


def _count(session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))


@pytest.fixture
def populated_lead(session, make_lead, user):
    lead = make_lead("26-0001")
    other = make_lead("26-0002")
    session.add_all(
        [
            Call(lead_id=lead.id, user_id=user.id),
            Call(lead_id=lead.id, user_id=user.id),
            Call(lead_id=other.id, user_id=user.id),
            ScheduledCall(lead_id=lead.id, assigned_caller_id=user.id, scheduled_time=dt.datetime(2026, 6, 1)),
            Timesheet(user_id=user.id, lead_id=lead.id, date=dt.date(2026, 6, 1), hours_worked=1.5),
            Timesheet(user_id=user.id, lead_id=None, date=dt.date(2026, 6, 1), hours_worked=6),
            Activity(user_id=user.id, action_type="create", target_type="lead", target_id=lead.id),
        ]
    )
    session.commit()
    return lead


def test_policy_lists_dependents_in_deletion_order():
    assert [(model, action) for model, action in CASCADE_POLICY] == [
        (Call, "delete"),
        (ScheduledCall, "delete"),
        (Timesheet, "delete"),
    ]


def test_cascade_removes_lead_and_dependents(session, populated_lead):
    lead_pk = populated_lead.id

    result = LeadCascadeDeleter().delete_lead_cascade(session, lead_pk)

    assert result.outcome is DeleteOutcome.DELETED
    assert result.counts == {"calls": 2, "scheduled_calls": 1, "timesheets": 1}
    assert session.get(Lead, lead_pk) is None
    assert session.scalars(select(Call).where(Call.lead_id == lead_pk)).all() == []
    assert _count(session, Call) == 1
    assert _count(session, ScheduledCall) == 0
    assert _count(session, Timesheet) == 1
    # Audit trail is left untouched.
    assert _count(session, Activity) == 1


def test_missing_lead_is_not_found_without_side_effects(session, populated_lead):
    before = {model: _count(session, model) for model in (Lead, Call, ScheduledCall, Timesheet)}

    result = LeadCascadeDeleter().delete_lead_cascade(session, 9999)

    assert result.outcome is DeleteOutcome.NOT_FOUND
    assert result.counts == {}
    assert {model: _count(session, model) for model in before} == before


def test_failure_midway_rolls_back_everything(session, populated_lead, monkeypatch):
    lead_pk = populated_lead.id
    original_apply = LeadCascadeDeleter._apply

    def _fail_on_timesheets(db, model, action, pk):
        if model is Timesheet:
            raise OperationalError("DELETE FROM timesheets", {}, Exception("disk I/O error"))
        return original_apply(db, model, action, pk)

    monkeypatch.setattr(LeadCascadeDeleter, "_apply", staticmethod(_fail_on_timesheets))

    with pytest.raises(TransactionError):
        LeadCascadeDeleter().delete_lead_cascade(session, lead_pk)

    assert session.get(Lead, lead_pk) is not None
    assert _count(session, Call) == 3
    assert _count(session, ScheduledCall) == 1
    assert _count(session, Timesheet) == 2


def test_detach_policy_nulls_the_reference(session, populated_lead):
    lead_pk = populated_lead.id
    deleter = LeadCascadeDeleter(
        policy=((Call, "delete"), (ScheduledCall, "delete"), (Timesheet, "detach")),
    )

    result = deleter.delete_lead_cascade(session, lead_pk)

    assert result.counts["timesheets"] == 1
    assert _count(session, Timesheet) == 2
    assert session.scalars(select(Timesheet.lead_id)).all() == [None, None]


def test_dependents_block_plain_lead_delete(session, populated_lead):
    session.delete(populated_lead)
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()


def test_completed_delete_is_logged_with_counts(session, populated_lead, caplog):
    caplog.set_level("INFO", logger=cascade_module.__name__)

    LeadCascadeDeleter().delete_lead_cascade(session, populated_lead.id)

    completed = [r for r in caplog.records if getattr(r, "event", None) == "lead.cascade_delete.completed"]
    assert completed and completed[0].counts["calls"] == 2
