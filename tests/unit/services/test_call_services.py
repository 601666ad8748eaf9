from __future__ import annotations

import datetime as dt

import pytest
from sqlalchemy.exc import IntegrityError

from otpcrm.services.call_service import CallService
from otpcrm.services.scheduled_call_service import ScheduledCallService


def test_call_crud(session, make_lead, user):
    lead = make_lead("26-0001")
    service = CallService(db=session)

    call = service.create_call({"leadId": lead.id, "userId": user.id, "durationSeconds": 90, "outcome": "voicemail"})

    assert call.call_time is not None
    assert service.get_call(call.id).duration_seconds == 90
    assert service.update_call(call.id, {"outcome": "answered"}).outcome == "answered"
    assert [row.id for row in service.list_calls({"userId": user.id})] == [call.id]
    assert service.delete_call(call.id) is True
    assert service.delete_call(call.id) is False
    assert service.update_call(call.id, {"outcome": "x"}) is None


def test_call_for_missing_lead_fails_and_rolls_back(session):
    service = CallService(db=session)

    with pytest.raises(IntegrityError):
        service.create_call({"leadId": 777})

    assert service.list_calls() == []


def test_scheduled_call_update_refreshes_updated_at(session, make_lead, user):
    lead = make_lead("26-0001")
    service = ScheduledCallService(db=session)
    scheduled = service.create_scheduled_call(
        {"leadId": lead.id, "assignedCallerId": user.id, "scheduledTime": "2026-07-01T10:00:00"}
    )
    created_stamp = scheduled.updated_at

    updated = service.update_scheduled_call(scheduled.id, {"status": "completed"})

    assert updated.status == "completed"
    assert updated.updated_at >= created_stamp
    assert [row.id for row in service.list_scheduled_calls({"status": "completed"})] == [scheduled.id]
    assert service.list_scheduled_calls({"startDate": dt.datetime(2026, 7, 2)}) == []
    assert service.delete_scheduled_call(scheduled.id) is True
    assert service.get_scheduled_call(scheduled.id) is None
