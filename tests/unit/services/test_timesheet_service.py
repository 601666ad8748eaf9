from __future__ import annotations

import datetime as dt

from otpcrm.services.timesheet_service import TimesheetService


def test_timesheet_crud(session, make_lead, user):
    lead = make_lead("26-0001")
    service = TimesheetService(db=session)

    sheet = service.create_timesheet({"userId": user.id, "leadId": lead.id, "date": "2026-08-03", "hoursWorked": 7.5})

    assert sheet.date == dt.date(2026, 8, 3)
    assert sheet.approved is False
    approved = service.update_timesheet(sheet.id, {"approved": True, "approvedByUserId": user.id})
    assert approved.approved is True
    assert approved.approved_by_user_id == user.id
    assert [row.id for row in service.list_timesheets({"leadId": lead.id, "approved": "true"})] == [sheet.id]
    assert service.update_timesheet(999, {"approved": True}) is None
    assert service.delete_timesheet(sheet.id) is True
    assert service.delete_timesheet(sheet.id) is False
