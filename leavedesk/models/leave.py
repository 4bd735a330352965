# ruff: noqa: TC003
from __future__ import annotations

from datetime import date, datetime

from pydantic import Field

from leavedesk.models.base import RecordBase, _now_utc
from leavedesk.models.enums import LeaveStatus, LeaveType


class LeaveRequest(RecordBase):
    """An employee's leave request with its approval state."""

    employee_id: str
    employee_name: str  # snapshot at submission time
    start_date: date
    end_date: date
    leave_type: LeaveType
    reason: str
    status: LeaveStatus = LeaveStatus.PENDING
    applied_date: datetime = Field(default_factory=_now_utc)
    days: int = Field(ge=0)  # working days, computed once at submission
    approved_by: str | None = None  # approver or rejecter id
    approved_date: datetime | None = None
    comments: str | None = None
