# ruff: noqa: TC001
from __future__ import annotations

from pydantic import BaseModel

from leavedesk.models.employee import Employee
from leavedesk.models.leave import LeaveRequest


class LeaveStats(BaseModel):
    """Aggregate counts across the roster and all requests."""

    total_employees: int  # active employees only
    pending_requests: int
    approved_requests: int
    rejected_requests: int
    total_leaves_taken: int  # approved working days
    average_leave_per_employee: float


class DashboardData(BaseModel):
    """Everything the dashboards render, computed on demand."""

    stats: LeaveStats
    recent_requests: list[LeaveRequest]
    upcoming_leaves: list[LeaveRequest]
    low_balance_employees: list[Employee]
