"""Dashboard aggregation over the full roster and request history."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from leavedesk.models.enums import LeaveStatus
from leavedesk.schemas.dashboard import DashboardData, LeaveStats

if TYPE_CHECKING:
    from datetime import date

    from leavedesk.config import Settings
    from leavedesk.models.employee import Employee
    from leavedesk.models.leave import LeaveRequest


def _round_one_decimal(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def compute_leave_stats(employees: list[Employee], requests: list[LeaveRequest]) -> LeaveStats:
    """Count active employees and requests per status; average approved days per active employee."""
    active_count = sum(1 for e in employees if e.is_active)
    approved = [r for r in requests if r.status == LeaveStatus.APPROVED]
    total_taken = sum(r.days for r in approved)

    return LeaveStats(
        total_employees=active_count,
        pending_requests=sum(1 for r in requests if r.status == LeaveStatus.PENDING),
        approved_requests=len(approved),
        rejected_requests=sum(1 for r in requests if r.status == LeaveStatus.REJECTED),
        total_leaves_taken=total_taken,
        average_leave_per_employee=_round_one_decimal(total_taken / active_count) if active_count > 0 else 0.0,
    )


def build_dashboard(
    employees: list[Employee],
    requests: list[LeaveRequest],
    today: date,
    settings: Settings,
) -> DashboardData:
    """Assemble dashboard data.

    ``requests`` must already be ordered newest first; the recent list is
    its head. Upcoming leaves are approved requests starting after ``today``,
    soonest first. Low-balance employees keep roster order.
    """
    limit = settings.dashboard_list_limit

    upcoming = sorted(
        (r for r in requests if r.status == LeaveStatus.APPROVED and r.start_date > today),
        key=lambda r: r.start_date,
    )
    low_balance = [e for e in employees if e.is_active and e.leave_balance < settings.low_balance_threshold]

    return DashboardData(
        stats=compute_leave_stats(employees, requests),
        recent_requests=requests[:limit],
        upcoming_leaves=upcoming[:limit],
        low_balance_employees=low_balance[:limit],
    )
