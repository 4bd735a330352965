from __future__ import annotations

from typing import TYPE_CHECKING

from leavedesk.models.enums import LeaveStatus
from leavedesk.schemas.balance import LeaveBalance

if TYPE_CHECKING:
    from collections.abc import Iterable

    from leavedesk.config import Settings
    from leavedesk.models.employee import Employee
    from leavedesk.models.leave import LeaveRequest


def used_days(employee_id: str, requests: Iterable[LeaveRequest]) -> int:
    """Sum the working days of the employee's approved requests."""
    return sum(r.days for r in requests if r.employee_id == employee_id and r.status == LeaveStatus.APPROVED)


def derive_leave_balance(
    employee: Employee,
    requests: Iterable[LeaveRequest],
    settings: Settings,
) -> LeaveBalance:
    """Derive the balance view for one employee.

    ``annual`` is the stored allotment; sick and personal allowances are
    fixed and do not depend on usage. ``remaining`` is clamped at zero.
    """
    used = used_days(employee.id, requests)
    return LeaveBalance(
        employee_id=employee.id,
        annual=employee.leave_balance,
        sick=settings.sick_leave_allowance,
        personal=settings.personal_leave_allowance,
        used=used,
        remaining=max(0, employee.leave_balance - used),
    )
