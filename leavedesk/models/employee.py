# ruff: noqa: TC003
from __future__ import annotations

from datetime import date

from pydantic import Field

from leavedesk.models.base import RecordBase
from leavedesk.models.enums import EmployeeRole, EmployeeStatus


class Employee(RecordBase):
    """A member of the employee roster."""

    name: str
    email: str
    department: str
    joining_date: date
    leave_balance: int = Field(default=25, ge=0)
    role: EmployeeRole = EmployeeRole.EMPLOYEE
    status: EmployeeStatus = EmployeeStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
