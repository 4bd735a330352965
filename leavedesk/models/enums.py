from __future__ import annotations

import enum


class EmployeeRole(enum.StrEnum):
    """Role of an employee in the leave workflow."""

    EMPLOYEE = "employee"
    HR = "hr"


class EmployeeStatus(enum.StrEnum):
    """Employment status. Inactive is the soft-delete state."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class LeaveType(enum.StrEnum):
    """Kind of leave being requested."""

    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    EMERGENCY = "emergency"
    MATERNITY = "maternity"
    PATERNITY = "paternity"


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests.

    PENDING is the only initial state; APPROVED and REJECTED are terminal.
    CANCELLED is reserved: no operation transitions into it.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
