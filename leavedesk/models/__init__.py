from leavedesk.models.base import RecordBase
from leavedesk.models.employee import Employee
from leavedesk.models.enums import EmployeeRole, EmployeeStatus, LeaveStatus, LeaveType
from leavedesk.models.leave import LeaveRequest
from leavedesk.models.store import KeyValueEntry

__all__ = [
    "Employee",
    "EmployeeRole",
    "EmployeeStatus",
    "KeyValueEntry",
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
    "RecordBase",
]
