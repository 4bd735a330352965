from leavedesk.services.employee import EmployeeDirectory, EmployeeService
from leavedesk.services.leave import LeaveService

__all__ = ["EmployeeDirectory", "EmployeeService", "LeaveService"]
