from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from leavedesk.config import Settings, get_settings
from leavedesk.exceptions import ConflictError, FieldValidationError, NotFoundError, service_operation
from leavedesk.models.base import _now_utc
from leavedesk.models.employee import Employee
from leavedesk.models.enums import EmployeeStatus
from leavedesk.schemas import FieldError, merge_field_errors, parse_payload_collecting
from leavedesk.schemas.employee import CreateEmployeePayload, UpdateEmployeePayload
from leavedesk.services.collection import RecordCollection

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import date, datetime

    from leavedesk.db import KeyValueStore
    from leavedesk.schemas import Failure, Success

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@runtime_checkable
class EmployeeDirectory(Protocol):
    """What the leave service needs from the employee roster."""

    def get_employee(self, employee_id: str) -> Success[Employee] | Failure:
        """Fetch one employee."""
        ...

    def list_employees(self) -> Success[list[Employee]] | Failure:
        """List every employee, active or not."""
        ...

    def adjust_leave_balance(self, employee_id: str, new_balance: int) -> Success[Employee] | Failure:
        """Set the stored leave allotment to an explicit value."""
        ...


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_employee_fields(
    name: str | None,
    email: str | None,
    department: str | None,
    joining_date: date | None,
    today: date,
) -> list[FieldError]:
    """Collect every field error for an employee record."""
    errors: list[FieldError] = []

    if not name or not name.strip():
        errors.append(FieldError(field="name", message="Name is required"))
    elif len(name.strip()) < 2:
        errors.append(FieldError(field="name", message="Name must be at least 2 characters"))

    if not email or not email.strip():
        errors.append(FieldError(field="email", message="Email is required"))
    elif not _EMAIL_PATTERN.match(email.strip()):
        errors.append(FieldError(field="email", message="Invalid email format"))

    if not department or not department.strip():
        errors.append(FieldError(field="department", message="Department is required"))

    if joining_date is None:
        errors.append(FieldError(field="joining_date", message="Joining date is required"))
    elif joining_date > today:
        errors.append(FieldError(field="joining_date", message="Joining date cannot be in the future"))

    return errors


def _find_index(employees: list[Employee], employee_id: str) -> int:
    for index, employee in enumerate(employees):
        if employee.id == employee_id:
            return index
    raise NotFoundError("Employee not found")


def _ensure_unique_email(employees: list[Employee], email: str, exclude_id: str | None = None) -> None:
    """Emails are unique across active and inactive employees, ignoring case."""
    needle = email.strip().lower()
    for employee in employees:
        if employee.id != exclude_id and employee.email.lower() == needle:
            raise FieldValidationError([FieldError(field="email", message="Email already exists")])


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class EmployeeService:
    """Owner of the employee collection.

    Implements ``EmployeeDirectory``. Every public method returns a result
    envelope and never raises.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = _now_utc,
    ) -> None:
        self._settings = settings or get_settings()
        self._employees = RecordCollection(store, self._settings.employees_key, Employee)
        self._clock = clock

    def _today(self) -> date:
        return self._clock().date()

    @service_operation("Failed to fetch employees")
    def list_employees(self) -> list[Employee]:
        """Return every employee, without filtering."""
        return self._employees.read()

    @service_operation("Failed to fetch employee")
    def get_employee(self, employee_id: str) -> Employee:
        employees = self._employees.read()
        return employees[_find_index(employees, employee_id)]

    @service_operation("Failed to create employee")
    def create_employee(self, payload: CreateEmployeePayload | Mapping[str, Any]) -> Employee:
        """Validate and persist a new active employee with the default allotment."""
        data, errors = parse_payload_collecting(CreateEmployeePayload, payload)
        errors = merge_field_errors(
            errors,
            validate_employee_fields(data.name, data.email, data.department, data.joining_date, self._today()),
        )
        if errors:
            raise FieldValidationError(errors)

        employees = self._employees.read()
        email = (data.email or "").strip()
        _ensure_unique_email(employees, email)

        employee = Employee(
            name=(data.name or "").strip(),
            email=email,
            department=(data.department or "").strip(),
            joining_date=data.joining_date,  # type: ignore[arg-type]
            leave_balance=self._settings.default_leave_balance,
            role=data.role,
            status=EmployeeStatus.ACTIVE,
        )
        employees.append(employee)
        self._employees.write(employees)

        logger.info("Created employee %s (%s)", employee.id, employee.email)
        return employee

    @service_operation("Failed to update employee")
    def update_employee(self, employee_id: str, payload: UpdateEmployeePayload | Mapping[str, Any]) -> Employee:
        """Merge the fields that were set onto the record and re-validate the result."""
        employees = self._employees.read()
        index = _find_index(employees, employee_id)

        data, errors = parse_payload_collecting(UpdateEmployeePayload, payload)
        changes = data.model_dump(exclude_unset=True)
        # A blank role or status leaves the current value in place.
        for key in ("role", "status"):
            if key in changes and changes[key] is None:
                del changes[key]

        merged = {**employees[index].model_dump(), **changes}
        errors = merge_field_errors(
            errors,
            validate_employee_fields(
                merged["name"], merged["email"], merged["department"], merged["joining_date"], self._today()
            ),
        )
        if errors:
            raise FieldValidationError(errors)

        for key in ("name", "email", "department"):
            merged[key] = merged[key].strip()
        _ensure_unique_email(employees, merged["email"], exclude_id=employee_id)

        updated = Employee.model_validate(merged)
        employees[index] = updated
        self._employees.write(employees)

        logger.info("Updated employee %s: %s", employee_id, sorted(changes))
        return updated

    @service_operation("Failed to deactivate employee")
    def deactivate_employee(self, employee_id: str) -> Employee:
        """Soft-delete: mark the employee inactive. Repeating it is harmless."""
        employees = self._employees.read()
        index = _find_index(employees, employee_id)

        employees[index] = employees[index].model_copy(update={"status": EmployeeStatus.INACTIVE})
        self._employees.write(employees)

        logger.info("Deactivated employee %s", employee_id)
        return employees[index]

    @service_operation("Failed to update leave balance")
    def adjust_leave_balance(self, employee_id: str, new_balance: int) -> Employee:
        """Set the stored allotment.

        Negative values are a conflict. A value that is not a whole number is a
        field error on ``leave_balance``. Either way nothing is written.
        """
        employees = self._employees.read()
        index = _find_index(employees, employee_id)

        if new_balance < 0:
            raise ConflictError("Leave balance cannot be negative")

        employees[index] = Employee.model_validate({**employees[index].model_dump(), "leave_balance": new_balance})
        self._employees.write(employees)

        logger.info("Set leave balance of employee %s to %d", employee_id, new_balance)
        return employees[index]

    @service_operation("Failed to authenticate. Please try again.")
    def authenticate(self, email: str) -> Employee:
        """Look up an active employee by email, ignoring case.

        This is an identity lookup for the sign-in screen, not a security check.
        """
        needle = email.strip().lower()
        for employee in self._employees.read():
            if employee.email.lower() == needle and employee.is_active:
                return employee
        raise NotFoundError("Employee not found or inactive. Please contact HR.")
