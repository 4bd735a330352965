from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from leavedesk.config import Settings, get_settings
from leavedesk.exceptions import AppError, ConflictError, FieldValidationError, NotFoundError, service_operation
from leavedesk.models.base import _now_utc
from leavedesk.models.enums import LeaveStatus
from leavedesk.models.leave import LeaveRequest
from leavedesk.schemas import Failure, FieldError, merge_field_errors, parse_payload, parse_payload_collecting
from leavedesk.schemas.leave import ApplyLeavePayload, LeavePreview
from leavedesk.services.balance import derive_leave_balance
from leavedesk.services.collection import RecordCollection
from leavedesk.services.duration import count_calendar_days, count_working_days
from leavedesk.services.report import build_dashboard

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import date, datetime

    from leavedesk.db import KeyValueStore
    from leavedesk.models.employee import Employee
    from leavedesk.schemas.balance import LeaveBalance
    from leavedesk.schemas.dashboard import DashboardData
    from leavedesk.services.employee import EmployeeDirectory

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _find_request_index(requests: list[LeaveRequest], request_id: str) -> int:
    for index, request in enumerate(requests):
        if request.id == request_id:
            return index
    raise NotFoundError("Leave request not found")


def _newest_first(requests: list[LeaveRequest]) -> list[LeaveRequest]:
    """Order by applied date, newest first. Ties keep stored order."""
    return sorted(requests, key=lambda r: r.applied_date, reverse=True)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class LeaveService:
    """Owner of the leave-request collection and the approval workflow.

    Employee records are read through the injected ``EmployeeDirectory`` and
    balances are only ever changed through its ``adjust_leave_balance``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        directory: EmployeeDirectory,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = _now_utc,
    ) -> None:
        self._settings = settings or get_settings()
        self._requests = RecordCollection(store, self._settings.leave_requests_key, LeaveRequest)
        self._directory = directory
        self._clock = clock

    def _resolve_employee(self, employee_id: str) -> Employee:
        result = self._directory.get_employee(employee_id)
        if isinstance(result, Failure):
            raise NotFoundError("Employee not found")
        return result.data

    def _validate_application(self, data: ApplyLeavePayload, employee: Employee | None) -> list[FieldError]:
        """Collect every field error for a leave application."""
        errors: list[FieldError] = []

        if employee is None:
            errors.append(FieldError(field="employee_id", message="Employee is required"))
        elif not employee.is_active:
            errors.append(FieldError(field="employee_id", message="Cannot apply leave for inactive employee"))
        if data.start_date is None:
            errors.append(FieldError(field="start_date", message="Start date is required"))
        if data.end_date is None:
            errors.append(FieldError(field="end_date", message="End date is required"))
        if data.leave_type is None:
            errors.append(FieldError(field="leave_type", message="Leave type is required"))
        if not data.reason or not data.reason.strip():
            errors.append(FieldError(field="reason", message="Reason is required"))

        if data.start_date is not None and data.end_date is not None:
            if data.end_date < data.start_date:
                errors.append(FieldError(field="end_date", message="End date cannot be before start date"))
            # Working days never exceed calendar days, so bounding the calendar span bounds both.
            if count_calendar_days(data.start_date, data.end_date) > self._settings.max_leave_days:
                errors.append(
                    FieldError(
                        field="end_date",
                        message=f"Leave duration cannot exceed {self._settings.max_leave_days} days",
                    )
                )

        return errors

    def _decide(
        self,
        request: LeaveRequest,
        status: LeaveStatus,
        approver_id: str,
        comments: str | None,
    ) -> LeaveRequest:
        return request.model_copy(
            update={
                "status": status,
                "approved_by": approver_id,
                "approved_date": self._clock(),
                "comments": comments,
            }
        )

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    @service_operation("Failed to apply for leave")
    def apply_leave(self, payload: ApplyLeavePayload | Mapping[str, Any]) -> LeaveRequest:
        """Submit a leave request in the pending state.

        Flow:
        1. Resolve the employee through the directory
        2. Collect field errors (rejected values, inactive employee, required fields,
           date order, duration)
        3. Count working days once and snapshot the employee's name
        4. Persist as pending

        Remaining balance is not checked here; see ``preview_leave``.
        """
        data, errors = parse_payload_collecting(ApplyLeavePayload, payload)
        employee = self._resolve_employee(data.employee_id) if data.employee_id is not None else None

        errors = merge_field_errors(errors, self._validate_application(data, employee))
        if errors or employee is None:
            raise FieldValidationError(errors)

        request = LeaveRequest(
            employee_id=employee.id,
            employee_name=employee.name,
            start_date=data.start_date,  # type: ignore[arg-type]
            end_date=data.end_date,  # type: ignore[arg-type]
            leave_type=data.leave_type,  # type: ignore[arg-type]
            reason=(data.reason or "").strip(),
            status=LeaveStatus.PENDING,
            applied_date=self._clock(),
            days=count_working_days(data.start_date, data.end_date),  # type: ignore[arg-type]
        )

        requests = self._requests.read()
        requests.append(request)
        self._requests.write(requests)

        logger.info("Employee %s applied for %d day(s) of %s leave", employee.id, request.days, request.leave_type)
        return request

    @service_operation("Failed to approve leave")
    def approve_leave(self, request_id: str, approver_id: str, comments: str | None = None) -> LeaveRequest:
        """Approve a pending request and write the reduced balance back.

        The new stored allotment is the currently derived ``remaining`` minus
        the request's days. If the directory rejects that value (it would be
        negative) the approval is abandoned and nothing is persisted.
        """
        requests = self._requests.read()
        index = _find_request_index(requests, request_id)
        request = requests[index]

        if request.status != LeaveStatus.PENDING:
            raise ConflictError("Only pending requests can be approved")

        employee_result = self._directory.get_employee(request.employee_id)
        if isinstance(employee_result, Failure):
            raise AppError("Failed to get leave balance")
        balance = derive_leave_balance(employee_result.data, requests, self._settings)

        adjusted = self._directory.adjust_leave_balance(request.employee_id, balance.remaining - request.days)
        if isinstance(adjusted, Failure):
            raise ConflictError("Failed to update leave balance")

        requests[index] = self._decide(request, LeaveStatus.APPROVED, approver_id, comments)
        self._requests.write(requests)

        logger.info("Request %s approved by %s", request_id, approver_id)
        return requests[index]

    @service_operation("Failed to reject leave")
    def reject_leave(self, request_id: str, approver_id: str, comments: str | None = None) -> LeaveRequest:
        """Reject a pending request. Balances are untouched."""
        requests = self._requests.read()
        index = _find_request_index(requests, request_id)

        if requests[index].status != LeaveStatus.PENDING:
            raise ConflictError("Only pending requests can be rejected")

        requests[index] = self._decide(requests[index], LeaveStatus.REJECTED, approver_id, comments)
        self._requests.write(requests)

        logger.info("Request %s rejected by %s", request_id, approver_id)
        return requests[index]

    # -----------------------------------------------------------------------
    # Read path
    # -----------------------------------------------------------------------

    @service_operation("Failed to fetch leave requests")
    def list_requests(self, employee_id: str | None = None) -> list[LeaveRequest]:
        """List requests, optionally for one employee, newest application first."""
        requests = self._requests.read()
        if employee_id is not None:
            requests = [r for r in requests if r.employee_id == employee_id]
        return _newest_first(requests)

    @service_operation("Failed to fetch leave request")
    def get_leave_request(self, request_id: str) -> LeaveRequest:
        requests = self._requests.read()
        return requests[_find_request_index(requests, request_id)]

    @service_operation("Failed to calculate leave balance")
    def get_leave_balance(self, employee_id: str) -> LeaveBalance:
        employee = self._resolve_employee(employee_id)
        return derive_leave_balance(employee, self._requests.read(), self._settings)

    @service_operation("Failed to preview leave")
    def preview_leave(self, employee_id: str, start_date: date | str, end_date: date | str) -> LeavePreview:
        """Working days a span would use against the current balance. Advisory only."""
        employee = self._resolve_employee(employee_id)
        data = parse_payload(
            ApplyLeavePayload,
            {"employee_id": employee_id, "start_date": start_date, "end_date": end_date},
        )
        errors: list[FieldError] = []
        if data.start_date is None:
            errors.append(FieldError(field="start_date", message="Start date is required"))
        if data.end_date is None:
            errors.append(FieldError(field="end_date", message="End date is required"))
        if errors:
            raise FieldValidationError(errors)

        balance = derive_leave_balance(employee, self._requests.read(), self._settings)
        days = count_working_days(data.start_date, data.end_date)  # type: ignore[arg-type]

        return LeavePreview(
            employee_id=employee.id,
            days=days,
            remaining=balance.remaining,
            exceeds_balance=days > balance.remaining,
        )

    @service_operation("Failed to fetch dashboard data")
    def get_dashboard_data(self) -> DashboardData:
        """Aggregate stats and short lists for the dashboards. Computed on every call."""
        employees_result = self._directory.list_employees()
        if isinstance(employees_result, Failure):
            raise AppError("Failed to fetch dashboard data")

        requests = _newest_first(self._requests.read())
        return build_dashboard(employees_result.data, requests, self._clock().date(), self._settings)
