"""Tests for the leave request lifecycle: apply, approve, reject, list."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from leavedesk.models.enums import LeaveStatus, LeaveType
from leavedesk.schemas import Failure, Success
from leavedesk.schemas.leave import ApplyLeavePayload
from tests.factories import NOW, leave_payload

if TYPE_CHECKING:
    from collections.abc import Callable

    from leavedesk.models.employee import Employee
    from leavedesk.models.leave import LeaveRequest
    from leavedesk.services.employee import EmployeeService
    from leavedesk.services.leave import LeaveService
    from tests.factories import FakeClock


def _fields(result: Success | Failure) -> dict[str, str]:
    assert isinstance(result, Failure)
    assert result.errors is not None
    return {e.field: e.message for e in result.errors}


def _stored_requests(leave_service: LeaveService) -> list[LeaveRequest]:
    result = leave_service.list_requests()
    assert isinstance(result, Success)
    return result.data


@pytest.fixture
def employee(make_employee: Callable[..., Employee]) -> Employee:
    return make_employee()


@pytest.fixture
def hr(make_employee: Callable[..., Employee]) -> Employee:
    return make_employee(name="Sarah Johnson", email="admin@company.com", department="HR", role="hr")


@pytest.fixture
def pending(leave_service: LeaveService, employee: Employee) -> LeaveRequest:
    result = leave_service.apply_leave(leave_payload(employee.id))
    assert isinstance(result, Success)
    return result.data


# ---------------------------------------------------------------------------
# Apply
# ---------------------------------------------------------------------------


def test_apply_leave_monday_to_friday(leave_service: LeaveService, employee: Employee) -> None:
    result = leave_service.apply_leave(leave_payload(employee.id))
    assert isinstance(result, Success)
    request = result.data
    assert request.days == 5
    assert request.status == LeaveStatus.PENDING
    assert request.employee_id == employee.id
    assert request.employee_name == "John Smith"
    assert request.leave_type == LeaveType.ANNUAL
    assert request.start_date == date(2024, 6, 3)
    assert request.end_date == date(2024, 6, 7)
    assert request.applied_date == NOW
    assert request.approved_by is None
    assert request.approved_date is None
    assert request.comments is None


def test_apply_leave_accepts_payload_model(leave_service: LeaveService, employee: Employee) -> None:
    payload = ApplyLeavePayload(
        employee_id=employee.id,
        start_date=date(2024, 6, 7),
        end_date=date(2024, 6, 10),
        leave_type=LeaveType.SICK,
        reason="Flu",
    )
    result = leave_service.apply_leave(payload)
    assert isinstance(result, Success)
    assert result.data.days == 2


def test_apply_leave_trims_reason(leave_service: LeaveService, employee: Employee) -> None:
    result = leave_service.apply_leave(leave_payload(employee.id, reason="  Moving house  "))
    assert isinstance(result, Success)
    assert result.data.reason == "Moving house"


def test_apply_leave_weekend_only_counts_zero_days(leave_service: LeaveService, employee: Employee) -> None:
    result = leave_service.apply_leave(leave_payload(employee.id, start_date="2024-06-08", end_date="2024-06-09"))
    assert isinstance(result, Success)
    assert result.data.days == 0


def test_apply_leave_unknown_employee(leave_service: LeaveService) -> None:
    result = leave_service.apply_leave(leave_payload("missing"))
    assert isinstance(result, Failure)
    assert result.error == "Employee not found"
    assert _stored_requests(leave_service) == []


def test_apply_leave_missing_employee_id(leave_service: LeaveService) -> None:
    result = leave_service.apply_leave(leave_payload(""))
    assert _fields(result) == {"employee_id": "Employee is required"}


def test_apply_leave_inactive_employee(
    leave_service: LeaveService, employee_service: EmployeeService, employee: Employee
) -> None:
    employee_service.deactivate_employee(employee.id)
    result = leave_service.apply_leave(leave_payload(employee.id))
    assert _fields(result) == {"employee_id": "Cannot apply leave for inactive employee"}
    assert _stored_requests(leave_service) == []


def test_apply_leave_collects_required_fields(leave_service: LeaveService, employee: Employee) -> None:
    result = leave_service.apply_leave(
        {"employee_id": employee.id, "start_date": "", "end_date": "", "leave_type": "", "reason": "   "}
    )
    assert _fields(result) == {
        "start_date": "Start date is required",
        "end_date": "End date is required",
        "leave_type": "Leave type is required",
        "reason": "Reason is required",
    }


def test_apply_leave_end_before_start(leave_service: LeaveService, employee: Employee) -> None:
    result = leave_service.apply_leave(leave_payload(employee.id, start_date="2024-06-07", end_date="2024-06-03"))
    assert _fields(result) == {"end_date": "End date cannot be before start date"}
    assert _stored_requests(leave_service) == []


def test_apply_leave_same_day(leave_service: LeaveService, employee: Employee) -> None:
    result = leave_service.apply_leave(leave_payload(employee.id, start_date="2024-06-04", end_date="2024-06-04"))
    assert isinstance(result, Success)
    assert result.data.days == 1


def test_apply_leave_duration_limit(leave_service: LeaveService, employee: Employee) -> None:
    result = leave_service.apply_leave(leave_payload(employee.id, start_date="2024-01-01", end_date="2025-01-02"))
    assert _fields(result) == {"end_date": "Leave duration cannot exceed 365 days"}
    assert _stored_requests(leave_service) == []


def test_apply_leave_unknown_leave_type(leave_service: LeaveService, employee: Employee) -> None:
    result = leave_service.apply_leave(leave_payload(employee.id, leave_type="sabbatical"))
    assert "leave_type" in _fields(result)


def test_apply_leave_malformed_date_reported_with_other_errors(leave_service: LeaveService, employee: Employee) -> None:
    result = leave_service.apply_leave(leave_payload(employee.id, start_date="garbage", reason=""))
    errors = _fields(result)
    assert set(errors) == {"start_date", "reason"}
    assert errors["reason"] == "Reason is required"
    assert _stored_requests(leave_service) == []


def test_apply_leave_bad_type_and_inactive_employee_reported_together(
    leave_service: LeaveService, employee_service: EmployeeService, employee: Employee
) -> None:
    employee_service.deactivate_employee(employee.id)
    result = leave_service.apply_leave(leave_payload(employee.id, leave_type="sabbatical", urgent=True))
    errors = _fields(result)
    assert set(errors) == {"employee_id", "leave_type", "urgent"}
    assert errors["employee_id"] == "Cannot apply leave for inactive employee"


def test_apply_leave_does_not_enforce_balance(
    leave_service: LeaveService, employee_service: EmployeeService, employee: Employee
) -> None:
    employee_service.adjust_leave_balance(employee.id, 1)
    result = leave_service.apply_leave(leave_payload(employee.id))
    assert isinstance(result, Success)
    assert result.data.days == 5


def test_apply_leave_snapshots_name(
    leave_service: LeaveService, employee_service: EmployeeService, pending: LeaveRequest
) -> None:
    employee_service.update_employee(pending.employee_id, {"name": "Johnny Smith"})
    result = leave_service.get_leave_request(pending.id)
    assert isinstance(result, Success)
    assert result.data.employee_name == "John Smith"


# ---------------------------------------------------------------------------
# Approve
# ---------------------------------------------------------------------------


def test_approve_leave(
    leave_service: LeaveService,
    employee_service: EmployeeService,
    clock: FakeClock,
    pending: LeaveRequest,
    hr: Employee,
) -> None:
    clock.advance(hours=2)
    result = leave_service.approve_leave(pending.id, hr.id, "Enjoy")
    assert isinstance(result, Success)
    approved = result.data
    assert approved.status == LeaveStatus.APPROVED
    assert approved.approved_by == hr.id
    assert approved.approved_date == clock.now
    assert approved.comments == "Enjoy"
    assert approved.days == pending.days
    assert approved.applied_date == pending.applied_date

    # remaining (25) - days (5) is written back as the stored allotment.
    employee = employee_service.get_employee(pending.employee_id)
    assert isinstance(employee, Success)
    assert employee.data.leave_balance == 20


def test_approve_leave_twice_conflicts(leave_service: LeaveService, pending: LeaveRequest, hr: Employee) -> None:
    first = leave_service.approve_leave(pending.id, hr.id)
    assert isinstance(first, Success)

    second = leave_service.approve_leave(pending.id, hr.id, "again")
    assert isinstance(second, Failure)
    assert second.error == "Only pending requests can be approved"
    assert second.errors is None

    stored = leave_service.get_leave_request(pending.id)
    assert isinstance(stored, Success)
    assert stored.data == first.data


def test_approve_leave_not_found(leave_service: LeaveService, hr: Employee) -> None:
    result = leave_service.approve_leave("missing", hr.id)
    assert isinstance(result, Failure)
    assert result.error == "Leave request not found"


def test_approve_leave_without_comments(leave_service: LeaveService, pending: LeaveRequest, hr: Employee) -> None:
    result = leave_service.approve_leave(pending.id, hr.id)
    assert isinstance(result, Success)
    assert result.data.comments is None


def test_approve_leave_over_balance_aborts(
    leave_service: LeaveService,
    employee_service: EmployeeService,
    pending: LeaveRequest,
    hr: Employee,
) -> None:
    employee_service.adjust_leave_balance(pending.employee_id, 3)

    result = leave_service.approve_leave(pending.id, hr.id)
    assert isinstance(result, Failure)
    assert result.error == "Failed to update leave balance"

    stored = leave_service.get_leave_request(pending.id)
    assert isinstance(stored, Success)
    assert stored.data.status == LeaveStatus.PENDING

    employee = employee_service.get_employee(pending.employee_id)
    assert isinstance(employee, Success)
    assert employee.data.leave_balance == 3


def test_approve_leave_exact_balance_reaches_zero(
    leave_service: LeaveService,
    employee_service: EmployeeService,
    pending: LeaveRequest,
    hr: Employee,
) -> None:
    employee_service.adjust_leave_balance(pending.employee_id, 5)

    result = leave_service.approve_leave(pending.id, hr.id)
    assert isinstance(result, Success)

    balance = leave_service.get_leave_balance(pending.employee_id)
    assert isinstance(balance, Success)
    assert balance.data.annual == 0
    assert balance.data.remaining == 0


# ---------------------------------------------------------------------------
# Reject
# ---------------------------------------------------------------------------


def test_reject_leave(
    leave_service: LeaveService,
    employee_service: EmployeeService,
    pending: LeaveRequest,
    hr: Employee,
) -> None:
    result = leave_service.reject_leave(pending.id, hr.id, "Team offsite that week")
    assert isinstance(result, Success)
    assert result.data.status == LeaveStatus.REJECTED
    assert result.data.approved_by == hr.id
    assert result.data.approved_date == NOW
    assert result.data.comments == "Team offsite that week"

    employee = employee_service.get_employee(pending.employee_id)
    assert isinstance(employee, Success)
    assert employee.data.leave_balance == 25


def test_reject_leave_twice_conflicts(leave_service: LeaveService, pending: LeaveRequest, hr: Employee) -> None:
    leave_service.reject_leave(pending.id, hr.id)
    result = leave_service.reject_leave(pending.id, hr.id)
    assert isinstance(result, Failure)
    assert result.error == "Only pending requests can be rejected"


def test_reject_after_approve_conflicts(leave_service: LeaveService, pending: LeaveRequest, hr: Employee) -> None:
    leave_service.approve_leave(pending.id, hr.id)
    result = leave_service.reject_leave(pending.id, hr.id)
    assert isinstance(result, Failure)
    assert result.error == "Only pending requests can be rejected"

    stored = leave_service.get_leave_request(pending.id)
    assert isinstance(stored, Success)
    assert stored.data.status == LeaveStatus.APPROVED


def test_approve_after_reject_conflicts(leave_service: LeaveService, pending: LeaveRequest, hr: Employee) -> None:
    leave_service.reject_leave(pending.id, hr.id)
    result = leave_service.approve_leave(pending.id, hr.id)
    assert isinstance(result, Failure)
    assert result.error == "Only pending requests can be approved"


def test_reject_leave_not_found(leave_service: LeaveService, hr: Employee) -> None:
    result = leave_service.reject_leave("missing", hr.id)
    assert isinstance(result, Failure)
    assert result.error == "Leave request not found"


def test_cancelled_status_is_reserved(leave_service: LeaveService, pending: LeaveRequest, hr: Employee) -> None:
    """No operation moves a request into CANCELLED."""
    assert LeaveStatus.CANCELLED.value == "cancelled"
    assert not hasattr(leave_service, "cancel_leave")

    leave_service.approve_leave(pending.id, hr.id)
    statuses = {r.status for r in _stored_requests(leave_service)}
    assert LeaveStatus.CANCELLED not in statuses


# ---------------------------------------------------------------------------
# List / get
# ---------------------------------------------------------------------------


def test_list_requests_newest_first(
    leave_service: LeaveService,
    clock: FakeClock,
    make_employee: Callable[..., Employee],
) -> None:
    alice = make_employee(name="Alice", email="alice@company.com")
    bob = make_employee(name="Bob", email="bob@company.com")

    ids = []
    for employee in (alice, bob, alice):
        result = leave_service.apply_leave(leave_payload(employee.id))
        assert isinstance(result, Success)
        ids.append(result.data.id)
        clock.advance(minutes=5)

    listed = _stored_requests(leave_service)
    assert [r.id for r in listed] == list(reversed(ids))
    assert all(a.applied_date >= b.applied_date for a, b in zip(listed, listed[1:], strict=False))


def test_list_requests_filtered_by_employee(
    leave_service: LeaveService,
    clock: FakeClock,
    make_employee: Callable[..., Employee],
) -> None:
    alice = make_employee(name="Alice", email="alice@company.com")
    bob = make_employee(name="Bob", email="bob@company.com")
    leave_service.apply_leave(leave_payload(alice.id))
    clock.advance(minutes=1)
    leave_service.apply_leave(leave_payload(bob.id))
    clock.advance(minutes=1)
    leave_service.apply_leave(leave_payload(alice.id, leave_type="personal"))

    result = leave_service.list_requests(alice.id)
    assert isinstance(result, Success)
    assert [r.employee_id for r in result.data] == [alice.id, alice.id]
    assert result.data[0].leave_type == LeaveType.PERSONAL


def test_list_requests_unknown_employee_is_empty(leave_service: LeaveService, pending: LeaveRequest) -> None:
    result = leave_service.list_requests("missing")
    assert isinstance(result, Success)
    assert result.data == []


def test_get_leave_request_not_found(leave_service: LeaveService) -> None:
    result = leave_service.get_leave_request("missing")
    assert isinstance(result, Failure)
    assert result.error == "Leave request not found"


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


def test_full_scenario(employee_service: EmployeeService, leave_service: LeaveService) -> None:
    created = employee_service.create_employee(
        {
            "name": "John Smith",
            "email": "john@company.com",
            "department": "Engineering",
            "joining_date": "2023-03-01",
            "role": "employee",
        }
    )
    assert isinstance(created, Success)
    assert created.data.leave_balance == 25
    assert created.data.status == "active"

    applied = leave_service.apply_leave(leave_payload(created.data.id))
    assert isinstance(applied, Success)
    assert applied.data.days == 5
    assert applied.data.status == "pending"

    approved = leave_service.approve_leave(applied.data.id, "hr-1")
    assert isinstance(approved, Success)
    employee = employee_service.get_employee(created.data.id)
    assert isinstance(employee, Success)
    assert employee.data.leave_balance == 25 - 5

    # The deduction is applied to the allotment and counted again as used days.
    balance = leave_service.get_leave_balance(created.data.id)
    assert isinstance(balance, Success)
    assert balance.data.annual == 20
    assert balance.data.used == 5
    assert balance.data.remaining == 15

    again = leave_service.approve_leave(applied.data.id, "hr-1")
    assert isinstance(again, Failure)
    assert again.error == "Only pending requests can be approved"
