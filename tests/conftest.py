from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from leavedesk.config import Settings
from leavedesk.db import InMemoryKeyValueStore
from leavedesk.schemas import Success
from leavedesk.services.employee import EmployeeService
from leavedesk.services.leave import LeaveService
from tests.factories import NOW, FakeClock, employee_payload

if TYPE_CHECKING:
    from collections.abc import Callable

    from leavedesk.models.employee import Employee


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any local .env file."""
    return Settings(_env_file=None, storage_url="memory://", seed_demo_data=False)  # type: ignore[call-arg]


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def employee_service(store: InMemoryKeyValueStore, settings: Settings, clock: FakeClock) -> EmployeeService:
    return EmployeeService(store, settings, clock=clock)


@pytest.fixture
def leave_service(
    store: InMemoryKeyValueStore,
    employee_service: EmployeeService,
    settings: Settings,
    clock: FakeClock,
) -> LeaveService:
    return LeaveService(store, employee_service, settings, clock=clock)


@pytest.fixture
def make_employee(employee_service: EmployeeService) -> Callable[..., Employee]:
    """Create an employee through the directory and return the stored record."""

    def _make(**overrides: Any) -> Employee:
        result = employee_service.create_employee(employee_payload(**overrides))
        assert isinstance(result, Success), result
        return result.data

    return _make
