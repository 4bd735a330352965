# ruff: noqa: TC001, TC003
from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from leavedesk.models.enums import EmployeeRole, EmployeeStatus


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CreateEmployeePayload(BaseModel):
    """Input for creating an employee.

    Text fields are optional at the type level so that missing values are
    reported alongside every other field error by the directory service.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    email: str | None = None
    department: str | None = None
    joining_date: date | None = None
    role: EmployeeRole = EmployeeRole.EMPLOYEE

    @field_validator("joining_date", mode="before")
    @classmethod
    def _blank_date(cls, value: Any) -> Any:
        return _blank_to_none(value)


class UpdateEmployeePayload(BaseModel):
    """Partial update; only fields that were explicitly set are merged."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    email: str | None = None
    department: str | None = None
    joining_date: date | None = None
    role: EmployeeRole | None = None
    status: EmployeeStatus | None = None

    @field_validator("joining_date", "role", "status", mode="before")
    @classmethod
    def _blank_value(cls, value: Any) -> Any:
        return _blank_to_none(value)
