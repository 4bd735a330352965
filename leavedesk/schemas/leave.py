# ruff: noqa: TC001, TC003
from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from leavedesk.models.enums import LeaveType

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class ApplyLeavePayload(BaseModel):
    """Input for submitting a leave request."""

    model_config = ConfigDict(extra="forbid")

    employee_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    leave_type: LeaveType | None = None
    reason: str | None = None

    @field_validator("employee_id", "start_date", "end_date", "leave_type", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------


class LeavePreview(BaseModel):
    """Advisory information shown before submitting a request. Never blocking."""

    employee_id: str
    days: int
    remaining: int
    exceeds_balance: bool
