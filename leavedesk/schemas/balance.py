from __future__ import annotations

from pydantic import BaseModel


class LeaveBalance(BaseModel):
    """Per-employee balance derived from approved requests. Never stored."""

    employee_id: str
    annual: int
    sick: int
    personal: int
    used: int
    remaining: int
