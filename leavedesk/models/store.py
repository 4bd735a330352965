from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from leavedesk.models.base import _now_utc


class KeyValueEntry(SQLModel, table=True):
    """One named collection serialized as text."""

    __tablename__ = "key_value_entry"

    key: str = Field(primary_key=True, max_length=255)
    value: str = Field(sa_type=sa.Text)
    updated_at: datetime = Field(
        default_factory=_now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
    )
