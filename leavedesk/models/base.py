from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, Field


def _id_factory() -> str:
    """Generate a new opaque record identifier."""
    return str(uuid.uuid4())


def _now_utc() -> datetime:
    """Return the current UTC time."""
    return datetime.now(UTC)


class RecordBase(BaseModel):
    """Base model for stored records with an opaque string id."""

    id: str = Field(default_factory=_id_factory)
