"""Key-value storage backends.

Each collection lives under one key as a single text value. Stores do no
locking and have no transactions: writers replace the whole value, so two
sessions sharing a store race and the last write wins.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from leavedesk.config import get_settings
from leavedesk.exceptions import StorageError
from leavedesk.models.base import _now_utc
from leavedesk.models.store import KeyValueEntry

_engine: Engine | None = None


def get_engine() -> Engine:
    """Return the singleton engine, creating it on first call."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_engine(settings.storage_url, echo=settings.debug)
    return _engine


def dispose_engine() -> None:
    """Dispose the engine and reset the singleton."""
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None


@runtime_checkable
class KeyValueStore(Protocol):
    """Interface for the persistent key-value store."""

    def get(self, key: str) -> str | None:
        """Return the text stored under ``key``, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Replace the text stored under ``key``."""
        ...


class InMemoryKeyValueStore:
    """Process-local store for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class SqlKeyValueStore:
    """Durable store backed by a single ``key_value_entry`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        SQLModel.metadata.create_all(engine, tables=[KeyValueEntry.__table__])  # type: ignore[attr-defined]

    def get(self, key: str) -> str | None:
        try:
            with Session(self._engine) as session:
                entry = session.get(KeyValueEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as exc:
            msg = f"Failed to read {key!r}"
            raise StorageError(msg) from exc

    def set(self, key: str, value: str) -> None:
        try:
            with Session(self._engine) as session:
                entry = session.get(KeyValueEntry, key)
                if entry is None:
                    entry = KeyValueEntry(key=key, value=value)
                else:
                    entry.value = value
                    entry.updated_at = _now_utc()
                session.add(entry)
                session.commit()
        except SQLAlchemyError as exc:
            msg = f"Failed to write {key!r}"
            raise StorageError(msg) from exc


def create_store(url: str | None = None) -> KeyValueStore:
    """Build the store for ``url`` (``memory://`` for an in-memory store)."""
    if url == "memory://":
        return InMemoryKeyValueStore()
    if url is None:
        return SqlKeyValueStore(get_engine())
    return SqlKeyValueStore(create_engine(url))
