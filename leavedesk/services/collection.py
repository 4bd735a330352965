from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from leavedesk.exceptions import StorageError

if TYPE_CHECKING:
    from leavedesk.db import KeyValueStore

RecordT = TypeVar("RecordT", bound=BaseModel)


class RecordCollection(Generic[RecordT]):
    """A list of records stored as one JSON array under a single key.

    Every read parses the whole array and every write replaces it.
    """

    def __init__(self, store: KeyValueStore, key: str, model: type[RecordT]) -> None:
        self._store = store
        self._key = key
        self._adapter: TypeAdapter[list[RecordT]] = TypeAdapter(list[model])  # type: ignore[valid-type]

    @property
    def key(self) -> str:
        return self._key

    def read(self) -> list[RecordT]:
        """Load all records. A missing key is an empty collection."""
        raw = self._store.get(self._key)
        if raw is None:
            return []
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as exc:
            msg = f"Stored collection {self._key!r} is corrupt"
            raise StorageError(msg) from exc

    def write(self, records: list[RecordT]) -> None:
        """Replace the stored collection with ``records``."""
        self._store.set(self._key, self._adapter.dump_json(records).decode())
