"""In-memory record store adapter."""

import copy
from typing import Any

from homehelper.ports.store import INDEXES


def index_matches(record: dict, field: str, value: Any) -> bool:
    """Equality for scalar fields, membership for list fields."""
    stored = record.get(field)
    if isinstance(stored, list):
        return value in stored
    return stored == value


class MemoryStore:
    """
    Dict-backed record store.

    Implements RecordStore protocol. Records are deep-copied in and out so
    callers never share state with the store.
    """

    def __init__(self, indexes: dict[str, dict[str, str]] | None = None):
        self.indexes = indexes if indexes is not None else INDEXES
        self._tables: dict[str, dict[str, dict]] = {}

    def _table(self, table: str) -> dict[str, dict]:
        return self._tables.setdefault(table, {})

    def put(self, table: str, record: dict) -> None:
        self._table(table)[record["id"]] = copy.deepcopy(record)

    def get(self, table: str, record_id: str) -> dict | None:
        record = self._table(table).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def get_all(self, table: str) -> list[dict]:
        return [copy.deepcopy(r) for r in self._table(table).values()]

    def get_all_by_index(self, table: str, index: str, value: Any) -> list[dict]:
        field = self.indexes.get(table, {}).get(index)
        if field is None:
            raise KeyError(f"Unknown index {index!r} on table {table!r}")
        return [
            copy.deepcopy(r) for r in self._table(table).values() if index_matches(r, field, value)
        ]

    def delete(self, table: str, record_id: str) -> None:
        self._table(table).pop(record_id, None)

    def count(self, table: str) -> int:
        return len(self._table(table))
