"""SQLite record store adapter."""

import contextlib
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from homehelper.ports.store import INDEXES

logger = logging.getLogger(__name__)


class SQLiteStore:
    """
    Single-file record store.

    Implements RecordStore protocol. Each record is a JSON body in the
    `records` table; secondary lookups go through `record_index`, which is
    rewritten together with the record on every put/delete. List-valued
    fields get one index row per element.

    Each method opens its own connection.
    """

    def __init__(
        self,
        db_path: str | Path = "homehelper.sqlite3",
        indexes: dict[str, dict[str, str]] | None = None,
    ):
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self.indexes = indexes if indexes is not None else INDEXES
        self._ensure_schema()
        logger.info(f"SQLiteStore ready db={self._db_path}")

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS records (
                    tbl TEXT NOT NULL,
                    id TEXT NOT NULL,
                    body TEXT NOT NULL,
                    PRIMARY KEY (tbl, id)
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS record_index (
                    tbl TEXT NOT NULL,
                    idx TEXT NOT NULL,
                    value TEXT NOT NULL,
                    id TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_record_index_lookup ON record_index(tbl, idx, value)"
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_record_index_id ON record_index(tbl, id)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _key(value: Any) -> str:
        return json.dumps(value, sort_keys=True)

    def _index_rows(self, table: str, record: dict) -> list[tuple[str, str, str, str]]:
        rows = []
        for index, field in self.indexes.get(table, {}).items():
            value = record.get(field)
            values = value if isinstance(value, list) else [value]
            for v in values:
                if v is None:
                    continue
                rows.append((table, index, self._key(v), record["id"]))
        return rows

    def put(self, table: str, record: dict) -> None:
        record_id = record["id"]
        body = json.dumps(record, ensure_ascii=False)
        conn = self._get_conn()
        try:
            with conn:
                conn.execute(
                    "INSERT INTO records(tbl, id, body) VALUES (?, ?, ?) "
                    "ON CONFLICT(tbl, id) DO UPDATE SET body = excluded.body",
                    (table, record_id, body),
                )
                conn.execute("DELETE FROM record_index WHERE tbl = ? AND id = ?", (table, record_id))
                conn.executemany(
                    "INSERT INTO record_index(tbl, idx, value, id) VALUES (?, ?, ?, ?)",
                    self._index_rows(table, record),
                )
        finally:
            conn.close()

    def get(self, table: str, record_id: str) -> dict | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT body FROM records WHERE tbl = ? AND id = ?", (table, record_id)
            ).fetchone()
            return json.loads(row["body"]) if row else None
        finally:
            conn.close()

    def get_all(self, table: str) -> list[dict]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT body FROM records WHERE tbl = ? ORDER BY rowid", (table,)
            ).fetchall()
            return [json.loads(r["body"]) for r in rows]
        finally:
            conn.close()

    def get_all_by_index(self, table: str, index: str, value: Any) -> list[dict]:
        if index not in self.indexes.get(table, {}):
            raise KeyError(f"Unknown index {index!r} on table {table!r}")
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT DISTINCT r.body, r.rowid
                FROM record_index i
                JOIN records r ON r.tbl = i.tbl AND r.id = i.id
                WHERE i.tbl = ? AND i.idx = ? AND i.value = ?
                ORDER BY r.rowid
                """,
                (table, index, self._key(value)),
            ).fetchall()
            return [json.loads(r["body"]) for r in rows]
        finally:
            conn.close()

    def delete(self, table: str, record_id: str) -> None:
        conn = self._get_conn()
        try:
            with conn:
                conn.execute("DELETE FROM records WHERE tbl = ? AND id = ?", (table, record_id))
                conn.execute("DELETE FROM record_index WHERE tbl = ? AND id = ?", (table, record_id))
        finally:
            conn.close()

    def count(self, table: str) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM records WHERE tbl = ?", (table,)).fetchone()
            return int(n)
        finally:
            conn.close()
