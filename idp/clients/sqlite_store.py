"""SQLite-backed substitute for the DynamoDB record tables."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, Optional

from idp.models import RecordCollection


class SQLiteRecordStore:
    """One SQLite table per collection, keyed like its DynamoDB counterpart.

    Items are stored whole as JSON next to their key column, so callers get
    back exactly the dict they put.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    @staticmethod
    def _table(collection: RecordCollection) -> str:
        return f"idp_{collection.value}"

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            for collection in RecordCollection:
                conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {self._table(collection)} ("
                    f"{collection.key_attribute} TEXT PRIMARY KEY, item TEXT NOT NULL)"
                )

    def put(self, collection: RecordCollection, record: Dict[str, Any]) -> None:
        key_attribute = collection.key_attribute
        key = record.get(key_attribute)
        if not key:
            raise ValueError(
                f"Record for {collection.value} must include '{key_attribute}'"
            )

        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO {self._table(collection)} "
                f"({key_attribute}, item) VALUES (?, ?)",
                (key, json.dumps(record)),
            )

    def get(self, collection: RecordCollection, key: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT item FROM {self._table(collection)} "
                f"WHERE {collection.key_attribute} = ?",
                (key,),
            ).fetchone()
        return json.loads(row["item"]) if row else None

    def pop(self, collection: RecordCollection, key: str) -> Optional[Dict[str, Any]]:
        """Delete a record and return it; ``None`` if another caller got there first."""
        with self._connect() as conn:
            row = conn.execute(
                f"DELETE FROM {self._table(collection)} "
                f"WHERE {collection.key_attribute} = ? RETURNING item",
                (key,),
            ).fetchone()
        return json.loads(row["item"]) if row else None


__all__ = ["SQLiteRecordStore"]
