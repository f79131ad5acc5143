"""SQLiteStore — local file-based store for single-machine deployments.

Why SQLite as the local store:
- Batteries included: ships with Python, no extra dependencies.
- Equality filters run in SQL via json_extract instead of a full scan in
  Python, so listing one owner's complaints stays fast as history grows.

Schema:
  documents — one row per document; the body is stored as JSON and the
              store-owned timestamps are mirrored into columns for ordering.
"""

from __future__ import annotations

import json
import logging
import re
import sqlite3
import uuid
from typing import Any, Mapping

from cleantrack_store.base import BaseStore, apply_update, server_timestamp
from cleantrack_store.errors import NotFound, StoreUnavailable

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    seq         INTEGER PRIMARY KEY AUTOINCREMENT,
    collection  TEXT NOT NULL,
    id          TEXT NOT NULL,
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL,
    body        TEXT NOT NULL DEFAULT '{}',
    UNIQUE (collection, id)
);
CREATE INDEX IF NOT EXISTS idx_documents_created ON documents (collection, created_at);
"""

# Field names end up inside a JSON path, so only plain identifiers are allowed.
_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SQLiteStore(BaseStore):
    """Stores documents in a local SQLite database file.

    The database file path defaults to `.cleantrack.db` in the current working
    directory. Configure via .cleantrack.yml: `store_path: /path/to/file.db`.
    """

    def __init__(self, db_path: str = ".cleantrack.db"):
        try:
            self._conn = sqlite3.connect(db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(_SCHEMA)
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"cannot open SQLite store at {db_path}: {e}") from e

    def insert(self, collection: str, document: Mapping[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        now = server_timestamp()
        body = {k: v for k, v in document.items() if k != "id"}
        body["createdAt"] = now
        body["updatedAt"] = now
        self._execute(
            "INSERT INTO documents (collection, id, created_at, updated_at, body) VALUES (?, ?, ?, ?, ?)",
            (collection, doc_id, now, now, json.dumps(body)),
        )
        self._conn.commit()
        logger.debug("Inserted %s/%s", collection, doc_id)
        return doc_id

    def get_by_id(self, collection: str, doc_id: str) -> dict | None:
        row = self._execute(
            "SELECT id, body FROM documents WHERE collection=? AND id=?",
            (collection, doc_id),
        ).fetchone()
        return self._row_to_document(row) if row is not None else None

    def query(
        self,
        collection: str,
        where: Mapping[str, Any] | None = None,
        order_by: str = "createdAt",
        descending: bool = True,
    ) -> list[dict]:
        clauses = ["collection=?"]
        params: list[Any] = [collection]
        for key, value in (where or {}).items():
            clauses.append(f"json_extract(body, '$.{_field(key)}') = ?")
            params.append(value)

        direction = "DESC" if descending else "ASC"
        sql = (
            f"SELECT id, body FROM documents WHERE {' AND '.join(clauses)} "
            f"ORDER BY json_extract(body, '$.{_field(order_by)}') {direction}, seq {direction}"
        )
        return [self._row_to_document(r) for r in self._execute(sql, params).fetchall()]

    def update(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        append: Mapping[str, Any] | None = None,
    ) -> None:
        # Read-modify-write inside one transaction so the set and the append
        # land together.
        with self._conn:
            row = self._execute(
                "SELECT body FROM documents WHERE collection=? AND id=?",
                (collection, doc_id),
            ).fetchone()
            if row is None:
                raise NotFound(collection, doc_id)
            body = apply_update(json.loads(row["body"]), fields, append)
            self._execute(
                "UPDATE documents SET body=?, updated_at=? WHERE collection=? AND id=?",
                (json.dumps(body), body["updatedAt"], collection, doc_id),
            )

    def close(self) -> None:
        self._conn.close()

    def _execute(self, sql: str, params=()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, params)
        except sqlite3.Error as e:
            logger.warning("SQLiteStore query failed (%s): %s", type(e).__name__, e)
            raise StoreUnavailable(str(e)) from e

    @staticmethod
    def _row_to_document(row: sqlite3.Row) -> dict:
        body = json.loads(row["body"] or "{}")
        return {"id": row["id"], **body}


def _field(name: str) -> str:
    if not _FIELD_RE.match(name):
        raise ValueError(f"Invalid field name: {name!r}")
    return name
