"""In-memory store: the default when no store is configured.

Nothing survives the process, which makes it the natural backend for tests
and for trying the CLI out. Using a real store rather than None lets the
CLI and the workflow always talk to a BaseStore without conditional checks.
"""

from __future__ import annotations

import copy
import itertools
import uuid
from typing import Any, Mapping

from cleantrack_store.base import BaseStore, apply_update, matches, server_timestamp
from cleantrack_store.errors import NotFound


class MemoryStore(BaseStore):
    """Keeps documents in a dict of collections.

    Every read returns a deep copy so callers cannot mutate stored state
    except through update().
    """

    def __init__(self):
        self._collections: dict[str, dict[str, dict]] = {}
        self._seq: dict[tuple[str, str], int] = {}
        self._counter = itertools.count()

    def insert(self, collection: str, document: Mapping[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        now = server_timestamp()
        stored = copy.deepcopy(dict(document))
        stored.pop("id", None)
        stored["createdAt"] = now
        stored["updatedAt"] = now
        self._collections.setdefault(collection, {})[doc_id] = stored
        self._seq[(collection, doc_id)] = next(self._counter)
        return doc_id

    def get_by_id(self, collection: str, doc_id: str) -> dict | None:
        stored = self._collections.get(collection, {}).get(doc_id)
        if stored is None:
            return None
        return {"id": doc_id, **copy.deepcopy(stored)}

    def query(
        self,
        collection: str,
        where: Mapping[str, Any] | None = None,
        order_by: str = "createdAt",
        descending: bool = True,
    ) -> list[dict]:
        docs = self._collections.get(collection, {})
        selected = [(doc_id, doc) for doc_id, doc in docs.items() if matches(doc, where)]
        selected.sort(
            key=lambda item: (item[1].get(order_by) or "", self._seq[(collection, item[0])]),
            reverse=descending,
        )
        return [{"id": doc_id, **copy.deepcopy(doc)} for doc_id, doc in selected]

    def update(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        append: Mapping[str, Any] | None = None,
    ) -> None:
        stored = self._collections.get(collection, {}).get(doc_id)
        if stored is None:
            raise NotFound(collection, doc_id)
        apply_update(stored, copy.deepcopy(dict(fields)), copy.deepcopy(append))
