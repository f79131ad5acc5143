"""Abstract store interface.

Any storage backend (in-memory, SQLite, Gist) implements this interface.
The workflow depends on BaseStore, not on a concrete backend, so backends
are swappable without touching the workflow or the CLI.

Documents are plain JSON-compatible dicts. The store owns three fields on
every document: ``id``, ``createdAt`` and ``updatedAt``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Mapping


def server_timestamp() -> str:
    """Timestamp assigned by the store on insert and update (ISO-8601 UTC)."""
    return datetime.now(timezone.utc).isoformat()


class BaseStore(ABC):
    """Pluggable document persistence layer.

    Implementations resolve credentials at construction time; none of the
    methods below prompt for input.
    """

    @abstractmethod
    def insert(self, collection: str, document: Mapping[str, Any]) -> str:
        """Persist a new document and return its assigned id.

        ``createdAt`` and ``updatedAt`` are set by the store and override any
        value present in ``document``.
        """

    @abstractmethod
    def get_by_id(self, collection: str, doc_id: str) -> dict | None:
        """Return the document with ``doc_id``, or None if it does not exist."""

    @abstractmethod
    def query(
        self,
        collection: str,
        where: Mapping[str, Any] | None = None,
        order_by: str = "createdAt",
        descending: bool = True,
    ) -> list[dict]:
        """Return documents whose fields equal every value in ``where``.

        Results are sorted by ``order_by``. Documents with equal sort keys are
        returned newest-inserted first when ``descending`` is set.
        """

    @abstractmethod
    def update(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        append: Mapping[str, Any] | None = None,
    ) -> None:
        """Set ``fields`` and append each ``append`` value to its array field.

        Refreshes ``updatedAt``. Raises NotFound without mutating anything
        when ``doc_id`` does not exist.
        """

    def close(self) -> None:
        """Release any resources held by the store (connections, clients).

        Default is a no-op so callers can always call close() safely.
        """


def matches(document: Mapping[str, Any], where: Mapping[str, Any] | None) -> bool:
    """Equality predicate shared by backends that filter in memory."""
    if not where:
        return True
    return all(document.get(key) == value for key, value in where.items())


def apply_update(
    document: dict,
    fields: Mapping[str, Any],
    append: Mapping[str, Any] | None,
) -> dict:
    """Apply an update in place and return the document.

    Backends that load the whole document before writing it back share this
    so set-then-append semantics are identical everywhere.
    """
    document.update(fields)
    for key, value in (append or {}).items():
        current = document.get(key)
        document[key] = list(current or []) + [value]
    document["updatedAt"] = server_timestamp()
    return document
