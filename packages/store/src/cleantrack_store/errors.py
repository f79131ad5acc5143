"""Store-level error types.

Raised by every backend so callers can handle persistence failures without
knowing which backend is configured.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for all store failures."""


class NotFound(StoreError):
    """The referenced document does not exist in the collection."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


class StoreUnavailable(StoreError):
    """The backing service could not be reached or rejected the call."""
