"""GistStore — zero-infrastructure shared complaint storage via GitHub Gist.

Why Gist as the shared store:
- Zero infra: no database to provision and no server to maintain.
- Built-in access control: the Gist ACL decides who can read and write, so
  a small municipal team can share one complaint log without a new login.
- Plain JSON: anyone with access can inspect the data in a browser.

Data format: one file per collection named `cleantrack_<collection>.json`.
Each file holds a JSON object mapping document id to document body; the
insertion sequence is kept in a `_seq` field so ordering ties are stable.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Mapping

from cleantrack_store.base import BaseStore, apply_update, matches, server_timestamp
from cleantrack_store.errors import NotFound, StoreUnavailable

logger = logging.getLogger(__name__)

_SEQ_FIELD = "_seq"


def _filename(collection: str) -> str:
    return f"cleantrack_{collection}.json"


class GistStore(BaseStore):
    """Stores each collection as a JSON object inside a GitHub Gist.

    Every write reads the whole file and writes it back, so two writers
    racing on the same Gist can lose an update. That is acceptable for
    the team sizes this backend targets; switch to SQLiteStore otherwise.

    Any GitHub failure is logged and raised as StoreUnavailable.
    """

    def __init__(self, gist_id: str, token: str):
        try:
            from github import Github
        except ImportError:
            raise ImportError("PyGithub is required for GistStore. Install it with: pip install PyGithub")
        self._gist_id = gist_id
        self._gh = Github(token)

    def insert(self, collection: str, document: Mapping[str, Any]) -> str:
        gist, docs = self._load(collection)
        doc_id = uuid.uuid4().hex
        now = server_timestamp()
        body = {k: v for k, v in document.items() if k != "id"}
        body["createdAt"] = now
        body["updatedAt"] = now
        body[_SEQ_FIELD] = max((d.get(_SEQ_FIELD, 0) for d in docs.values()), default=0) + 1
        docs[doc_id] = body
        self._write(gist, collection, docs)
        return doc_id

    def get_by_id(self, collection: str, doc_id: str) -> dict | None:
        _, docs = self._load(collection)
        body = docs.get(doc_id)
        return self._public(doc_id, body) if body is not None else None

    def query(
        self,
        collection: str,
        where: Mapping[str, Any] | None = None,
        order_by: str = "createdAt",
        descending: bool = True,
    ) -> list[dict]:
        _, docs = self._load(collection)
        selected = [(doc_id, body) for doc_id, body in docs.items() if matches(body, where)]
        selected.sort(
            key=lambda item: (item[1].get(order_by) or "", item[1].get(_SEQ_FIELD, 0)),
            reverse=descending,
        )
        return [self._public(doc_id, body) for doc_id, body in selected]

    def update(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        append: Mapping[str, Any] | None = None,
    ) -> None:
        gist, docs = self._load(collection)
        body = docs.get(doc_id)
        if body is None:
            raise NotFound(collection, doc_id)
        apply_update(body, fields, append)
        self._write(gist, collection, docs)

    def _load(self, collection: str):
        """Fetch the Gist and decode the collection file, or start empty."""
        try:
            gist = self._gh.get_gist(self._gist_id)
        except Exception as e:
            logger.warning("GistStore: fetching gist %s failed (%s): %s", self._gist_id, type(e).__name__, e)
            raise StoreUnavailable(f"could not read gist {self._gist_id}: {e}") from e

        file_obj = gist.files.get(_filename(collection))
        if file_obj is None:
            return gist, {}
        try:
            docs = json.loads(file_obj.content) or {}
        except (json.JSONDecodeError, AttributeError):
            logger.warning("GistStore: %s is not valid JSON, treating as empty", _filename(collection))
            docs = {}
        if not isinstance(docs, dict):
            logger.warning("GistStore: %s holds %s, not an object", _filename(collection), type(docs).__name__)
            raise StoreUnavailable(f"{_filename(collection)} in gist {self._gist_id} is not a JSON object")
        return gist, docs

    def _write(self, gist, collection: str, docs: dict) -> None:
        # InputFileContent is what PyGithub's Gist.edit expects for file bodies.
        from github import InputFileContent

        try:
            gist.edit(files={_filename(collection): InputFileContent(json.dumps(docs, indent=2))})
        except Exception as e:
            logger.warning("GistStore: writing gist %s failed (%s): %s", self._gist_id, type(e).__name__, e)
            raise StoreUnavailable(f"could not write gist {self._gist_id}: {e}") from e

    @staticmethod
    def _public(doc_id: str, body: dict) -> dict:
        return {"id": doc_id, **{k: v for k, v in body.items() if k != _SEQ_FIELD}}
