"""Tests for cleantrack-store implementations."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from cleantrack_store.errors import NotFound, StoreUnavailable
from cleantrack_store.gist import GistStore
from cleantrack_store.memory import MemoryStore
from cleantrack_store.sqlite import SQLiteStore


def _make_doc(user_id="u1", status="pending", title="Pothole on Main"):
    return {
        "title": title,
        "userId": user_id,
        "status": status,
        "statusHistory": [{"status": "pending", "note": "Complaint submitted"}],
    }


# ---------------------------------------------------------------------------
# Behaviour shared by every backend
# ---------------------------------------------------------------------------


def _make_gist_store():
    """Return a GistStore backed by a single mocked Gist whose files persist across edits."""
    store = object.__new__(GistStore)
    store._gist_id = "abc123"
    store._gh = MagicMock()

    gist = MagicMock()
    gist.files = {}

    def _edit(files):
        for name, content in files.items():
            file_obj = MagicMock()
            file_obj.content = content
            gist.files[name] = file_obj

    gist.edit.side_effect = _edit
    store._gh.get_gist.return_value = gist
    return store


@pytest.fixture(params=["memory", "sqlite", "gist"])
def store(request, tmp_path, mocker):
    if request.param == "memory":
        s = MemoryStore()
    elif request.param == "sqlite":
        s = SQLiteStore(db_path=str(tmp_path / "test.db"))
    else:
        # The mock gist stores whatever is handed to edit(); keep it a plain string.
        mocker.patch("github.InputFileContent", side_effect=lambda content: content)
        s = _make_gist_store()
    yield s
    s.close()


class TestStoreContract:
    def test_insert_assigns_id_and_timestamps(self, store):
        doc_id = store.insert("complaints", _make_doc())

        doc = store.get_by_id("complaints", doc_id)
        assert doc["id"] == doc_id
        assert doc["title"] == "Pothole on Main"
        assert doc["createdAt"]
        assert doc["createdAt"] == doc["updatedAt"]

    def test_insert_overrides_client_timestamps(self, store):
        doc_id = store.insert("complaints", {**_make_doc(), "createdAt": "1999-01-01"})
        assert store.get_by_id("complaints", doc_id)["createdAt"] != "1999-01-01"

    def test_get_missing_returns_none(self, store):
        assert store.get_by_id("complaints", "nope") is None

    def test_query_filters_by_equality(self, store):
        store.insert("complaints", _make_doc(user_id="u1"))
        store.insert("complaints", _make_doc(user_id="u2"))
        store.insert("complaints", _make_doc(user_id="u1", status="resolved"))

        assert len(store.query("complaints", where={"userId": "u1"})) == 2
        assert len(store.query("complaints", where={"userId": "u1", "status": "resolved"})) == 1
        assert store.query("complaints", where={"userId": "ghost"}) == []

    def test_query_newest_first(self, store):
        first = store.insert("complaints", _make_doc(title="first"))
        second = store.insert("complaints", _make_doc(title="second"))
        third = store.insert("complaints", _make_doc(title="third"))

        ids = [d["id"] for d in store.query("complaints")]
        assert ids == [third, second, first]

    def test_query_ascending(self, store):
        first = store.insert("complaints", _make_doc())
        second = store.insert("complaints", _make_doc())

        ids = [d["id"] for d in store.query("complaints", descending=False)]
        assert ids == [first, second]

    def test_collections_isolated(self, store):
        store.insert("complaints", _make_doc())
        store.insert("users", {"name": "Asha"})

        assert len(store.query("complaints")) == 1
        assert len(store.query("users")) == 1

    def test_update_sets_fields_and_appends(self, store):
        doc_id = store.insert("complaints", _make_doc())

        store.update(
            "complaints",
            doc_id,
            {"status": "resolved"},
            append={"statusHistory": {"status": "resolved", "note": "Fixed"}},
        )

        doc = store.get_by_id("complaints", doc_id)
        assert doc["status"] == "resolved"
        assert [e["status"] for e in doc["statusHistory"]] == ["pending", "resolved"]
        assert doc["updatedAt"] >= doc["createdAt"]

    def test_update_append_creates_missing_array(self, store):
        doc_id = store.insert("complaints", {"title": "x"})
        store.update("complaints", doc_id, {}, append={"tags": "urgent"})
        assert store.get_by_id("complaints", doc_id)["tags"] == ["urgent"]

    def test_update_missing_raises_not_found(self, store):
        with pytest.raises(NotFound) as exc_info:
            store.update("complaints", "missing", {"status": "resolved"})
        assert exc_info.value.doc_id == "missing"
        assert store.query("complaints") == []


# ---------------------------------------------------------------------------
# MemoryStore
# ---------------------------------------------------------------------------


class TestMemoryStore:
    def test_returned_documents_are_copies(self):
        store = MemoryStore()
        doc_id = store.insert("complaints", _make_doc())

        doc = store.get_by_id("complaints", doc_id)
        doc["statusHistory"].append({"status": "resolved"})
        doc["title"] = "changed"

        fresh = store.get_by_id("complaints", doc_id)
        assert fresh["title"] == "Pothole on Main"
        assert len(fresh["statusHistory"]) == 1

    def test_insert_does_not_keep_caller_reference(self):
        store = MemoryStore()
        original = _make_doc()
        doc_id = store.insert("complaints", original)
        original["statusHistory"].append({"status": "resolved"})

        assert len(store.get_by_id("complaints", doc_id)["statusHistory"]) == 1

    def test_equal_timestamps_newest_insert_first(self, mocker):
        mocker.patch("cleantrack_store.memory.server_timestamp", return_value="2024-01-01T00:00:00+00:00")
        store = MemoryStore()
        first = store.insert("complaints", _make_doc())
        second = store.insert("complaints", _make_doc())

        assert [d["id"] for d in store.query("complaints")] == [second, first]


# ---------------------------------------------------------------------------
# SQLiteStore
# ---------------------------------------------------------------------------


class TestSQLiteStore:
    def test_persists_across_connections(self, tmp_path):
        """Data written by one SQLiteStore instance must be readable by another."""
        db_path = str(tmp_path / "test.db")
        store_a = SQLiteStore(db_path=db_path)
        doc_id = store_a.insert("complaints", _make_doc())
        store_a.close()

        store_b = SQLiteStore(db_path=db_path)
        assert store_b.get_by_id("complaints", doc_id)["title"] == "Pothole on Main"
        store_b.close()

    def test_equal_timestamps_newest_insert_first(self, tmp_path, mocker):
        mocker.patch("cleantrack_store.sqlite.server_timestamp", return_value="2024-01-01T00:00:00+00:00")
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        first = store.insert("complaints", _make_doc())
        second = store.insert("complaints", _make_doc())

        assert [d["id"] for d in store.query("complaints")] == [second, first]
        store.close()

    def test_rejects_unsafe_field_names(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        with pytest.raises(ValueError):
            store.query("complaints", where={"status') OR 1=1 --": "x"})
        store.close()

    def test_unopenable_path_raises_store_unavailable(self, tmp_path):
        with pytest.raises(StoreUnavailable):
            SQLiteStore(db_path=str(tmp_path / "missing-dir" / "test.db"))


# ---------------------------------------------------------------------------
# GistStore
# ---------------------------------------------------------------------------


class TestGistStore:
    def test_insert_writes_collection_file(self, mocker):
        mocker.patch("github.InputFileContent", side_effect=lambda content: content)
        store = _make_gist_store()

        doc_id = store.insert("complaints", _make_doc())

        gist = store._gh.get_gist.return_value
        content = json.loads(gist.files["cleantrack_complaints.json"].content)
        assert list(content) == [doc_id]
        assert content[doc_id]["title"] == "Pothole on Main"

    def test_sequence_field_not_exposed(self, mocker):
        mocker.patch("github.InputFileContent", side_effect=lambda content: content)
        store = _make_gist_store()
        doc_id = store.insert("complaints", _make_doc())

        assert "_seq" not in store.get_by_id("complaints", doc_id)
        assert "_seq" not in store.query("complaints")[0]

    def test_fetch_failure_raises_store_unavailable(self):
        store = _make_gist_store()
        store._gh.get_gist.side_effect = Exception("network error")

        with pytest.raises(StoreUnavailable):
            store.query("complaints")

    def test_write_failure_raises_store_unavailable(self, mocker):
        mocker.patch("github.InputFileContent", side_effect=lambda content: content)
        store = _make_gist_store()
        store._gh.get_gist.return_value.edit.side_effect = Exception("401 Unauthorized")

        with pytest.raises(StoreUnavailable):
            store.insert("complaints", _make_doc())

    def test_invalid_json_treated_as_empty(self):
        store = _make_gist_store()
        broken = MagicMock()
        broken.content = "not json"
        store._gh.get_gist.return_value.files = {"cleantrack_complaints.json": broken}

        assert store.query("complaints") == []

    def test_non_object_collection_raises_store_unavailable(self, mocker):
        mocker.patch("github.InputFileContent", side_effect=lambda content: content)
        store = _make_gist_store()
        gist = store._gh.get_gist.return_value
        listing = MagicMock()
        listing.content = json.dumps([{"title": "legacy"}])
        gist.files = {"cleantrack_complaints.json": listing}

        with pytest.raises(StoreUnavailable):
            store.query("complaints")
        with pytest.raises(StoreUnavailable):
            store.insert("complaints", _make_doc())
        gist.edit.assert_not_called()
