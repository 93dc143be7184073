"""Tests for the in-memory and JSON file key-value stores."""

import json

import pytest

from shadowsight.exceptions import StorageError
from shadowsight.models.storage import JsonFileStore, MemoryStore


def test_memory_store_get_and_set():
    store = MemoryStore({"a": "1"})
    assert store.get("a") == "1"
    assert store.get("missing") is None
    store.set("b", "2")
    assert store.get("b") == "2"


def test_memory_store_copies_initial_values():
    initial = {"a": "1"}
    store = MemoryStore(initial)
    store.set("a", "changed")
    assert initial == {"a": "1"}


class TestJsonFileStore:
    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "progress.json")
        assert store.get("m_chess_elo") is None

    def test_set_creates_file_and_parent(self, tmp_path):
        path = tmp_path / "nested" / "progress.json"
        store = JsonFileStore(path)
        store.set("m_chess_elo", "415")

        assert json.loads(path.read_text(encoding="utf-8")) == {"m_chess_elo": "415"}
        assert not path.with_name("progress.json.tmp").exists()

    def test_values_persist_across_instances(self, tmp_path):
        path = tmp_path / "progress.json"
        JsonFileStore(path).set("m_chess_elo", "415")
        JsonFileStore(path).set("m_chess_streak", "1")

        reopened = JsonFileStore(path)
        assert reopened.get("m_chess_elo") == "415"
        assert reopened.get("m_chess_streak") == "1"

    def test_non_string_values_are_returned_as_strings(self, tmp_path):
        path = tmp_path / "progress.json"
        path.write_text('{"m_chess_elo": 1200}', encoding="utf-8")
        assert JsonFileStore(path).get("m_chess_elo") == "1200"

    @pytest.mark.parametrize("content", ["{not json", "", "[1, 2, 3]", '"text"'])
    def test_corrupt_file_is_treated_as_empty(self, tmp_path, caplog, content):
        path = tmp_path / "progress.json"
        path.write_text(content, encoding="utf-8")

        store = JsonFileStore(path)
        assert store.get("m_chess_elo") is None
        assert "Ignoring" in caplog.text

    def test_corrupt_file_is_replaced_on_write(self, tmp_path):
        path = tmp_path / "progress.json"
        path.write_text("{not json", encoding="utf-8")

        JsonFileStore(path).set("m_chess_elo", "390")
        assert json.loads(path.read_text(encoding="utf-8")) == {"m_chess_elo": "390"}

    def test_write_failure_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        store = JsonFileStore(blocker / "progress.json")

        with pytest.raises(StorageError) as exc:
            store.set("m_chess_elo", "400")
        assert exc.value.location == str(blocker / "progress.json")
