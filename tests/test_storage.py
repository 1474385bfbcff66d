"""Tests for the key-value stores."""

import json

import pytest

from expense_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    SerializationError,
    StorageError,
)


class TestJsonFileStore:

    def test_missing_file_returns_default(self, tmp_path):
        store = JsonFileStore(tmp_path / "storage.json")
        assert store.get("expenses", []) == []
        assert store.get("expenses") is None

    def test_set_then_get(self, tmp_path):
        store = JsonFileStore(tmp_path / "storage.json")
        store.set("budgets", [{"category": "Groceries", "monthlyLimit": 100}])
        assert store.get("budgets") == [{"category": "Groceries", "monthlyLimit": 100}]

    def test_values_survive_a_new_instance(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        JsonFileStore(path).set("expenses", [{"id": "1"}])
        assert JsonFileStore(path).get("expenses") == [{"id": "1"}]

    def test_keys_are_independent(self, tmp_path):
        store = JsonFileStore(tmp_path / "storage.json")
        store.set("expenses", [1])
        store.set("budgets", [2])
        store.set("expenses", [3])
        assert store.get("expenses") == [3]
        assert store.get("budgets") == [2]

    def test_file_is_a_single_json_object(self, tmp_path):
        path = tmp_path / "storage.json"
        store = JsonFileStore(path)
        store.set("expenses", [])
        store.set("budgets", [])
        assert json.loads(path.read_text(encoding="utf-8")) == {"budgets": [], "expenses": []}

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonFileStore(path).get("expenses", []) == []

    def test_non_object_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonFileStore(path).get("expenses", "fallback") == "fallback"

    def test_unserializable_value_leaves_file_untouched(self, tmp_path):
        path = tmp_path / "storage.json"
        store = JsonFileStore(path)
        store.set("expenses", [{"id": "1"}])
        before = path.read_text(encoding="utf-8")

        with pytest.raises(SerializationError):
            store.set("expenses", [object()])

        assert path.read_text(encoding="utf-8") == before

    def test_write_failure_raises_storage_error(self, tmp_path):
        # A directory where the file should be cannot be replaced.
        path = tmp_path / "storage.json"
        path.mkdir()
        store = JsonFileStore(path)

        with pytest.raises(StorageError):
            store.set("expenses", [])

        assert not any(p.name.endswith(".tmp") for p in tmp_path.iterdir())

    def test_serialization_error_is_a_storage_error(self):
        assert issubclass(SerializationError, StorageError)


class TestInMemoryStore:

    def test_default_when_missing(self):
        assert InMemoryStore().get("anything", 5) == 5

    def test_values_are_copies(self):
        """Mutating a returned value does not change what is stored."""
        store = InMemoryStore({"expenses": [{"id": "1"}]})
        value = store.get("expenses")
        value.append({"id": "2"})
        assert store.get("expenses") == [{"id": "1"}]

    def test_raw_holds_json_text(self):
        store = InMemoryStore()
        store.set("budgets", [{"category": "Dining", "monthlyLimit": 50.0}])
        assert json.loads(store.raw("budgets")) == [{"category": "Dining", "monthlyLimit": 50.0}]

    def test_unserializable_value(self):
        with pytest.raises(SerializationError):
            InMemoryStore().set("x", {1, 2})
