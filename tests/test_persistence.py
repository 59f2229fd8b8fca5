"""Tests for the file gateway and the save/load/delete helpers."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from wbschema.exceptions import PersistenceError
from wbschema.persistence.gateway import FileSchemaGateway
from wbschema.persistence.schemas import delete_schema, load_schema, save_schema


@pytest.fixture
def gateway(tmp_path) -> FileSchemaGateway:
    return FileSchemaGateway(tmp_path / "schemas")


class TestFileSchemaGateway:
    def test_write_read_delete(self, gateway) -> None:
        assert gateway.read("s1") is None
        gateway.write("s1", '{"a": 1}')
        assert gateway.read("s1") == '{"a": 1}'
        assert gateway.list_ids() == ["s1"]
        assert gateway.delete("s1")
        assert not gateway.delete("s1")
        assert gateway.list_ids() == []

    def test_invalid_ids_are_rejected(self, gateway) -> None:
        with pytest.raises(PersistenceError):
            gateway.write("../escape", "{}")

    def test_failed_write_keeps_previous_blob(self, gateway) -> None:
        gateway.write("s1", "old")
        with patch("wbschema.persistence.gateway.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError):
                gateway.write("s1", "new")
        assert gateway.read("s1") == "old"
        assert gateway.list_ids() == ["s1"]


class TestSchemaHelpers:
    def test_save_assigns_id_and_marks_saved(
        self, store, gateway, string_property, title_value, title_mapping
    ) -> None:
        store.update_schema_name("Schools")
        store.add_label_mapping("en", title_mapping)
        store.add_statement(string_property, title_value)

        schema_id = save_schema(store, gateway)

        assert store.schema_id == schema_id
        assert not store.is_dirty
        assert not store.is_loading
        document = json.loads(gateway.read(schema_id))
        assert document["name"] == "Schools"
        assert document["schema"]["terms"]["labels"]["en"]["columnName"] == "title"
        assert document["createdAt"]

    def test_load_round_trip(self, store, gateway, string_property, title_value) -> None:
        statement_id = store.add_statement(string_property, title_value)
        schema_id = save_schema(store, gateway)

        loaded = load_schema(gateway, schema_id)
        assert loaded.schema_id == schema_id
        assert loaded.statement_ids == [statement_id]
        assert not loaded.is_dirty
        assert loaded.to_schema().model_dump() == store.to_schema().model_dump()

    def test_failed_write_leaves_store_dirty(self, store, gateway, title_mapping) -> None:
        store.add_label_mapping("en", title_mapping)
        with patch.object(gateway, "write", side_effect=PersistenceError("disk full")):
            with pytest.raises(PersistenceError):
                save_schema(store, gateway)
        assert store.is_dirty
        assert store.last_saved is None
        assert store.created_at == ""
        assert store.updated_at == ""
        assert not store.is_loading

    def test_failed_write_keeps_clean_store_clean(self, store, gateway, title_mapping) -> None:
        store.add_label_mapping("en", title_mapping)
        schema_id = save_schema(store, gateway)
        saved = (store.created_at, store.updated_at, store.last_saved)

        with patch.object(gateway, "write", side_effect=PersistenceError("disk full")):
            with pytest.raises(PersistenceError):
                save_schema(store, gateway)
        assert not store.is_dirty
        assert (store.created_at, store.updated_at, store.last_saved) == saved
        assert store.schema_id == schema_id

    def test_load_unknown_schema(self, gateway) -> None:
        with pytest.raises(PersistenceError):
            load_schema(gateway, "missing")

    def test_load_corrupt_schema_degrades_to_empty(self, gateway) -> None:
        gateway.write("s1", json.dumps({"id": "s1", "name": "Broken", "schema": {"terms": 5}}))
        store = load_schema(gateway, "s1")
        assert store.name == "Broken"
        assert not store.has_content

    def test_delete_resets_store(self, store, gateway, title_mapping) -> None:
        store.add_label_mapping("en", title_mapping)
        schema_id = save_schema(store, gateway)

        assert delete_schema(store, gateway)
        assert gateway.read(schema_id) is None
        assert store.schema_id is None
        assert not store.has_content
