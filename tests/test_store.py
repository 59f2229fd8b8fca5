"""Tests for the SchemaStore mutation API."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from wbschema.mapping.builder import build_qualifier, build_reference, serialize_schema
from wbschema.mapping.models import (
    ColumnMapping,
    ConstantValueMapping,
    PropertyReference,
    StatementRank,
)
from wbschema.mapping.store import SchemaStore


class TestTerms:
    def test_add_label_marks_dirty(self, store, title_mapping) -> None:
        assert not store.is_dirty
        store.add_label_mapping("en", title_mapping)
        assert store.labels == {"en": title_mapping}
        assert store.is_dirty

    def test_remove_missing_label_is_a_noop(self, store) -> None:
        store.remove_label_mapping("fr")
        assert store.labels == {}
        assert not store.is_dirty

    def test_aliases_are_not_deduplicated(self, store, title_mapping) -> None:
        store.add_alias_mapping("en", title_mapping)
        store.add_alias_mapping("en", title_mapping)
        assert store.aliases["en"] == [title_mapping, title_mapping]

    def test_remove_alias_by_value_equality(self, store, title_mapping) -> None:
        other = ColumnMapping(column_name="nickname", data_type="VARCHAR")
        store.add_alias_mapping("en", title_mapping)
        store.add_alias_mapping("en", other)
        store.add_alias_mapping("en", title_mapping)

        store.remove_alias_mapping("en", ColumnMapping(column_name="title", data_type="VARCHAR"))
        assert store.aliases["en"] == [other, title_mapping]

    def test_removing_last_alias_drops_language(self, store, title_mapping) -> None:
        store.add_alias_mapping("en", title_mapping)
        store.remove_alias_mapping("en", title_mapping)
        assert "en" not in store.aliases

    def test_description_mappings(self, store, title_mapping) -> None:
        store.add_description_mapping("de", title_mapping)
        store.remove_description_mapping("de")
        assert store.descriptions == {}


class TestStatements:
    def test_add_statement_defaults(self, store, string_property, title_value) -> None:
        statement_id = store.add_statement(string_property, title_value)
        statement = store.get_statement(statement_id)
        assert statement.rank is StatementRank.NORMAL
        assert statement.qualifiers == []
        assert statement.references == []
        assert store.is_dirty

    def test_ids_are_unique(self, store, string_property, title_value) -> None:
        ids = [store.add_statement(string_property, title_value) for _ in range(50)]
        assert len(set(ids)) == 50
        assert store.statement_ids == ids

    def test_ids_stay_unique_after_removal(self, store, string_property, title_value) -> None:
        first = store.add_statement(string_property, title_value)
        store.remove_statement(first)
        second = store.add_statement(string_property, title_value)
        assert second != first
        assert store.statement_count == 1

    def test_remove_statement_is_idempotent(self, store, string_property, title_value) -> None:
        statement_id = store.add_statement(string_property, title_value)
        store.mark_as_saved()

        store.remove_statement(statement_id)
        assert store.is_dirty
        store.mark_as_saved()

        store.remove_statement(statement_id)
        assert store.statements == ()
        assert not store.is_dirty

    def test_update_missing_statement_is_a_noop(self, store, title_value) -> None:
        store.update_statement_rank("missing", StatementRank.PREFERRED)
        store.update_statement_value("missing", title_value)
        store.remove_qualifier_from_statement("missing", 0)
        assert not store.is_dirty

    def test_update_rank(self, store, string_property, title_value) -> None:
        statement_id = store.add_statement(string_property, title_value)
        store.update_statement_rank(statement_id, "deprecated")
        assert store.get_statement(statement_id).rank is StatementRank.DEPRECATED

    def test_invalid_rank_is_rejected(self, store, string_property, title_value) -> None:
        statement_id = store.add_statement(string_property, title_value)
        with pytest.raises(ValidationError):
            store.update_statement_rank(statement_id, "best")

    def test_update_statement_keeps_position(self, store, string_property, title_value) -> None:
        first = store.add_statement(string_property, title_value)
        second = store.add_statement(string_property, title_value)
        population = PropertyReference(id="P1082", data_type="quantity")
        value = ConstantValueMapping(source="100", data_type="quantity")

        store.update_statement(first, population, value, StatementRank.PREFERRED)

        assert store.statement_ids == [first, second]
        assert store.get_statement(first).property == population
        assert store.get_statement(first).rank is StatementRank.PREFERRED

    def test_qualifiers_and_references(self, store, string_property, title_value) -> None:
        statement_id = store.add_statement(string_property, title_value)
        qualifier = build_qualifier(string_property, title_value)
        reference = build_reference([(string_property, title_value)])

        store.add_qualifier_to_statement(statement_id, qualifier)
        store.add_reference_to_statement(statement_id, reference)
        statement = store.get_statement(statement_id)
        assert statement.qualifiers == [qualifier]
        assert statement.references == [reference]

        store.remove_qualifier_from_statement(statement_id, 0)
        store.remove_reference_from_statement(statement_id, reference.id)
        statement = store.get_statement(statement_id)
        assert statement.qualifiers == []
        assert statement.references == []

    def test_statements_view_is_read_only(self, store, string_property, title_value) -> None:
        store.add_statement(string_property, title_value)
        assert isinstance(store.statements, tuple)


class TestLifecycle:
    def test_mark_as_saved_clears_dirty(self, store, title_mapping) -> None:
        store.add_label_mapping("en", title_mapping)
        store.mark_as_saved()
        assert not store.is_dirty
        assert store.last_saved is not None
        assert store.updated_at

    def test_reset_restores_defaults(self, store, string_property, title_value) -> None:
        store.add_statement(string_property, title_value)
        store.update_schema_name("Schools")
        store.reset()
        assert store.statements == ()
        assert store.name == ""
        assert not store.is_dirty
        assert not store.has_content

    def test_set_item_id_validates(self, store) -> None:
        store.set_item_id("Q42")
        assert store.item_id == "Q42"
        with pytest.raises(ValidationError):
            store.set_item_id("nope")
        assert store.item_id == "Q42"

    def test_load_schema_round_trip(self, store, string_property, title_value, title_mapping) -> None:
        store.add_label_mapping("en", title_mapping)
        statement_id = store.add_statement(string_property, title_value)
        blob = serialize_schema(store.to_schema())

        loaded = SchemaStore()
        loaded.load_schema(blob, schema_id="schema-1", project_id="project-1", name="Schools")
        assert not loaded.is_dirty
        assert loaded.statement_ids == [statement_id]
        assert loaded.labels == {"en": title_mapping}
        assert loaded.schema_id == "schema-1"

    def test_load_malformed_schema_gives_empty_store(self, store) -> None:
        store.load_schema("{broken", schema_id="schema-1")
        assert not store.has_content
        assert store.schema_id == "schema-1"

    def test_to_schema_is_a_snapshot(self, store, string_property, title_value) -> None:
        statement_id = store.add_statement(string_property, title_value)
        snapshot = store.to_schema()
        store.update_statement_rank(statement_id, StatementRank.PREFERRED)
        assert snapshot.statements[0].rank is StatementRank.NORMAL

    def test_can_save(self, store, title_mapping) -> None:
        assert not store.can_save
        store.load_schema(None, project_id="project-1")
        store.add_label_mapping("en", title_mapping)
        assert store.can_save
        store.set_loading(True)
        assert not store.can_save
