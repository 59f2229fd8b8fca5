"""Shared fixtures: column records, drop targets and a fake entity client."""

from __future__ import annotations

from typing import Any

import pytest

from wbschema.backend.interface import EntityClient
from wbschema.config.settings import Settings
from wbschema.exceptions import EntityNotFoundError
from wbschema.mapping.models import (
    ColumnInfo,
    ColumnMapping,
    ColumnValueMapping,
    PropertyReference,
    WikibaseDataType,
)
from wbschema.mapping.store import SchemaStore


class FakeEntityClient(EntityClient):
    """In-memory entity client that records every fetch."""

    def __init__(self, entities: dict[str, dict[str, Any]] | None = None) -> None:
        self.entities = entities or {}
        self.calls: list[tuple[str, str]] = []
        self.errors: dict[str, Exception] = {}

    async def get_entity(self, instance_id: str, entity_id: str) -> dict[str, Any]:
        self.calls.append((instance_id, entity_id))
        if entity_id in self.errors:
            raise self.errors[entity_id]
        if entity_id not in self.entities:
            raise EntityNotFoundError(entity_id)
        return self.entities[entity_id]


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def constraint_claim(constraint_item: str, qualifiers: dict[str, list[dict]] | None = None) -> dict:
    """A P2302 claim as returned by wbgetentities."""
    claim: dict[str, Any] = {
        "mainsnak": {
            "snaktype": "value",
            "property": "P2302",
            "datavalue": {
                "value": {"entity-type": "item", "id": constraint_item},
                "type": "wikibase-entityid",
            },
        },
        "type": "statement",
        "rank": "normal",
    }
    if qualifiers:
        claim["qualifiers"] = qualifiers
    return claim


def string_snak(property_id: str, value: str) -> dict:
    return {
        "snaktype": "value",
        "property": property_id,
        "datavalue": {"value": value, "type": "string"},
    }


def item_snak(property_id: str, item_id: str) -> dict:
    return {
        "snaktype": "value",
        "property": property_id,
        "datavalue": {"value": {"entity-type": "item", "id": item_id}, "type": "wikibase-entityid"},
    }


def quantity_snak(property_id: str, amount: str) -> dict:
    return {
        "snaktype": "value",
        "property": property_id,
        "datavalue": {"value": {"amount": amount, "unit": "1"}, "type": "quantity"},
    }


def property_entity(property_id: str, claims: list[dict], label: str = "test property") -> dict:
    return {
        "type": "property",
        "id": property_id,
        "datatype": "string",
        "labels": {"en": {"language": "en", "value": label}},
        "claims": {"P2302": claims},
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def store() -> SchemaStore:
    return SchemaStore()


@pytest.fixture
def varchar_column() -> ColumnInfo:
    return ColumnInfo(name="title", data_type="VARCHAR", sample_values=["Alpha", "Beta"])


@pytest.fixture
def integer_column() -> ColumnInfo:
    return ColumnInfo(name="population", data_type="INTEGER", sample_values=["10", "20"])


@pytest.fixture
def title_mapping() -> ColumnMapping:
    return ColumnMapping(column_name="title", data_type="VARCHAR")


@pytest.fixture
def string_property() -> PropertyReference:
    return PropertyReference(id="P31", label="instance of", data_type="string")


@pytest.fixture
def title_value(title_mapping: ColumnMapping) -> ColumnValueMapping:
    return ColumnValueMapping(source=title_mapping, data_type=WikibaseDataType.STRING)
