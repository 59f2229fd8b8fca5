"""Compatibility table between Wikibase data types and native column types."""

from __future__ import annotations

from typing import Iterable, Mapping

from wbschema.mapping.models import WikibaseDataType

CompatibilityTable = Mapping[WikibaseDataType, frozenset[str]]

DATA_TYPE_COMPATIBILITY: CompatibilityTable = {
    WikibaseDataType.STRING: frozenset({"VARCHAR", "TEXT", "STRING", "JSON", "ARRAY"}),
    WikibaseDataType.URL: frozenset({"VARCHAR", "STRING"}),
    WikibaseDataType.EXTERNAL_ID: frozenset({"VARCHAR", "STRING"}),
    WikibaseDataType.MONOLINGUALTEXT: frozenset({"VARCHAR", "TEXT", "STRING"}),
    WikibaseDataType.QUANTITY: frozenset({"INTEGER", "DECIMAL", "NUMERIC", "FLOAT", "DOUBLE"}),
    WikibaseDataType.TIME: frozenset({"DATE", "DATETIME", "TIMESTAMP"}),
    WikibaseDataType.WIKIBASE_ITEM: frozenset({"VARCHAR", "STRING", "TEXT"}),
    WikibaseDataType.WIKIBASE_PROPERTY: frozenset({"VARCHAR", "STRING"}),
    WikibaseDataType.COMMONS_MEDIA: frozenset({"VARCHAR", "STRING"}),
    WikibaseDataType.GLOBE_COORDINATE: frozenset({"VARCHAR", "STRING"}),
}


def get_compatible_wikibase_types(
    column_type: str, table: CompatibilityTable = DATA_TYPE_COMPATIBILITY
) -> list[WikibaseDataType]:
    """Wikibase data types a column of ``column_type`` can feed, in table order."""
    native = column_type.upper()
    return [wikibase_type for wikibase_type, accepted in table.items() if native in accepted]


def is_data_type_compatible(
    column_type: str,
    accepted_types: Iterable[WikibaseDataType | str],
    table: CompatibilityTable = DATA_TYPE_COMPATIBILITY,
) -> bool:
    """True when the column type is acceptable for every one of ``accepted_types``.

    Comparison is case-insensitive. An empty ``accepted_types`` accepts nothing.
    """
    accepted_types = [WikibaseDataType(value) for value in accepted_types]
    if not accepted_types:
        return False

    native = column_type.upper()
    return all(native in table.get(wikibase_type, frozenset()) for wikibase_type in accepted_types)


def native_types_for(
    accepted_types: Iterable[WikibaseDataType | str],
    table: CompatibilityTable = DATA_TYPE_COMPATIBILITY,
) -> list[str]:
    """Native column types accepted by all of ``accepted_types``, sorted."""
    sets = [table.get(WikibaseDataType(value), frozenset()) for value in accepted_types]
    if not sets:
        return []
    return sorted(frozenset.intersection(*sets))
