"""Pure construction helpers for schema records and their persisted JSON form."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable, Mapping

from pydantic import ValidationError

from .models import (
    ColumnInfo,
    ColumnMapping,
    ColumnValueMapping,
    ItemSchemaMapping,
    PropertyReference,
    QualifierMapping,
    ReferenceMapping,
    ReferenceSnak,
    StatementMapping,
    StatementRank,
    TermsMapping,
    ValueMapping,
    WikibaseDataType,
    new_id,
)

logger = logging.getLogger(__name__)


def build_statement(
    property: PropertyReference,
    value: ValueMapping,
    rank: StatementRank | str = StatementRank.NORMAL,
    qualifiers: Iterable[QualifierMapping] = (),
    references: Iterable[ReferenceMapping] = (),
) -> StatementMapping:
    """Create a statement with a fresh id. No validation beyond the model shape."""
    return StatementMapping(
        id=new_id(),
        property=property,
        value=value,
        rank=rank,
        qualifiers=list(qualifiers),
        references=list(references),
    )


def build_qualifier(property: PropertyReference, value: ValueMapping) -> QualifierMapping:
    return QualifierMapping(id=new_id(), property=property, value=value)


def build_reference(
    snaks: Iterable[tuple[PropertyReference, ValueMapping]] | Iterable[ReferenceSnak],
) -> ReferenceMapping:
    """Bundle property-value pairs into one reference."""
    built: list[ReferenceSnak] = []
    for snak in snaks:
        if isinstance(snak, ReferenceSnak):
            built.append(snak)
        else:
            prop, value = snak
            built.append(ReferenceSnak(id=new_id(), property=prop, value=value))
    return ReferenceMapping(id=new_id(), snaks=built)


def build_terms(
    labels: Mapping[str, ColumnMapping] | None = None,
    descriptions: Mapping[str, ColumnMapping] | None = None,
    aliases: Mapping[str, Iterable[ColumnMapping]] | None = None,
) -> TermsMapping:
    return TermsMapping(
        labels=dict(labels or {}),
        descriptions=dict(descriptions or {}),
        aliases={lang: list(mappings) for lang, mappings in (aliases or {}).items()},
    )


def build_item_schema(
    terms: TermsMapping,
    statements: Iterable[StatementMapping],
    item_id: str | None = None,
) -> ItemSchemaMapping:
    data: dict[str, Any] = {"terms": terms, "statements": list(statements)}
    if item_id is not None:
        data["id"] = item_id
    return ItemSchemaMapping(**data)


def create_empty_schema() -> ItemSchemaMapping:
    """Return the "new schema" default: no terms, no statements."""
    return ItemSchemaMapping(terms=TermsMapping(), statements=[])


def column_mapping_from_column(column: ColumnInfo) -> ColumnMapping:
    return ColumnMapping(column_name=column.name, data_type=column.data_type)


def column_value_mapping(
    column: ColumnInfo | ColumnMapping,
    data_type: WikibaseDataType | str,
) -> ColumnValueMapping:
    """Value mapping that reads a statement value from a column."""
    if isinstance(column, ColumnInfo):
        column = column_mapping_from_column(column)
    return ColumnValueMapping(source=column, data_type=data_type)


def parse_schema(
    raw: Any,
    on_error: Callable[[Exception], None] | None = None,
) -> ItemSchemaMapping:
    """Parse a persisted schema.

    Accepts a JSON string or bytes, a decoded mapping, or an existing
    ``ItemSchemaMapping``. Malformed input never fails the caller: it is
    logged (and handed to ``on_error`` when given) and the empty schema is
    returned. The raw blob stays with the persistence gateway.
    """
    if isinstance(raw, ItemSchemaMapping):
        return raw.model_copy(deep=True)
    if raw is None or (isinstance(raw, (str, bytes)) and not raw.strip()):
        return create_empty_schema()

    try:
        data = json.loads(raw) if isinstance(raw, (str, bytes, bytearray)) else raw
        if not isinstance(data, Mapping):
            raise ValueError(f"Schema JSON must be an object, got {type(data).__name__}")
        return ItemSchemaMapping.model_validate(data)
    except (ValueError, TypeError, ValidationError) as exc:
        # json.JSONDecodeError and pydantic's ValidationError are ValueErrors too
        logger.warning("Falling back to an empty schema, persisted schema is malformed: %s", exc)
        if on_error is not None:
            on_error(exc)
        return create_empty_schema()


def schema_to_dict(schema: ItemSchemaMapping) -> dict[str, Any]:
    return schema.model_dump(mode="json", by_alias=True, exclude_none=True)


def serialize_schema(schema: ItemSchemaMapping, indent: int | None = None) -> str:
    """Canonical JSON form: camelCase keys, unset optionals omitted, statement order kept."""
    return json.dumps(schema_to_dict(schema), ensure_ascii=False, indent=indent)
