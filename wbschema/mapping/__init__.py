"""Mapping layer: the item schema model built from column mappings.

This module provides:
- Pydantic records for terms, statements, qualifiers and references
- Pure builders to create records and to parse/serialize the persisted JSON
- The mutable schema store edited by the drag-and-drop editor
- Column registry helpers and completeness checks
"""

from .builder import (
    build_item_schema,
    build_qualifier,
    build_reference,
    build_statement,
    build_terms,
    column_mapping_from_column,
    column_value_mapping,
    create_empty_schema,
    parse_schema,
    schema_to_dict,
    serialize_schema,
)
from .columns import columns_from_dataframe, read_columns
from .completeness import (
    DEFAULT_RULES,
    CompletenessResult,
    CompletenessRule,
    check_completeness,
)
from .models import (
    ColumnInfo,
    ColumnMapping,
    ColumnValueMapping,
    ConstantValueMapping,
    ExpressionValueMapping,
    ItemSchemaMapping,
    PropertyReference,
    QualifierMapping,
    ReferenceMapping,
    ReferenceSnak,
    StatementMapping,
    StatementRank,
    TermsMapping,
    TransformationRule,
    TransformationType,
    ValueMapping,
    WikibaseDataType,
)
from .store import SchemaStore

__all__ = [
    # Models
    "ColumnInfo",
    "ColumnMapping",
    "ColumnValueMapping",
    "ConstantValueMapping",
    "ExpressionValueMapping",
    "ItemSchemaMapping",
    "PropertyReference",
    "QualifierMapping",
    "ReferenceMapping",
    "ReferenceSnak",
    "StatementMapping",
    "StatementRank",
    "TermsMapping",
    "TransformationRule",
    "TransformationType",
    "ValueMapping",
    "WikibaseDataType",
    # Builder
    "build_item_schema",
    "build_qualifier",
    "build_reference",
    "build_statement",
    "build_terms",
    "column_mapping_from_column",
    "column_value_mapping",
    "create_empty_schema",
    "parse_schema",
    "schema_to_dict",
    "serialize_schema",
    # Store
    "SchemaStore",
    # Columns and completeness
    "columns_from_dataframe",
    "read_columns",
    "DEFAULT_RULES",
    "CompletenessResult",
    "CompletenessRule",
    "check_completeness",
]
