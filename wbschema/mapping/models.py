from __future__ import annotations

import uuid
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

PROPERTY_ID_PATTERN = r"^P[1-9][0-9]*$"
ITEM_ID_PATTERN = r"^Q[1-9][0-9]*$"


def new_id() -> str:
    return str(uuid.uuid4())


class MappingModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )


class WikibaseDataType(str, Enum):
    STRING = "string"
    WIKIBASE_ITEM = "wikibase-item"
    WIKIBASE_PROPERTY = "wikibase-property"
    QUANTITY = "quantity"
    TIME = "time"
    GLOBE_COORDINATE = "globe-coordinate"
    URL = "url"
    EXTERNAL_ID = "external-id"
    MONOLINGUALTEXT = "monolingualtext"
    COMMONS_MEDIA = "commonsMedia"


class StatementRank(str, Enum):
    PREFERRED = "preferred"
    NORMAL = "normal"
    DEPRECATED = "deprecated"


class TransformationType(str, Enum):
    CONSTANT = "constant"
    EXPRESSION = "expression"
    LOOKUP = "lookup"


class ColumnInfo(MappingModel):
    """A column as supplied by the column registry of the active dataset."""
    name: str = Field(..., description="Column name")
    data_type: str = Field(..., description="Native column data type (VARCHAR, INTEGER, ...)")
    sample_values: list[str] = Field(default_factory=list, description="First non-null values")
    nullable: bool = Field(False, description="Whether the column contains nulls")
    unique_count: int | None = Field(None, description="Number of distinct values")


class TransformationRule(MappingModel):
    type: TransformationType
    value: str
    parameters: dict[str, Any] | None = None


class ColumnMapping(MappingModel):
    """Identifies a source column and an optional transformation."""
    column_name: str = Field(..., description="Source column name")
    data_type: str = Field(..., description="Native column data type")
    transformation: TransformationRule | None = None


class PropertyReference(MappingModel):
    id: str = Field(..., pattern=PROPERTY_ID_PATTERN, description="Property ID (P123)")
    label: str | None = Field(None, description="Property label")
    data_type: str = Field(..., description="Property datatype")


class ColumnValueMapping(MappingModel):
    type: Literal["column"] = "column"
    source: ColumnMapping
    data_type: WikibaseDataType


class ConstantValueMapping(MappingModel):
    type: Literal["constant"] = "constant"
    source: str
    data_type: WikibaseDataType


class ExpressionValueMapping(MappingModel):
    type: Literal["expression"] = "expression"
    source: str
    data_type: WikibaseDataType


ValueMapping = Annotated[
    Union[ColumnValueMapping, ConstantValueMapping, ExpressionValueMapping],
    Field(discriminator="type"),
]


class PropertyValueMapping(MappingModel):
    """A property-value pair (snak) used by qualifiers and references."""
    id: str = Field(default_factory=new_id)
    property: PropertyReference
    value: ValueMapping


class QualifierMapping(PropertyValueMapping):
    pass


class ReferenceSnak(PropertyValueMapping):
    pass


class ReferenceMapping(MappingModel):
    id: str = Field(default_factory=new_id)
    snaks: list[ReferenceSnak] = Field(default_factory=list)


class StatementMapping(MappingModel):
    id: str
    property: PropertyReference
    value: ValueMapping
    rank: StatementRank = StatementRank.NORMAL
    qualifiers: list[QualifierMapping] = Field(default_factory=list)
    references: list[ReferenceMapping] = Field(default_factory=list)


class TermsMapping(MappingModel):
    """Column mappings for labels, descriptions and aliases keyed by language code."""
    labels: dict[str, ColumnMapping] = Field(default_factory=dict)
    descriptions: dict[str, ColumnMapping] = Field(default_factory=dict)
    aliases: dict[str, list[ColumnMapping]] = Field(default_factory=dict)


class ItemSchemaMapping(MappingModel):
    """Mapping of one item: its terms and its ordered statements."""
    id: str | None = Field(None, pattern=ITEM_ID_PATTERN, description="Item ID (Q123)")
    terms: TermsMapping = Field(default_factory=TermsMapping)
    statements: list[StatementMapping] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_statement_ids(self) -> ItemSchemaMapping:
        seen: set[str] = set()
        for statement in self.statements:
            if statement.id in seen:
                raise ValueError(f"Duplicate statement id: {statement.id}")
            seen.add(statement.id)
        return self
