"""Records exchanged between the drag-and-drop layer and the validator."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from wbschema.mapping.models import ColumnInfo, WikibaseDataType

_STATEMENT_ID_IN_PATH = re.compile(r"statements\[([^\]]+)\]")
_LANGUAGE_IN_PATH = re.compile(r"\.(labels|descriptions|aliases)\.([a-z]{2,3}(?:-[a-z0-9]+)*)")


class ValidationModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DropTargetType(str, Enum):
    LABEL = "label"
    DESCRIPTION = "description"
    ALIAS = "alias"
    STATEMENT = "statement"
    QUALIFIER = "qualifier"
    REFERENCE = "reference"

    @property
    def is_term(self) -> bool:
        return self in (DropTargetType.LABEL, DropTargetType.DESCRIPTION, DropTargetType.ALIAS)


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPING = "dropping"
    INVALID = "invalid"


class ValidationErrorCode(str, Enum):
    MISSING_REQUIRED_MAPPING = "MISSING_REQUIRED_MAPPING"
    INCOMPATIBLE_DATA_TYPE = "INCOMPATIBLE_DATA_TYPE"
    DUPLICATE_LANGUAGE_MAPPING = "DUPLICATE_LANGUAGE_MAPPING"
    INVALID_PROPERTY_ID = "INVALID_PROPERTY_ID"
    MISSING_STATEMENT_VALUE = "MISSING_STATEMENT_VALUE"
    INVALID_LANGUAGE_CODE = "INVALID_LANGUAGE_CODE"
    MISSING_ITEM_CONFIGURATION = "MISSING_ITEM_CONFIGURATION"
    DUPLICATE_PROPERTY_MAPPING = "DUPLICATE_PROPERTY_MAPPING"
    DUPLICATE_ALIAS = "DUPLICATE_ALIAS"


VALIDATION_MESSAGES: dict[ValidationErrorCode, str] = {
    ValidationErrorCode.MISSING_REQUIRED_MAPPING: "Required mapping is missing",
    ValidationErrorCode.INCOMPATIBLE_DATA_TYPE: "Column data type is incompatible with target",
    ValidationErrorCode.DUPLICATE_LANGUAGE_MAPPING: "Multiple mappings exist for the same language",
    ValidationErrorCode.INVALID_PROPERTY_ID: "Invalid or non-existent property ID",
    ValidationErrorCode.MISSING_STATEMENT_VALUE: "Statement is missing a required value mapping",
    ValidationErrorCode.INVALID_LANGUAGE_CODE: "Invalid language code format",
    ValidationErrorCode.MISSING_ITEM_CONFIGURATION: "Item configuration is required",
    ValidationErrorCode.DUPLICATE_PROPERTY_MAPPING: "Property is already mapped in this context",
    ValidationErrorCode.DUPLICATE_ALIAS: "This alias already exists",
}


class DropTarget(ValidationModel):
    """A place in the schema a column can be dropped on."""
    type: DropTargetType
    path: str = Field(..., description="Path of the target, e.g. item.terms.labels.en")
    accepted_types: list[WikibaseDataType] = Field(default_factory=list)
    language: str | None = None
    property_id: str | None = None
    is_required: bool = False

    @property
    def effective_language(self) -> str | None:
        return self.language or language_from_path(self.path)

    @property
    def statement_id(self) -> str | None:
        return statement_id_from_path(self.path)

    @classmethod
    def for_term(
        cls, target_type: DropTargetType | str, language: str, is_required: bool = False
    ) -> DropTarget:
        target_type = DropTargetType(target_type)
        section = {
            DropTargetType.LABEL: "labels",
            DropTargetType.DESCRIPTION: "descriptions",
            DropTargetType.ALIAS: "aliases",
        }[target_type]
        return cls(
            type=target_type,
            path=f"item.terms.{section}.{language}",
            accepted_types=[WikibaseDataType.STRING],
            language=language,
            is_required=is_required,
        )

    @classmethod
    def for_statement(
        cls,
        property_id: str | None,
        accepted_types: list[WikibaseDataType | str],
        statement_id: str | None = None,
        is_required: bool = False,
    ) -> DropTarget:
        path = f"item.statements[{statement_id}].value" if statement_id else "item.statements"
        return cls(
            type=DropTargetType.STATEMENT,
            path=path,
            accepted_types=accepted_types,
            property_id=property_id,
            is_required=is_required,
        )

    @classmethod
    def for_snak(
        cls,
        target_type: DropTargetType | str,
        statement_id: str,
        property_id: str | None,
        accepted_types: list[WikibaseDataType | str],
    ) -> DropTarget:
        """Qualifier or reference target of an existing statement."""
        target_type = DropTargetType(target_type)
        section = "qualifiers" if target_type is DropTargetType.QUALIFIER else "references"
        return cls(
            type=target_type,
            path=f"item.statements[{statement_id}].{section}",
            accepted_types=accepted_types,
            property_id=property_id,
        )


class ValidationError(ValidationModel):
    """A path-scoped error or warning shown next to a drop target."""
    type: Literal["error", "warning"] = "error"
    code: ValidationErrorCode
    message: str
    path: str | None = None
    property_id: str | None = None
    value: Any = None
    suggestions: list[str] = Field(default_factory=list)
    context: dict[str, Any] | None = None


class DropValidation(ValidationModel):
    is_valid: bool
    error: ValidationError | None = None

    @property
    def reason(self) -> str:
        if self.error is None:
            return "Compatible mapping"
        return self.error.message


class ValidationReport(ValidationModel):
    is_valid: bool
    errors: list[ValidationError] = Field(default_factory=list)
    warnings: list[ValidationError] = Field(default_factory=list)


class DropFeedback(ValidationModel):
    type: Literal["success", "error", "warning"]
    message: str


class MappingInfo(ValidationModel):
    """An existing mapping as seen by the cross-mapping checks."""
    path: str
    column_name: str
    column_data_type: str | None = None
    target_types: list[WikibaseDataType] | None = None
    language: str | None = None
    property_id: str | None = None


class ColumnDroppedEvent(ValidationModel):
    """Emitted after a valid drop (``column-dropped``)."""
    target: DropTarget
    column: ColumnInfo


def target_type_from_path(path: str) -> DropTargetType:
    if ".labels." in path:
        return DropTargetType.LABEL
    if ".descriptions." in path:
        return DropTargetType.DESCRIPTION
    if ".aliases." in path:
        return DropTargetType.ALIAS
    if ".qualifiers" in path:
        return DropTargetType.QUALIFIER
    if ".references" in path:
        return DropTargetType.REFERENCE
    return DropTargetType.STATEMENT


def language_from_path(path: str) -> str | None:
    match = _LANGUAGE_IN_PATH.search(path)
    return match.group(2) if match else None


def statement_id_from_path(path: str) -> str | None:
    match = _STATEMENT_ID_IN_PATH.search(path)
    return match.group(1) if match else None
