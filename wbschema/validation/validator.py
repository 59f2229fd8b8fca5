"""Column / drop target compatibility checks."""

from __future__ import annotations

from typing import Iterable, Sequence

from wbschema.mapping.models import ColumnInfo, ColumnMapping

from .compatibility import (
    DATA_TYPE_COMPATIBILITY,
    CompatibilityTable,
    is_data_type_compatible,
)
from .models import (
    VALIDATION_MESSAGES,
    DropFeedback,
    DropTarget,
    DropTargetType,
    DropValidation,
    MappingInfo,
    ValidationError,
    ValidationErrorCode,
    ValidationReport,
)

MAX_LENGTHS = {DropTargetType.LABEL: 250, DropTargetType.ALIAS: 100}
PROPERTY_TARGETS = (DropTargetType.STATEMENT, DropTargetType.QUALIFIER, DropTargetType.REFERENCE)
TERM_PLURALS = {
    DropTargetType.LABEL: "labels",
    DropTargetType.DESCRIPTION: "descriptions",
    DropTargetType.ALIAS: "aliases",
}


class CompatibilityValidator:
    """Decides whether a column may be dropped on a target.

    The validator holds nothing but its compatibility table: the same
    ``(column, target)`` pair always yields the same result, and the schema
    is never touched.
    """

    def __init__(self, table: CompatibilityTable = DATA_TYPE_COMPATIBILITY):
        self.table = table

    def is_data_type_compatible(self, column_type: str, accepted_types) -> bool:
        return is_data_type_compatible(column_type, accepted_types, self.table)

    def validate_column_for_target(self, column: ColumnInfo, target: DropTarget) -> DropValidation:
        """Run the checks in order and report the first one that fails."""
        accepted = ", ".join(value.value for value in target.accepted_types)
        context = {"columnName": column.name, "dataType": column.data_type, "targetType": accepted}

        if not self.is_data_type_compatible(column.data_type, target.accepted_types):
            return self._invalid(
                ValidationErrorCode.INCOMPATIBLE_DATA_TYPE,
                target,
                f"Column type '{column.data_type}' is not compatible with target types: {accepted}",
                self._data_type_suggestion(target),
                context,
            )

        if target.is_required and column.nullable:
            return self._invalid(
                ValidationErrorCode.MISSING_REQUIRED_MAPPING,
                target,
                "Required field cannot accept nullable column",
                "Use a non-nullable column for required fields",
                context,
            )

        max_length = MAX_LENGTHS.get(target.type)
        if max_length is not None and _has_long_values(column, max_length):
            return self._invalid(
                ValidationErrorCode.INCOMPATIBLE_DATA_TYPE,
                target,
                f"{target.type.value} values should be shorter than {max_length} characters",
                f"Consider using shorter text values (max {max_length} characters)",
                context,
            )

        if target.type in PROPERTY_TARGETS and not target.property_id:
            return self._invalid(
                ValidationErrorCode.INVALID_PROPERTY_ID,
                target,
                f"{target.type.value} target must have a property ID",
                f"Select a property ID for this {target.type.value}",
                context,
            )

        return DropValidation(is_valid=True)

    def validate_for_styling(self, column: ColumnInfo, target: DropTarget) -> DropValidation:
        """Validation used for highlighting; duplicate aliases still highlight as valid."""
        return self.validate_column_for_target(column, target)

    def validate_for_drop(
        self,
        column: ColumnInfo,
        target: DropTarget,
        existing_aliases: Iterable[ColumnMapping] | None = None,
    ) -> DropValidation:
        result = self.validate_column_for_target(column, target)
        if not result.is_valid:
            return result

        if target.type is DropTargetType.ALIAS and existing_aliases:
            if is_alias_duplicate(column, existing_aliases):
                return self._invalid(
                    ValidationErrorCode.DUPLICATE_ALIAS,
                    target,
                    VALIDATION_MESSAGES[ValidationErrorCode.DUPLICATE_ALIAS],
                    "Choose a different column or remove the existing alias",
                    {"columnName": column.name, "languageCode": target.effective_language},
                )
        return result

    def valid_targets_for_column(
        self, column: ColumnInfo, targets: Iterable[DropTarget]
    ) -> list[DropTarget]:
        return [target for target in targets if self.validate_for_styling(column, target).is_valid]

    def get_validation_feedback(self, column: ColumnInfo, target: DropTarget) -> DropFeedback:
        result = self.validate_column_for_target(column, target)
        if result.is_valid:
            return DropFeedback(type="success", message=f"Compatible mapping for {target.type.value}")
        return DropFeedback(type="error", message=result.error.message if result.error else "Invalid mapping")

    def get_validation_suggestions(self, column: ColumnInfo, target: DropTarget) -> list[str]:
        """Every suggestion that applies, not just the first failing check."""
        suggestions: list[str] = []

        if not self.is_data_type_compatible(column.data_type, target.accepted_types):
            suggestions.append(self._data_type_suggestion(target))

        if target.is_required and column.nullable:
            suggestions.append("Use a non-nullable column for required fields")

        max_length = MAX_LENGTHS.get(target.type)
        if max_length is not None and _has_long_values(column, max_length):
            suggestions.append(f"Consider using shorter text values (max {max_length} characters)")

        if target.type in PROPERTY_TARGETS and not target.property_id:
            suggestions.append(f"Select a property ID for this {target.type.value}")

        return suggestions

    def detect_invalid_mappings(
        self, existing: Sequence[MappingInfo], new: MappingInfo
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []

        if new.language and any(
            mapping.language == new.language
            and mapping.path == new.path
            and mapping.column_name != new.column_name
            for mapping in existing
        ):
            errors.append(
                _error(
                    ValidationErrorCode.DUPLICATE_LANGUAGE_MAPPING,
                    new.path,
                    {"columnName": new.column_name, "languageCode": new.language},
                )
            )

        if new.property_id and any(
            mapping.property_id == new.property_id
            and mapping.path != new.path
            and _is_property_path(mapping.path)
            for mapping in existing
        ):
            errors.append(
                _error(
                    ValidationErrorCode.DUPLICATE_PROPERTY_MAPPING,
                    new.path,
                    {"columnName": new.column_name, "propertyId": new.property_id},
                    property_id=new.property_id,
                )
            )

        return errors

    def detect_missing_required_mappings(
        self, targets: Iterable[DropTarget], existing: Sequence[MappingInfo]
    ) -> list[ValidationError]:
        mapped_paths = {mapping.path for mapping in existing}
        return [
            _error(
                ValidationErrorCode.MISSING_REQUIRED_MAPPING,
                target.path,
                {
                    "targetType": target.type.value,
                    "propertyId": target.property_id,
                    "languageCode": target.effective_language,
                },
                property_id=target.property_id,
            )
            for target in targets
            if target.is_required and target.path not in mapped_paths
        ]

    def validate_all_mappings(self, mappings: Iterable[MappingInfo]) -> ValidationReport:
        errors = [
            _error(
                ValidationErrorCode.INCOMPATIBLE_DATA_TYPE,
                mapping.path,
                {
                    "columnName": mapping.column_name,
                    "dataType": mapping.column_data_type,
                    "targetType": ", ".join(value.value for value in mapping.target_types),
                },
            )
            for mapping in mappings
            if mapping.column_data_type
            and mapping.target_types
            and not self.is_data_type_compatible(mapping.column_data_type, mapping.target_types)
        ]
        return ValidationReport(is_valid=not errors, errors=errors, warnings=[])

    def _data_type_suggestion(self, target: DropTarget) -> str:
        if target.type.is_term:
            return f"Use text-based columns for {TERM_PLURALS[target.type]}"
        if not target.accepted_types:
            return "Configure the data types this target accepts"
        accepted = " or ".join(value.value for value in target.accepted_types)
        return f"Consider using a column with data type: {accepted}"

    @staticmethod
    def _invalid(code, target, message, suggestion, context) -> DropValidation:
        return DropValidation(
            is_valid=False,
            error=ValidationError(
                code=code,
                message=message,
                path=target.path,
                property_id=target.property_id,
                suggestions=[suggestion],
                context=context,
            ),
        )


def is_alias_duplicate(column: ColumnInfo, existing_aliases: Iterable[ColumnMapping]) -> bool:
    return any(
        alias.column_name == column.name and alias.data_type == column.data_type
        for alias in existing_aliases
    )


def _has_long_values(column: ColumnInfo, max_length: int) -> bool:
    return any(len(value) > max_length for value in column.sample_values)


def _is_property_path(path: str) -> bool:
    return ".statements[" in path or ".qualifiers" in path or ".references" in path


def _error(code: ValidationErrorCode, path: str, context: dict, property_id: str | None = None):
    return ValidationError(
        code=code,
        message=VALIDATION_MESSAGES[code],
        path=path,
        property_id=property_id,
        context=context,
    )
