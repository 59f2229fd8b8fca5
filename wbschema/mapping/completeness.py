"""Completeness checks for a schema being edited."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from .models import ColumnValueMapping, ConstantValueMapping
from .store import SchemaStore

Severity = Literal["error", "warning"]


@dataclass
class CompletenessRule:
    """A configurable required-field rule evaluated against one field path."""

    id: str
    name: str
    field_path: str
    message: str
    check: Callable[[Any, SchemaStore], bool]
    severity: Severity = "error"
    enabled: bool = True


@dataclass
class FieldHighlight:
    path: str
    message: str
    severity: Severity
    component: str


@dataclass
class CompletenessResult:
    is_complete: bool
    missing_required_fields: list[str] = field(default_factory=list)
    required_field_highlights: list[FieldHighlight] = field(default_factory=list)


DEFAULT_RULES: tuple[CompletenessRule, ...] = (
    CompletenessRule(
        id="labels-required",
        name="At least one label",
        field_path="item.terms.labels",
        message="At least one label mapping is required",
        check=lambda value, store: bool(value),
    ),
)


def get_field_value(store: SchemaStore, field_path: str) -> Any:
    values = {
        "schema.name": store.name,
        "schema.wikibase": store.wikibase,
        "item.terms.labels": store.labels,
        "item.terms.descriptions": store.descriptions,
        "item.terms.aliases": store.aliases,
        "item.statements": store.statements,
    }
    return values.get(field_path)


def missing_required_fields(
    store: SchemaStore,
    rules: tuple[CompletenessRule, ...] | list[CompletenessRule] = DEFAULT_RULES,
) -> list[str]:
    missing: list[str] = []

    for rule in rules:
        if rule.enabled and rule.field_path not in missing:
            if not rule.check(get_field_value(store, rule.field_path), store):
                missing.append(rule.field_path)

    for index, statement in enumerate(store.statements):
        value = statement.value
        if isinstance(value, ColumnValueMapping) and not value.source.column_name.strip():
            missing.append(f"item.statements[{index}].value.source.columnName")
        if isinstance(value, ConstantValueMapping) and not value.source.strip():
            missing.append(f"item.statements[{index}].value.source")

    return missing


def _component_for(field_path: str) -> str:
    if field_path.startswith("schema."):
        return "SchemaEditor"
    if "terms." in field_path:
        return "TermsEditor"
    if "statements" in field_path:
        return "StatementEditor"
    return "SchemaEditor"


def _statement_field_message(field_path: str) -> str:
    if "value.source.columnName" in field_path:
        return "Statement value column mapping is required"
    if "value.source" in field_path:
        return "Statement value is required"
    return "Statement configuration is incomplete"


def check_completeness(
    store: SchemaStore,
    rules: tuple[CompletenessRule, ...] | list[CompletenessRule] = DEFAULT_RULES,
) -> CompletenessResult:
    """Report missing required fields.

    Highlights are only produced once the schema has some content so that a
    brand new schema is not covered in errors.
    """
    missing = missing_required_fields(store, rules)
    highlights: list[FieldHighlight] = []

    if store.has_content or store.name.strip():
        rules_by_path = {rule.field_path: rule for rule in rules if rule.enabled}
        for path in missing:
            rule = rules_by_path.get(path)
            if rule is not None:
                highlights.append(
                    FieldHighlight(path, rule.message, rule.severity, _component_for(path))
                )
            elif "statements[" in path:
                highlights.append(
                    FieldHighlight(path, _statement_field_message(path), "error", "StatementEditor")
                )

    return CompletenessResult(
        is_complete=not missing,
        missing_required_fields=missing,
        required_field_highlights=highlights,
    )
