"""Evaluators for the built-in constraint kinds.

Per-value evaluators return a violation or None. The single value
evaluator looks at the whole list of values of the property.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

from .models import ConstraintKind, ConstraintViolation, PropertyConstraint, to_number, unwrap_value

# Class item -> expected literal type for the coarse value type check
CLASS_VALUE_TYPES = {
    "Q11563": "number",
    "Q12503": "integer",
    "Q184754": "string",
}

ValueEvaluator = Callable[[Any, PropertyConstraint, str], Optional[ConstraintViolation]]


def _violation(kind: ConstraintKind, message: str, property_id: str, value: Any) -> ConstraintViolation:
    return ConstraintViolation(
        constraint_type=kind.violation_type,
        message=message,
        severity="error",
        property_id=property_id,
        value=value,
    )


def validate_format(value: Any, constraint: PropertyConstraint, property_id: str):
    """The whole string form of the value must match ``pattern``."""
    pattern = constraint.parameters.get("pattern")
    scalar = unwrap_value(value)
    if not pattern or scalar is None:
        return None

    try:
        matched = re.fullmatch(pattern, str(scalar))
    except re.error:
        return _violation(
            ConstraintKind.FORMAT,
            f"Invalid regex pattern in format constraint: {pattern}",
            property_id,
            value,
        )

    if matched is None:
        return _violation(
            ConstraintKind.FORMAT,
            f'Value "{scalar}" does not match required format pattern: {pattern}',
            property_id,
            value,
        )
    return None


def validate_allowed_values(value: Any, constraint: PropertyConstraint, property_id: str):
    allowed = constraint.parameters.get("allowedValues")
    if not allowed:
        return None

    scalar = unwrap_value(value)
    if any(unwrap_value(candidate) == scalar for candidate in allowed):
        return None
    return _violation(
        ConstraintKind.ALLOWED_VALUES,
        f'Value "{scalar}" is not in the list of allowed values',
        property_id,
        value,
    )


def _literal_type(scalar: Any) -> str:
    if isinstance(scalar, bool):
        return "boolean"
    if isinstance(scalar, int):
        return "integer"
    if isinstance(scalar, float):
        return "number"
    if isinstance(scalar, str):
        return "string"
    return type(scalar).__name__


def _matches_type(scalar: Any, expected: str) -> bool:
    if expected == "string":
        return isinstance(scalar, str)
    number = to_number(scalar)
    if number is None:
        return False
    return expected == "number" or number.is_integer()


def validate_value_type(value: Any, constraint: PropertyConstraint, property_id: str):
    """Coarse literal type check; item values need instance-of lookups and are skipped."""
    classes = constraint.parameters.get("class")
    if not classes:
        return None
    if isinstance(value, dict) and value.get("id"):
        return None

    expected = next((CLASS_VALUE_TYPES[c] for c in classes if c in CLASS_VALUE_TYPES), None)
    if expected is None:
        return None

    scalar = unwrap_value(value)
    if _matches_type(scalar, expected):
        return None
    return _violation(
        ConstraintKind.VALUE_TYPE,
        f'Value type "{_literal_type(scalar)}" does not match required type "{expected}"',
        property_id,
        value,
    )


def validate_range(value: Any, constraint: PropertyConstraint, property_id: str):
    minimum = constraint.parameters.get("minimum_value")
    maximum = constraint.parameters.get("maximum_value")
    if minimum is None and maximum is None:
        return None

    number = to_number(value)
    if number is None:
        return _violation(
            ConstraintKind.RANGE,
            f'Value "{unwrap_value(value)}" is not a valid number for range constraint',
            property_id,
            value,
        )
    if minimum is not None and number < minimum:
        return _violation(
            ConstraintKind.RANGE,
            f"Value {number:g} is below minimum allowed value {minimum:g}",
            property_id,
            value,
        )
    if maximum is not None and number > maximum:
        return _violation(
            ConstraintKind.RANGE,
            f"Value {number:g} is above maximum allowed value {maximum:g}",
            property_id,
            value,
        )
    return None


def validate_single_value(values: list, constraint: PropertyConstraint, property_id: str):
    if len(values) > 1:
        return _violation(
            ConstraintKind.SINGLE_VALUE,
            f"Property has {len(values)} values but should have only one",
            property_id,
            list(values),
        )
    return None


VALUE_EVALUATORS: dict[ConstraintKind, ValueEvaluator] = {
    ConstraintKind.FORMAT: validate_format,
    ConstraintKind.ALLOWED_VALUES: validate_allowed_values,
    ConstraintKind.VALUE_TYPE: validate_value_type,
    ConstraintKind.RANGE: validate_range,
}
