"""Property constraint records and validation results."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

LIST_PARAMETERS = ("allowedValues", "class", "exceptions")
NUMERIC_PARAMETERS = ("minimum_value", "maximum_value")
PARAMETER_ALIASES = {
    "regex": "pattern",
    "item": "allowedValues",
    "constraint_status": "status",
}


class ConstraintModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConstraintKind(str, Enum):
    """Constraint kinds with a built-in evaluator, plus the fallback."""

    FORMAT = "format constraint"
    ALLOWED_VALUES = "allowed values constraint"
    VALUE_TYPE = "value type constraint"
    RANGE = "range constraint"
    SINGLE_VALUE = "single value constraint"
    UNSUPPORTED = "unsupported"

    @classmethod
    def of(cls, type_name: str) -> ConstraintKind:
        try:
            kind = cls(type_name)
        except ValueError:
            return cls.UNSUPPORTED
        return kind

    @property
    def violation_type(self) -> str:
        """Value used as ``constraintType`` on violations, e.g. ``format_constraint``."""
        return self.value.replace(" ", "_")


class PropertyConstraint(ConstraintModel):
    """One constraint declared on a property.

    ``parameters`` is normalized on construction: ``pattern`` is a string,
    ``allowedValues``, ``class`` and ``exceptions`` are lists, and the
    numeric bounds are floats.
    """

    type: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    description: str | None = None
    violation_message: str | None = None

    @field_validator("parameters", mode="before")
    @classmethod
    def _normalize_parameters(cls, value: Any) -> dict[str, Any]:
        return normalize_parameters(value or {})

    @property
    def kind(self) -> ConstraintKind:
        return ConstraintKind.of(self.type)


class ConstraintViolation(ConstraintModel):
    constraint_type: str
    message: str
    severity: Literal["error", "warning"] = "error"
    property_id: str
    value: Any = None


class ConstraintWarning(ConstraintModel):
    constraint_type: str
    message: str
    property_id: str
    value: Any = None


class ValidationResult(ConstraintModel):
    is_valid: bool
    violations: list[ConstraintViolation] = Field(default_factory=list)
    warnings: list[ConstraintWarning] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


def unwrap_value(value: Any) -> Any:
    """Return the scalar carried by a snak value.

    Dicts yield their ``id``, ``content``, ``value``, ``text`` or ``amount``
    (first present); anything else is returned unchanged.
    """
    if isinstance(value, dict):
        for key in ("id", "content", "value", "text", "amount"):
            if value.get(key) is not None:
                return value[key]
    return value


def to_number(value: Any) -> float | None:
    """Parse a finite number; NaN, infinities and booleans are not numbers."""
    value = unwrap_value(value)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.startswith("+"):
            text = text[1:]
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def normalize_parameters(raw: dict[str, Any]) -> dict[str, Any]:
    parameters = {key: value for key, value in raw.items() if key not in PARAMETER_ALIASES}
    # A canonical key wins over its alias
    for alias, canonical in PARAMETER_ALIASES.items():
        if alias in raw and canonical not in parameters:
            parameters[canonical] = raw[alias]

    for key in LIST_PARAMETERS:
        if key not in parameters:
            continue
        value = parameters[key]
        if isinstance(value, dict) and "value" in value:
            value = value["value"]
        if not isinstance(value, (list, tuple)):
            value = [value]
        parameters[key] = list(value)

    if "class" in parameters:
        parameters["class"] = [str(unwrap_value(item)) for item in parameters["class"]]

    if "pattern" in parameters:
        pattern = unwrap_value(parameters["pattern"])
        parameters["pattern"] = str(pattern) if pattern is not None else None

    for key in NUMERIC_PARAMETERS:
        if key in parameters:
            number = to_number(parameters[key])
            if number is None:
                del parameters[key]
            else:
                parameters[key] = number

    return parameters
