"""Property constraint fetching, caching and evaluation."""

from .cache import ConstraintCache, cache_key
from .evaluators import (
    validate_allowed_values,
    validate_format,
    validate_range,
    validate_single_value,
    validate_value_type,
)
from .models import (
    ConstraintKind,
    ConstraintViolation,
    ConstraintWarning,
    PropertyConstraint,
    ValidationResult,
    normalize_parameters,
    unwrap_value,
)
from .parser import parse_constraint_claim, parse_constraints
from .service import ConstraintValidationService, evaluate_constraints, merge_results

__all__ = [
    "ConstraintCache",
    "ConstraintKind",
    "ConstraintValidationService",
    "ConstraintViolation",
    "ConstraintWarning",
    "PropertyConstraint",
    "ValidationResult",
    "cache_key",
    "evaluate_constraints",
    "merge_results",
    "normalize_parameters",
    "parse_constraint_claim",
    "parse_constraints",
    "unwrap_value",
    "validate_allowed_values",
    "validate_format",
    "validate_range",
    "validate_single_value",
    "validate_value_type",
]
