"""Validation of property values against the constraints declared on the property."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from wbschema.backend.interface import EntityClient
from wbschema.config.settings import Settings, get_settings
from wbschema.exceptions import ConstraintFetchError
from wbschema.mapping.models import PropertyReference

from .cache import ConstraintCache, cache_key
from .evaluators import VALUE_EVALUATORS, validate_single_value
from .models import (
    ConstraintKind,
    ConstraintViolation,
    ConstraintWarning,
    PropertyConstraint,
    ValidationResult,
)
from .parser import parse_constraints

logger = logging.getLogger(__name__)

PROPERTY_SUGGESTION = "Review property values to ensure they meet all constraint requirements"
SCHEMA_VIOLATION_SUGGESTION = "Consider reviewing the entire schema for consistency"
SCHEMA_WARNING_SUGGESTION = "Some constraint types are not yet supported - manual review recommended"
SYSTEM_ERROR = "system_error"


class ConstraintValidationService:
    """Fetches, caches and evaluates property constraints.

    Constraint lists are cached per ``instance:property`` for
    ``settings.constraint_cache_ttl`` seconds. Validation never raises: any
    failure is reported as a ``system_error`` violation in the result.
    """

    def __init__(
        self,
        client: EntityClient,
        settings: Optional[Settings] = None,
        cache: Optional[ConstraintCache] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.client = client
        self.settings = settings or get_settings()
        if cache is None:
            cache_args: Dict[str, Any] = {"ttl": self.settings.constraint_cache_ttl}
            if clock is not None:
                cache_args["clock"] = clock
            cache = ConstraintCache(**cache_args)
        self.cache = cache

    async def get_property_constraints(
        self, instance_id: str, property_id: str
    ) -> List[PropertyConstraint]:
        """Constraints of a property, from the cache when still fresh.

        Raises:
            ConstraintFetchError: If the property cannot be fetched or parsed
        """
        key = cache_key(instance_id, property_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            entity = await self.client.get_entity(instance_id, property_id)
            constraints = parse_constraints(entity, self.settings.constraint_property)
        except Exception as e:
            raise ConstraintFetchError(property_id, str(e) or type(e).__name__) from e

        self.cache.set(key, constraints)
        logger.debug("Cached %d constraints for %s", len(constraints), key)
        return constraints

    async def validate_property(
        self, instance_id: str, property_id: str, values: List[Any]
    ) -> ValidationResult:
        try:
            constraints = await self.get_property_constraints(instance_id, property_id)
            violations, warnings = evaluate_constraints(constraints, property_id, values)
        except Exception as e:
            logger.warning("Constraint validation of %s failed: %s", property_id, e)
            return ValidationResult(
                is_valid=False,
                violations=[
                    ConstraintViolation(
                        constraint_type=SYSTEM_ERROR,
                        message=f"Failed to validate property: {e}",
                        severity="error",
                        property_id=property_id,
                    )
                ],
                warnings=[],
                suggestions=["Check network connection and instance configuration"],
            )

        return ValidationResult(
            is_valid=not violations,
            violations=violations,
            warnings=warnings,
            suggestions=[PROPERTY_SUGGESTION] if violations else [],
        )

    async def validate_schema(
        self, instance_id: str, schema: Mapping[str, List[Any]]
    ) -> ValidationResult:
        """Validate every property concurrently and merge the results."""
        try:
            results = await asyncio.gather(
                *(
                    self.validate_property(instance_id, property_id, list(values or []))
                    for property_id, values in schema.items()
                )
            )
            return merge_results(results)
        except Exception as e:
            logger.exception("Schema validation failed")
            return ValidationResult(
                is_valid=False,
                violations=[
                    ConstraintViolation(
                        constraint_type=SYSTEM_ERROR,
                        message=f"Schema validation failed: {e}",
                        severity="error",
                        property_id="schema",
                    )
                ],
                warnings=[],
                suggestions=["Check network connection and try again"],
            )

    def clear_cache(self, instance_id: Optional[str] = None) -> None:
        self.cache.clear(f"{instance_id}:" if instance_id else None)

    async def get_property_reference(
        self, instance_id: str, property_id: str, language: str = "en"
    ) -> PropertyReference:
        """Resolve label and datatype of a property.

        Raises:
            EntityNotFoundError: If the property does not exist
        """
        entity = await self.client.get_entity(instance_id, property_id)
        labels = entity.get("labels") or {}
        label = labels.get(language) or next(iter(labels.values()), None)
        return PropertyReference(
            id=property_id,
            label=label.get("value") if label else None,
            data_type=entity.get("datatype", "string"),
        )


def evaluate_constraints(
    constraints: Iterable[PropertyConstraint], property_id: str, values: List[Any]
) -> tuple[List[ConstraintViolation], List[ConstraintWarning]]:
    violations: List[ConstraintViolation] = []
    warnings: List[ConstraintWarning] = []

    for constraint in constraints:
        match constraint.kind:
            case ConstraintKind.SINGLE_VALUE:
                violation = validate_single_value(values, constraint, property_id)
                if violation is not None:
                    violations.append(violation)
            case (
                ConstraintKind.FORMAT
                | ConstraintKind.ALLOWED_VALUES
                | ConstraintKind.VALUE_TYPE
                | ConstraintKind.RANGE
            ):
                evaluator = VALUE_EVALUATORS[constraint.kind]
                for value in values:
                    violation = evaluator(value, constraint, property_id)
                    if violation is not None:
                        violations.append(violation)
            case _:
                warnings.append(
                    ConstraintWarning(
                        constraint_type=constraint.type,
                        message=f'Constraint type "{constraint.type}" is not yet supported for validation',
                        property_id=property_id,
                    )
                )

    return violations, warnings


def merge_results(results: Iterable[ValidationResult]) -> ValidationResult:
    violations: List[ConstraintViolation] = []
    warnings: List[ConstraintWarning] = []
    suggestions: List[str] = []

    for result in results:
        violations.extend(result.violations)
        warnings.extend(result.warnings)
        suggestions.extend(result.suggestions)

    if violations:
        suggestions.append(SCHEMA_VIOLATION_SUGGESTION)
    if warnings:
        suggestions.append(SCHEMA_WARNING_SUGGESTION)

    return ValidationResult(
        is_valid=not violations,
        violations=violations,
        warnings=warnings,
        suggestions=list(dict.fromkeys(suggestions)),
    )
