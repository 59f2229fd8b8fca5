"""Turn a property's constraint claims into ``PropertyConstraint`` records."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .models import PropertyConstraint

logger = logging.getLogger(__name__)

DEFAULT_CONSTRAINT_PROPERTY = "P2302"

CONSTRAINT_TYPE_NAMES: Dict[str, str] = {
    "Q21502404": "format constraint",
    "Q21510859": "allowed values constraint",
    "Q21510865": "value type constraint",
    "Q21510860": "range constraint",
    "Q19474404": "single value constraint",
    "Q52060874": "single best value constraint",
    "Q21510856": "required qualifier constraint",
    "Q21510851": "allowed qualifiers constraint",
    "Q21502838": "conflicts with constraint",
    "Q21503247": "item requires statement constraint",
    "Q21510864": "value requires statement constraint",
    "Q21503250": "subject type constraint",
    "Q21510855": "inverse constraint",
    "Q21510862": "symmetric constraint",
    "Q53869507": "property scope constraint",
}

CONSTRAINT_DESCRIPTIONS: Dict[str, str] = {
    "format constraint": "Values must match a specific format pattern",
    "allowed values constraint": "Only specific values are allowed",
    "value type constraint": "Values must be of a specific type",
    "range constraint": "Numeric values must be within a specific range",
    "single value constraint": "Property should have only one value",
    "required qualifier constraint": "Statements must have specific qualifiers",
    "allowed qualifiers constraint": "Only specific qualifiers are allowed",
    "value requires statement constraint": "Values must have additional statements",
    "conflicts with constraint": "Property conflicts with other properties",
    "item requires statement constraint": "Items must have specific statements",
    "subject type constraint": "Subject must be of specific type",
    "single best value constraint": "Property should have only one preferred value",
    "inverse constraint": "Property has an inverse relationship",
    "symmetric constraint": "Property is symmetric",
    "property scope constraint": "Property has specific scope limitations",
}

VIOLATION_MESSAGES: Dict[str, str] = {
    "format constraint": "Value does not match the required format",
    "allowed values constraint": "Value is not in the list of allowed values",
    "value type constraint": "Value is not of the required type",
    "range constraint": "Value is outside the allowed range",
    "single value constraint": "Property has multiple values but should have only one",
    "required qualifier constraint": "Statement is missing required qualifiers",
    "allowed qualifiers constraint": "Statement has disallowed qualifiers",
    "value requires statement constraint": "Value is missing required additional statements",
    "conflicts with constraint": "Property conflicts with other property values",
    "item requires statement constraint": "Item is missing required statements",
    "subject type constraint": "Subject is not of the required type",
    "single best value constraint": "Property has multiple preferred values but should have only one",
    "inverse constraint": "Inverse relationship is not properly maintained",
    "symmetric constraint": "Symmetric relationship is not properly maintained",
    "property scope constraint": "Property is used outside its allowed scope",
}

# Qualifier property -> (parameter name, collects every qualifier value)
PARAMETER_QUALIFIERS: Dict[str, tuple] = {
    "P1793": ("pattern", False),
    "P2305": ("allowedValues", True),
    "P2308": ("class", True),
    "P2309": ("relation", False),
    "P2313": ("minimum_value", False),
    "P2312": ("maximum_value", False),
    "P2310": ("minimum_date", False),
    "P2311": ("maximum_date", False),
    "P2306": ("property", False),
    "P2303": ("exceptions", True),
    "P2316": ("status", False),
}


def constraint_type_name(constraint_id: str) -> str:
    return CONSTRAINT_TYPE_NAMES.get(constraint_id) or constraint_id or "unknown constraint"


def constraint_description(type_name: str) -> str:
    return CONSTRAINT_DESCRIPTIONS.get(type_name, f"Constraint of type: {type_name}")


def constraint_violation_message(type_name: str) -> str:
    return VIOLATION_MESSAGES.get(type_name, f"Violation of {type_name} constraint")


def snak_value(snak: Dict[str, Any]) -> Any:
    """Scalar value of a snak as returned by ``wbgetentities``.

    Returns None for ``somevalue``/``novalue`` snaks.
    """
    datavalue = snak.get("datavalue")
    if not datavalue:
        return None

    value = datavalue.get("value")
    match datavalue.get("type"):
        case "wikibase-entityid":
            return value.get("id")
        case "quantity":
            return value.get("amount")
        case "time":
            return value.get("time")
        case "monolingualtext":
            return value.get("text")
        case _:
            return value


def extract_parameters(claim: Dict[str, Any]) -> Dict[str, Any]:
    parameters: Dict[str, Any] = {}
    qualifiers = claim.get("qualifiers") or {}

    for property_id, (name, many) in PARAMETER_QUALIFIERS.items():
        values = [snak_value(snak) for snak in qualifiers.get(property_id, [])]
        values = [value for value in values if value is not None]
        if not values:
            continue
        parameters[name] = values if many else values[0]

    return parameters


def parse_constraint_claim(claim: Dict[str, Any]) -> Optional[PropertyConstraint]:
    """Parse one constraint claim; returns None when it names no constraint item."""
    try:
        constraint_id = claim["mainsnak"]["datavalue"]["value"]["id"]
    except (KeyError, TypeError):
        return None

    type_name = constraint_type_name(constraint_id)
    try:
        return PropertyConstraint(
            type=type_name,
            parameters=extract_parameters(claim),
            description=constraint_description(type_name),
            violation_message=constraint_violation_message(type_name),
        )
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning("Failed to parse constraint claim %s: %s", claim.get("id", constraint_id), e)
        return None


def parse_constraints(
    entity: Dict[str, Any],
    constraint_property: str = DEFAULT_CONSTRAINT_PROPERTY,
) -> List[PropertyConstraint]:
    """Constraints declared on a property entity record."""
    claims = (entity or {}).get("claims") or {}
    constraints: List[PropertyConstraint] = []
    for claim in claims.get(constraint_property, []):
        constraint = parse_constraint_claim(claim)
        if constraint is not None:
            constraints.append(constraint)
    return constraints
