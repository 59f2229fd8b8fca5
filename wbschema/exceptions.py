"""Exception hierarchy for wbschema.

All custom errors derive from ``WbSchemaError`` so callers can catch every
project error in one place.
"""


class WbSchemaError(Exception):
    """Base class for wbschema errors."""

    pass


class ConfigurationError(WbSchemaError):
    """Raised when configuration is missing or invalid."""

    pass


class InstanceNotFoundError(ConfigurationError):
    """Raised when a Wikibase instance id is not registered."""

    def __init__(self, instance_id: str):
        self.instance_id = instance_id
        super().__init__(f"Instance not found: {instance_id}")


class DuplicateInstanceError(ConfigurationError):
    """Raised when registering an instance id twice."""

    def __init__(self, instance_id: str):
        self.instance_id = instance_id
        super().__init__(f"Instance with ID '{instance_id}' already exists")


class EntityNotFoundError(WbSchemaError):
    """Raised when the Wikibase API reports an entity as missing."""

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"Entity not found: {entity_id}")


class ConstraintFetchError(WbSchemaError):
    """Raised when the constraints of a property cannot be fetched or parsed."""

    def __init__(self, property_id: str, reason: str):
        self.property_id = property_id
        self.reason = reason
        super().__init__(f"Failed to fetch constraints for property {property_id}: {reason}")


class PersistenceError(WbSchemaError):
    """Raised when a persisted schema cannot be read or written."""

    pass
