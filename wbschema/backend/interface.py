from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class EntityClient(ABC):
    """Abstract read access to the entities of a Wikibase instance."""

    @abstractmethod
    async def get_entity(self, instance_id: str, entity_id: str) -> Dict[str, Any]:
        """Fetch one entity record (labels, descriptions, aliases, claims).

        Raises:
            InstanceNotFoundError: If the instance id is not registered
            EntityNotFoundError: If the instance reports the entity as missing
        """
        pass
