import asyncio
import logging
from typing import Any, Dict, Optional

from wikibaseintegrator import wbi_helpers

from wbschema.config.registry import InstanceRegistry
from wbschema.config.settings import Settings, get_settings
from wbschema.exceptions import EntityNotFoundError

from .interface import EntityClient

logger = logging.getLogger(__name__)


class ApiEntityClient(EntityClient):
    """Entity client using the MediaWiki action API through WikibaseIntegrator.

    Requests are anonymous ``wbgetentities`` calls, run in a worker thread so
    several properties can be fetched concurrently.
    """

    def __init__(
        self,
        registry: Optional[InstanceRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.registry = registry or InstanceRegistry(settings=self.settings)

    async def get_entity(self, instance_id: str, entity_id: str) -> Dict[str, Any]:
        instance = self.registry.get(instance_id)
        data = {
            "action": "wbgetentities",
            "ids": entity_id,
            "format": "json",
        }
        logger.debug("Fetching %s from %s", entity_id, instance.api_url)
        response = await asyncio.to_thread(
            wbi_helpers.mediawiki_api_call_helper,
            data=data,
            mediawiki_api_url=instance.api_url,
            user_agent=instance.user_agent or self.settings.user_agent,
            allow_anonymous=True,
            max_retries=self.settings.api_max_retries,
        )
        return self._extract_entity(response, entity_id)

    def _extract_entity(self, response: Dict[str, Any], entity_id: str) -> Dict[str, Any]:
        entities = (response or {}).get("entities") or {}
        entity = entities.get(entity_id)
        if entity is None:
            # Redirected ids come back under their target id
            entity = next(iter(entities.values()), None)
        if entity is None or "missing" in entity:
            raise EntityNotFoundError(entity_id)
        return entity
