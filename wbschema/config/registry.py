"""Registry of the Wikibase instances the service can talk to."""

from __future__ import annotations

from typing import Iterable

from wbschema.exceptions import DuplicateInstanceError, InstanceNotFoundError

from .models import WikibaseInstanceConfig
from .settings import Settings, get_settings


class InstanceRegistry:
    """Keeps instance configurations by id, preloaded with Wikidata."""

    def __init__(
        self,
        instances: Iterable[WikibaseInstanceConfig] | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._instances: dict[str, WikibaseInstanceConfig] = {
            "wikidata": WikibaseInstanceConfig(
                id="wikidata",
                name="Wikidata",
                url=settings.wikidata_url,
                api_url=settings.wikidata_api_url,
                user_agent=settings.user_agent,
            )
        }
        for instance in instances or []:
            # Project files may override the built-in Wikidata entry
            self._instances[instance.id] = instance

    def get(self, instance_id: str) -> WikibaseInstanceConfig:
        if instance_id not in self._instances:
            raise InstanceNotFoundError(instance_id)
        return self._instances[instance_id]

    def list(self) -> list[WikibaseInstanceConfig]:
        return list(self._instances.values())

    def add(self, config: WikibaseInstanceConfig) -> None:
        if config.id in self._instances:
            raise DuplicateInstanceError(config.id)
        self._instances[config.id] = config

    def update(self, instance_id: str, **changes) -> WikibaseInstanceConfig:
        """Update fields of an instance. The id itself cannot change."""
        existing = self.get(instance_id)
        changes.pop("id", None)
        data = existing.model_dump()
        data.update(changes)
        if "url" in changes and "api_url" not in changes:
            data["api_url"] = None
        updated = WikibaseInstanceConfig(**data)
        self._instances[instance_id] = updated
        return updated

    def remove(self, instance_id: str) -> None:
        if instance_id not in self._instances:
            raise InstanceNotFoundError(instance_id)
        del self._instances[instance_id]

    def __contains__(self, instance_id: object) -> bool:
        return instance_id in self._instances
