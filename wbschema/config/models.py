"""Pydantic models for configuration validation."""

from typing import Any
from pydantic import BaseModel, Field, model_validator


class WikibaseInstanceConfig(BaseModel):
    """Wikibase instance configuration."""

    id: str = Field(..., description="Instance identifier used in cache keys and CLI options")
    name: str = Field(..., description="Human readable instance name")
    url: str = Field(..., description="Wikibase instance URL")
    api_url: str | None = Field(None, description="MediaWiki action API URL")
    user_agent: str | None = Field(None, description="User agent sent to the API")
    sparql_endpoint: str | None = Field(None, description="SPARQL endpoint URL")

    @model_validator(mode="after")
    def _default_api_url(self) -> "WikibaseInstanceConfig":
        if not self.api_url:
            self.api_url = f"{self.url.rstrip('/')}/w/api.php"
        return self


class ProjectConfig(BaseModel):
    """Main project configuration."""

    name: str = Field(..., description="Project name")
    version: str = Field("1.0.0", description="Project version")
    description: str | None = Field(None, description="Project description")
    language: str = Field("en", description="Default language code for terms")

    instances: list[WikibaseInstanceConfig] = Field(
        default_factory=list, description="Additional Wikibase instances"
    )

    # Additional settings
    settings: dict[str, Any] = Field(default_factory=dict, description="Additional settings")
