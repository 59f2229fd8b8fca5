from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Project-wide settings sourced from .env and environment variables."""

    default_instance: str = "wikidata"
    wikidata_url: str = "https://www.wikidata.org"
    wikidata_api_url: str = "https://www.wikidata.org/w/api.php"
    user_agent: str = "wbschema/0.1.0 (https://github.com/wbschema/wbschema)"

    # Constraint sets are cached per instance/property for this many seconds
    constraint_cache_ttl: float = 300.0
    # "property constraint" property holding the constraint declarations
    constraint_property: str = "P2302"
    api_max_retries: int = 3

    log_level: str = "INFO"
    schema_dir: str = "schemas"

    class Config:
        env_prefix = "WBSCHEMA_"
        env_file = ".env", ".env.local"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
