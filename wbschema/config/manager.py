"""Configuration manager for loading and validating project settings."""

import yaml
from pathlib import Path
from typing import Any

from wbschema.exceptions import ConfigurationError

from .models import ProjectConfig
from .registry import InstanceRegistry
from .settings import Settings, get_settings


class ConfigManager:
    """Manages project configuration loading and validation."""

    def __init__(self, config_path: str, settings: Settings | None = None) -> None:
        """Initialize configuration manager.

        Args:
            config_path: Path to the project configuration file
            settings: Environment settings (defaults to the cached settings)
        """
        self.config_path = Path(config_path)
        self.settings = settings or get_settings()
        self._config: ProjectConfig | None = None

    def load_config(self) -> ProjectConfig:
        """Load and validate project configuration.

        Returns:
            Validated project configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If the file is not a YAML mapping
            ValidationError: If config doesn't match schema
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {self.config_path}")

        self._config = ProjectConfig(**config_data)
        return self._config

    @property
    def config(self) -> ProjectConfig:
        """Get the loaded configuration (loads if not already loaded)."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting from the configuration.

        Args:
            key: Setting key (supports dot notation)
            default: Default value if key not found

        Returns:
            Setting value or default
        """
        keys = key.split('.')
        value = self.config.settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_language(self) -> str:
        """Get the default term language of the project."""
        return self.config.language

    def build_registry(self) -> InstanceRegistry:
        """Build an instance registry holding the configured instances."""
        return InstanceRegistry(self.config.instances, settings=self.settings)
