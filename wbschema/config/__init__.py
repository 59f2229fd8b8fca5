"""Configuration management for wbschema."""

from .manager import ConfigManager
from .models import ProjectConfig, WikibaseInstanceConfig
from .registry import InstanceRegistry
from .settings import Settings, get_settings

__all__ = [
    "ConfigManager",
    "InstanceRegistry",
    "ProjectConfig",
    "Settings",
    "WikibaseInstanceConfig",
    "get_settings",
]
