"""Tests for settings, project configuration and the instance registry."""

from __future__ import annotations

import pytest
import yaml

from wbschema.config.manager import ConfigManager
from wbschema.config.models import WikibaseInstanceConfig
from wbschema.config.registry import InstanceRegistry
from wbschema.config.settings import Settings
from wbschema.exceptions import ConfigurationError, DuplicateInstanceError, InstanceNotFoundError


def test_settings_defaults(settings) -> None:
    assert settings.default_instance == "wikidata"
    assert settings.constraint_cache_ttl == 300.0
    assert settings.constraint_property == "P2302"


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("WBSCHEMA_CONSTRAINT_CACHE_TTL", "60")
    monkeypatch.setenv("WBSCHEMA_DEFAULT_INSTANCE", "local")
    settings = Settings(_env_file=None)
    assert settings.constraint_cache_ttl == 60.0
    assert settings.default_instance == "local"


def test_instance_api_url_default() -> None:
    config = WikibaseInstanceConfig(id="local", name="Local", url="http://localhost:8080/")
    assert config.api_url == "http://localhost:8080/w/api.php"


class TestInstanceRegistry:
    def test_preloaded_with_wikidata(self, settings) -> None:
        registry = InstanceRegistry(settings=settings)
        assert "wikidata" in registry
        assert registry.get("wikidata").api_url == settings.wikidata_api_url

    def test_add_and_remove(self, settings) -> None:
        registry = InstanceRegistry(settings=settings)
        config = WikibaseInstanceConfig(id="local", name="Local", url="http://localhost")
        registry.add(config)
        with pytest.raises(DuplicateInstanceError):
            registry.add(config)
        assert [i.id for i in registry.list()] == ["wikidata", "local"]

        registry.remove("local")
        with pytest.raises(InstanceNotFoundError):
            registry.remove("local")

    def test_update_keeps_id(self, settings) -> None:
        registry = InstanceRegistry(settings=settings)
        registry.add(WikibaseInstanceConfig(id="local", name="Local", url="http://localhost"))

        updated = registry.update("local", id="other", url="http://wikibase.test")
        assert updated.id == "local"
        assert updated.api_url == "http://wikibase.test/w/api.php"
        assert "other" not in registry

    def test_get_unknown(self, settings) -> None:
        with pytest.raises(InstanceNotFoundError) as exc_info:
            InstanceRegistry(settings=settings).get("nowhere")
        assert exc_info.value.instance_id == "nowhere"


class TestConfigManager:
    def _write(self, tmp_path, data) -> str:
        path = tmp_path / "project.yml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return str(path)

    def test_load_project(self, tmp_path, settings) -> None:
        path = self._write(
            tmp_path,
            {
                "name": "schools",
                "language": "es",
                "instances": [{"id": "local", "name": "Local", "url": "http://localhost"}],
                "settings": {"csv": {"delimiter": ";"}},
            },
        )
        manager = ConfigManager(path, settings=settings)
        assert manager.config.name == "schools"
        assert manager.get_language() == "es"
        assert manager.get_setting("csv.delimiter") == ";"
        assert manager.get_setting("csv.encoding", "utf-8") == "utf-8"
        assert "local" in manager.build_registry()

    def test_missing_file(self, tmp_path, settings) -> None:
        with pytest.raises(FileNotFoundError):
            ConfigManager(str(tmp_path / "nope.yml"), settings=settings).load_config()

    def test_not_a_mapping(self, tmp_path, settings) -> None:
        path = self._write(tmp_path, ["a", "b"])
        with pytest.raises(ConfigurationError):
            ConfigManager(path, settings=settings).load_config()
