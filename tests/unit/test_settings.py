"""Unit tests for RegistrySettings."""

import pytest
from pydantic import ValidationError

from metaregistry.settings import RegistrySettings, get_settings, reload_settings
from metaregistry.store import MetadataRegistry


@pytest.fixture
def clean_settings(monkeypatch):
    for name in ("WEAK_REFERENCES", "THREAD_SAFE", "INFER_WRAPPED_PARENT", "LOG_LEVEL"):
        monkeypatch.delenv(f"METAREGISTRY_{name}", raising=False)
    reload_settings()
    yield monkeypatch
    monkeypatch.undo()
    reload_settings()


class TestRegistrySettings:
    """Environment driven configuration."""

    def test_defaults(self, clean_settings):
        settings = get_settings()

        assert settings.weak_references is True
        assert settings.thread_safe is True
        assert settings.infer_wrapped_parent is True
        assert settings.log_level == "INFO"

    def test_environment_overrides(self, clean_settings):
        clean_settings.setenv("METAREGISTRY_WEAK_REFERENCES", "false")
        clean_settings.setenv("METAREGISTRY_LOG_LEVEL", "debug")

        settings = reload_settings()

        assert settings.weak_references is False
        assert settings.log_level == "DEBUG"

    def test_registry_reads_settings(self, clean_settings):
        clean_settings.setenv("METAREGISTRY_WEAK_REFERENCES", "false")
        clean_settings.setenv("METAREGISTRY_INFER_WRAPPED_PARENT", "false")
        reload_settings()

        registry = MetadataRegistry()

        assert registry.weak_references is False
        assert registry.resolver.infer_wrapped_parent is False

    def test_explicit_arguments_win(self, clean_settings):
        clean_settings.setenv("METAREGISTRY_WEAK_REFERENCES", "false")
        reload_settings()

        assert MetadataRegistry(weak_references=True).weak_references is True

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            RegistrySettings(log_level="loud")

    def test_settings_are_cached(self, clean_settings):
        assert get_settings() is get_settings()
