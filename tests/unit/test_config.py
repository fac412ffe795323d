"""Configuration tests."""

import pytest
from a2ui_bridge.core import get_settings
from a2ui_bridge.core.config import Settings


@pytest.mark.unit
def test_settings_defaults():
    """Test default settings load correctly."""
    settings = Settings()

    assert settings.default_surface_id == "@default"
    assert settings.max_message_bytes == 512 * 1024
    assert settings.max_json_depth == 32
    assert settings.repair_json is False
    assert settings.warn_unknown_components is True


@pytest.mark.unit
def test_settings_from_environment(monkeypatch):
    """Test A2UI_ prefixed variables are picked up."""
    monkeypatch.setenv("A2UI_DEFAULT_SURFACE_ID", "main")
    monkeypatch.setenv("A2UI_REPAIR_JSON", "true")
    monkeypatch.setenv("A2UI_MAX_JSON_DEPTH", "8")

    settings = Settings()
    assert settings.default_surface_id == "main"
    assert settings.repair_json is True
    assert settings.max_json_depth == 8


@pytest.mark.unit
def test_settings_validation():
    """Test settings validation."""
    with pytest.raises(Exception):
        Settings(max_message_bytes=0)

    with pytest.raises(Exception):
        Settings(max_json_depth=-1)

    with pytest.raises(Exception):
        Settings(default_surface_id="")


@pytest.mark.unit
def test_get_settings_cached():
    """Test settings instance is cached."""
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    # Test environment disables metrics
    assert get_settings().enable_metrics is False
