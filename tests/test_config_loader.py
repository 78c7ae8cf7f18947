"""
Tests for configuration loading from dashboard_config.json
"""
import json

import pytest

from transmitter_dashboard.core.config_loader import CONFIG_ENV_VAR, ConfigLoader, config_loader
from transmitter_dashboard.core.models.config_data import configData


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Point the loader at a temporary file; restore the project config afterwards."""
    path = tmp_path / "dashboard_config.json"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    yield path
    monkeypatch.delenv(CONFIG_ENV_VAR)
    config_loader.reload_config()


class TestConfigLoader:
    """Test ConfigLoader"""

    def test_singleton(self) -> None:
        assert ConfigLoader() is config_loader

    def test_project_config_loads(self) -> None:
        """The shipped config file matches the documented defaults"""
        config_loader.reload_config()
        feed = config_loader.get_feed_config()
        viewport = config_loader.get_viewport_config()
        assert feed.interval_seconds == 100.0
        assert feed.history_window == 20
        assert (viewport.width, viewport.height) == (800, 600)
        assert (viewport.zoom_min, viewport.zoom_max, viewport.zoom_factor) == (0.5, 5.0, 1.2)
        assert config_loader.get_emulation_mode() is True

    def test_load_from_env_path(self, config_file) -> None:
        config_file.write_text(json.dumps({
            "feed": {"interval_seconds": 2, "history_window": 10},
            "viewport": {"zoom_max": 3.0},
            "emulation": {"enabled": False, "transmitter_count": 12, "seed": 9},
            "remote": {"url": "http://gateway:8080/transmitters", "timeout_seconds": 1.5},
        }))
        config_loader.reload_config()

        assert config_loader.get_feed_config().interval_seconds == 2.0
        assert config_loader.get_feed_config().history_window == 10
        assert config_loader.get_viewport_config().zoom_max == 3.0
        # Missing keys keep their defaults
        assert config_loader.get_viewport_config().zoom_min == 0.5
        assert config_loader.get_emulation_mode() is False
        assert config_loader.get_emulation_config().seed == 9
        assert config_loader.get_remote_config().url == "http://gateway:8080/transmitters"
        assert config_loader.get_remote_config().timeout_seconds == 1.5

    def test_missing_file_uses_defaults(self, config_file) -> None:
        config_loader.reload_config()
        assert config_loader.get_config() == configData()

    def test_invalid_json_uses_defaults(self, config_file) -> None:
        config_file.write_text("{ not json")
        config_loader.reload_config()
        assert config_loader.get_config() == configData()

    @pytest.mark.parametrize("section", [
        {"feed": {"interval_seconds": 0}},
        {"feed": {"history_window": -1}},
        {"feed": {"history_window": "many"}},
        {"viewport": {"zoom_min": 2.0}},
        {"viewport": {"zoom_max": 0.8}},
        {"viewport": {"zoom_factor": 1.0}},
    ])
    def test_invalid_values_use_defaults(self, config_file, section) -> None:
        config_file.write_text(json.dumps(section))
        config_loader.reload_config()
        assert config_loader.get_config() == configData()

    @pytest.mark.parametrize("content", [
        {"feed": None},
        {"viewport": [800, 600]},
        {"emulation": "yes"},
        {"remote": 5},
        [{"feed": {}}],
        None,
    ])
    def test_non_object_sections_use_defaults(self, config_file, content) -> None:
        """A section (or the whole file) that is not a JSON object falls back to defaults"""
        config_file.write_text(json.dumps(content))
        config_loader.reload_config()
        assert config_loader.get_config() == configData()
