import json
import logging
import os
from pathlib import Path

from transmitter_dashboard.core.models.config_data import (
    configData,
    emulationConfigData,
    feedConfigData,
    remoteConfigData,
    viewportConfigData,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DASHBOARD_CONFIG"


class ConfigLoader:
    """Loads and manages dashboard configuration from JSON file."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigLoader, cls).__new__(cls)
            cls._instance._config = configData()
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._config = self._get_default_config()
            self.load_config()
            self._initialized = True

    @staticmethod
    def get_config_path() -> Path:
        """Get the path to dashboard_config.json (overridable with DASHBOARD_CONFIG)."""
        override = os.getenv(CONFIG_ENV_VAR)
        if override:
            return Path(override)
        # Config file lives in the project root/config directory
        return Path(__file__).parent.parent.parent.parent / "config" / "dashboard_config.json"

    def load_config(self):
        """Load configuration from JSON file."""
        config_path = self.get_config_path()

        # Start from defaults so every section is always present
        self._config = self._get_default_config()

        if not config_path.exists():
            logger.error(f"Configuration file not found: {config_path}")
            return

        try:
            with open(config_path, 'r') as f:
                json_data = json.load(f)
            if not isinstance(json_data, dict):
                raise ValueError(f"expected a JSON object at the top level, got {type(json_data).__name__}")

            feed = self._section(json_data, "feed")
            self._config.feed = feedConfigData(
                interval_seconds=float(feed.get("interval_seconds", 100.0)),
                history_window=int(feed.get("history_window", 20)),
            )

            viewport = self._section(json_data, "viewport")
            self._config.viewport = viewportConfigData(
                width=int(viewport.get("width", 800)),
                height=int(viewport.get("height", 600)),
                zoom_min=float(viewport.get("zoom_min", 0.5)),
                zoom_max=float(viewport.get("zoom_max", 5.0)),
                zoom_factor=float(viewport.get("zoom_factor", 1.2)),
                base_scale=float(viewport.get("base_scale", 10000.0)),
                reference_lat=float(viewport.get("reference_lat", 34.0522)),
                reference_lng=float(viewport.get("reference_lng", -118.2437)),
            )

            emulation = self._section(json_data, "emulation")
            self._config.emulation = emulationConfigData(
                enabled=bool(emulation.get("enabled", True)),
                transmitter_count=int(emulation.get("transmitter_count", 5)),
                seed=emulation.get("seed"),
            )

            remote = self._section(json_data, "remote")
            self._config.remote = remoteConfigData(
                url=remote.get("url", ""),
                timeout_seconds=float(remote.get("timeout_seconds", 5.0)),
            )

            self._validate()
            logger.info(f"Configuration loaded from {config_path}")

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse configuration file: {e}")
            self._config = self._get_default_config()

        except (TypeError, ValueError) as e:
            logger.error(f"Invalid value in configuration file: {e}")
            self._config = self._get_default_config()

        except Exception as e:
            logger.error(f"Unexpected error loading configuration: {e}")
            self._config = self._get_default_config()

    @staticmethod
    def _section(json_data: dict, name: str) -> dict:
        section = json_data.get(name, {})
        if not isinstance(section, dict):
            raise ValueError(f"section '{name}' must be an object, got {type(section).__name__}")
        return section

    def _validate(self):
        feed = self._config.feed
        viewport = self._config.viewport
        if feed.interval_seconds <= 0:
            raise ValueError(f"feed.interval_seconds must be positive, got {feed.interval_seconds}")
        if feed.history_window <= 0:
            raise ValueError(f"feed.history_window must be positive, got {feed.history_window}")
        if not 0 < viewport.zoom_min <= 1.0 <= viewport.zoom_max:
            raise ValueError(
                f"zoom bounds must satisfy 0 < zoom_min <= 1 <= zoom_max, got [{viewport.zoom_min}, {viewport.zoom_max}]"
            )
        if viewport.zoom_factor <= 1.0:
            raise ValueError(f"viewport.zoom_factor must be greater than 1, got {viewport.zoom_factor}")

    @staticmethod
    def _get_default_config() -> configData:
        """Return default configuration."""
        return configData()

    def get_config(self) -> configData:
        return self._config

    def get_emulation_mode(self) -> bool:
        """Get the emulation mode setting."""
        return self._config.emulation.enabled

    def get_feed_config(self) -> feedConfigData:
        return self._config.feed

    def get_viewport_config(self) -> viewportConfigData:
        return self._config.viewport

    def get_emulation_config(self) -> emulationConfigData:
        return self._config.emulation

    def get_remote_config(self) -> remoteConfigData:
        return self._config.remote

    def reload_config(self):
        """Reload configuration from file."""
        self.load_config()
        logger.info("Configuration reloaded")


# Global singleton instance
config_loader = ConfigLoader()
