"""
Configuration management for timet.

This module handles user configuration, data directories, and settings.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, cast

from platformdirs import user_config_dir, user_data_dir

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages timet configuration and data directories."""

    def __init__(self) -> None:
        """Initialize configuration manager."""
        self.app_name = "timet"
        self.config_dir = Path(user_config_dir(self.app_name))
        self.data_dir = Path(user_data_dir(self.app_name))
        self.config_file = self.config_dir / "config.json"

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.default_config: Dict[str, Any] = {
            "data_directory": str(self.data_dir),
            "database_name": "timet.db",
            "default_filter": "today",
            "datetime_format": "%Y-%m-%d %H:%M:%S",
            "display": {
                "notes_width": 20,
            },
            "notifications": {
                "enabled": True,
                "timeout_seconds": 5,
                "fallback_to_log": True,
                "show_start": True,
                "show_stop": True,
                "show_errors": True,
            },
        }

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file, creating default if it doesn't exist."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r") as f:
                    loaded_config = json.load(f)

                # Merge with defaults to ensure all keys exist
                config = copy.deepcopy(self.default_config)
                config.update(loaded_config)
                return config

            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Could not load config file: {e}; using defaults")

        self._save_config(self.default_config)
        return copy.deepcopy(self.default_config)

    def _save_config(self, config: Dict[str, Any]) -> None:
        """Save configuration to file."""
        try:
            with open(self.config_file, "w") as f:
                json.dump(config, f, indent=2, sort_keys=True)
        except IOError as e:
            logger.warning(f"Could not save config file: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dotted key, with optional default."""
        value: Any = self._config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dotted key and persist it."""
        keys = key.split(".")
        config = self._config

        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        self._save_config(self._config)

    def get_data_dir(self) -> Path:
        """Get the data directory path."""
        return Path(self.get("data_directory", str(self.data_dir)))

    def get_database_path(self) -> Path:
        """Get the full path of the SQLite database."""
        return self.get_data_dir() / cast(str, self.get("database_name", "timet.db"))

    def get_default_filter(self) -> str:
        """Get the filter used by summary when none is given."""
        return cast(str, self.get("default_filter", "today"))

    def get_datetime_format(self) -> str:
        """Get the strftime format for timestamps."""
        return cast(str, self.get("datetime_format", "%Y-%m-%d %H:%M:%S"))

    def get_notes_width(self) -> int:
        """Get the maximum notes length shown in report tables."""
        return cast(int, self.get("display.notes_width", 20))

    def are_notifications_enabled(self) -> bool:
        """Check if desktop notifications are enabled."""
        return cast(bool, self.get("notifications.enabled", True))

    def get_notification_timeout(self) -> int:
        """Get notification timeout in seconds."""
        return cast(int, self.get("notifications.timeout_seconds", 5))

    def should_fallback_to_log(self) -> bool:
        """Check if notifications should fallback to logging when unavailable."""
        return cast(bool, self.get("notifications.fallback_to_log", True))

    def should_notify_start(self) -> bool:
        """Check if start notifications are enabled."""
        return cast(bool, self.get("notifications.show_start", True))

    def should_notify_stop(self) -> bool:
        """Check if stop notifications are enabled."""
        return cast(bool, self.get("notifications.show_stop", True))

    def should_notify_errors(self) -> bool:
        """Check if error notifications are enabled."""
        return cast(bool, self.get("notifications.show_errors", True))

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        self._config = copy.deepcopy(self.default_config)
        self._save_config(self._config)


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
