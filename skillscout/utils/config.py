"""
Configuration management for skillscout.
"""

from copy import deepcopy
from pathlib import Path
from typing import Optional
import json
import logging
import os

from skillscout.core.models import Preferences


class Config:
    """Manages application configuration and user preferences."""

    DATA_DIR_ENV = "SKILLSCOUT_DATA_DIR"

    DEFAULT_CONFIG = {
        "storage": {
            "data_dir": "~/.skillscout",
        },
        "scan": {
            "root": ".",
            "workers": 1,
            "git_timeout": None,
        },
        "ingest": {
            "infer_skills": False,
        },
        "preferences": {
            "want_skills": [],
            "avoid_skills": [],
            "locations": [],
        },
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file (default: ~/.skillscout/config.json)
        """
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / ".skillscout" / "config.json"

        self.logger = logging.getLogger(self.__class__.__name__)
        self.config = self._load_config()

    def _load_config(self) -> dict:
        """Load configuration from file, falling back to defaults."""
        defaults = deepcopy(self.DEFAULT_CONFIG)
        if not self.config_path.exists():
            return defaults

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Ignoring unreadable config {self.config_path}: {e}")
            return defaults

        if not isinstance(user_config, dict):
            self.logger.warning(f"Ignoring config {self.config_path}: not a JSON object")
            return defaults

        return self._deep_merge(defaults, user_config)

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def save(self) -> None:
        """Save current configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default=None):
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "scan.workers")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value) -> None:
        """
        Set a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "preferences.locations")
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def get_data_dir(self) -> str:
        """Get the data directory. The environment variable takes precedence."""
        return os.environ.get(self.DATA_DIR_ENV) or self.get("storage.data_dir", "~/.skillscout")

    def get_scan_root(self) -> str:
        return self.get("scan.root", ".")

    def get_workers(self) -> int:
        try:
            return max(1, int(self.get("scan.workers", 1)))
        except (TypeError, ValueError):
            return 1

    def get_git_timeout(self) -> Optional[float]:
        timeout = self.get("scan.git_timeout")
        try:
            return float(timeout) if timeout else None
        except (TypeError, ValueError):
            return None

    def infer_skills(self) -> bool:
        return bool(self.get("ingest.infer_skills", False))

    def get_preferences(self) -> Preferences:
        """Build match preferences from the ``preferences`` section."""
        return Preferences.from_dict(self.get("preferences", {}))

    def print_config(self) -> None:
        """Print current configuration."""
        print(json.dumps(self.config, indent=2))

    @classmethod
    def create_default_config(cls, path: str = None) -> 'Config':
        """Create a new config file with default values."""
        config = cls(path)
        config.config = deepcopy(cls.DEFAULT_CONFIG)
        config.save()
        return config
