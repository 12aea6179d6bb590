"""
Configuration management for Local Quotes.

This module handles loading and accessing configuration values from config.yaml.
It provides a centralized way to manage all settings and makes it easy to
change quote selection behaviour without changing code.
"""

import yaml
from pathlib import Path
from typing import Any, Dict
import logging

from .models import LocalQuotesSettings, SECONDS_IN_DAY


class ConfigManager:
    """
    Manages configuration loading and access for Local Quotes.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}

            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, yaml.YAMLError) as e:
            logging.warning(f"Failed to load configuration, using defaults: {e}")
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "quotes": {
                "quote_tag": "quotes",
                "default_reload_interval": SECONDS_IN_DAY,
                "minimal_quote_length": 5,
                "auto_generated_id_length": 5,
                "use_weighted_random": False,
                "weighted_on_creation": False,
                "template_folder": ""
            },
            "database": {
                "filename": "localquotes.db"
            },
            "paths": {
                "notes_dir": "notes",
                "log_file": "localquotes.log"
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "quotes.quote_tag")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("quotes.default_reload_interval")  # Returns 86400
            config.get("database.filename")  # Returns "localquotes.db"
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {}) or {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def database_filename(self) -> str:
        """Get database filename."""
        return self.get("database.filename", "localquotes.db")

    @property
    def notes_directory(self) -> str:
        """Get the default notes directory scanned for quote listings."""
        return self.get("paths.notes_dir", "notes")

    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("paths.log_file", "localquotes.log")

    def quote_settings(self) -> LocalQuotesSettings:
        """
        Build typed settings from the `quotes` section.

        Missing keys take the model defaults.

        Returns:
            LocalQuotesSettings instance
        """
        return LocalQuotesSettings(**self.get_section("quotes"))


# Global configuration instance
config = ConfigManager()
