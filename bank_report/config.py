"""
Configuration module for the bank statement reporter.

This module handles loading configuration from YAML files and
providing access to configuration values throughout the application.
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml  # type: ignore

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")

_MISSING = object()


class Config:
    """
    Configuration handler class for the bank statement reporter.

    Loads configuration values from a YAML file and provides
    methods to access those values, including dotted keys for
    nested sections (e.g. ``report.title``).
    """

    def __init__(
        self,
        config_path: str = DEFAULT_CONFIG_PATH,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the configuration.

        Args:
            config_path: Path to the YAML configuration file
            logger: Logger instance for logging configuration events
        """
        self.config_path = config_path
        self.logger = logger or logging.getLogger(__name__)
        self._config_data: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """
        Load configuration from the YAML file.

        Raises:
            FileNotFoundError: If the configuration file doesn't exist
            ValueError: If the YAML is invalid or is not a mapping
        """
        if not os.path.exists(self.config_path):
            self.logger.error(f"Config file not found: {self.config_path}")
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing YAML configuration: {str(e)}")
            raise ValueError(f"Invalid YAML in {self.config_path}: {str(e)}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            self.logger.error(
                f"Configuration in {self.config_path} is not a mapping"
            )
            raise ValueError(f"Configuration in {self.config_path} is not a mapping")

        self._config_data = data
        self.logger.info(f"Configuration loaded from {self.config_path}")

    def get(self, key: str, default: Any = _MISSING) -> Any:
        """
        Get a configuration value by key.

        Nested values are addressed with dots, e.g. ``report.title``.

        Args:
            key: The configuration key to look up
            default: Value returned when the key is absent

        Returns:
            The configuration value, or ``default`` when given and the key is absent

        Raises:
            KeyError: If the key is absent and no default was given
        """
        value: Any = self._config_data
        for part in key.split(".") if key else [""]:
            if isinstance(value, dict) and part in value:
                value = value[part]
                continue
            if default is not _MISSING:
                return default
            self.logger.error(f"Configuration key not found: {key}")
            raise KeyError(key)
        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value.

        This changes the value in memory but does not update the YAML file.

        Args:
            key: The configuration key to set (dotted keys create sections)
            value: The value to set
        """
        parts = key.split(".")
        section = self._config_data
        for part in parts[:-1]:
            section = section.setdefault(part, {})
        section[parts[-1]] = value
        self.logger.debug(f"Set configuration {key}={value}")
