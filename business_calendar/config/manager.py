"""
Configuration manager for loading and validating settings.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from business_calendar.core.exceptions import ConfigError
from business_calendar.data.schemas import Config

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "BUSINESS_CALENDAR_CONFIG"


class ConfigManager:
    """Manages configuration loading from YAML files and environment variables."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the config manager.

        Args:
            config_path: Optional path to config file. If not provided, uses default.
        """
        self.config_path = config_path or self._get_default_config_path()

    def _get_default_config_path(self) -> str:
        """Get the default configuration file path."""
        if os.environ.get(CONFIG_PATH_ENV):
            return os.environ[CONFIG_PATH_ENV]
        package_dir = Path(__file__).parent.parent
        return str(package_dir / "config" / "settings.yaml")

    def load_config(self) -> Config:
        """
        Load configuration from YAML file with environment variable overrides.

        Returns:
            Config: Validated configuration object.

        Raises:
            ConfigError: If config is invalid.
        """
        # 1. Load from YAML file
        config_dict = self._load_yaml()

        # 2. Apply environment variable overrides
        config_dict = self._apply_env_overrides(config_dict)

        # 3. Validate and create Config object
        try:
            return Config(**config_dict)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def _load_yaml(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        config_path = Path(self.config_path)

        if not config_path.exists():
            # If config file doesn't exist, return empty dict (will use defaults)
            logger.debug(f"Config file not found: {config_path}, using defaults")
            return {}

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML config file: {e}") from e

        logger.debug(f"Loaded config from: {config_path}")
        if not config:
            return {}
        if not isinstance(config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        return self._flatten_config(config)

    def _flatten_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Flatten nested YAML config to match Config model fields.

        Args:
            config: Nested configuration dictionary.

        Returns:
            Flattened configuration dictionary.
        """
        result = {}

        sections = {
            "calendar": {
                "directory": "calendar_directory",
                "default": "default_calendar",
                "max_roll_days": "max_roll_days",
            },
            "output": {
                "format": "output_format",
                "directory": "output_directory",
            },
            "api": {
                "host": "api_host",
                "port": "api_port",
            },
            "logging": {
                "level": "log_level",
            },
        }

        for section, keys in sections.items():
            values = config.get(section) or {}
            for key, field in keys.items():
                if key in values and values[key] is not None:
                    result[field] = values[key]

        return result

    def _apply_env_overrides(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides to configuration.

        Environment variables:
        - BUSINESS_CALENDAR_DIRECTORY -> calendar_directory
        - BUSINESS_CALENDAR_DEFAULT -> default_calendar
        - BUSINESS_CALENDAR_MAX_ROLL_DAYS -> max_roll_days
        - BUSINESS_CALENDAR_OUTPUT_FORMAT -> output_format
        - BUSINESS_CALENDAR_OUTPUT_DIRECTORY -> output_directory
        - BUSINESS_CALENDAR_API_HOST -> api_host
        - BUSINESS_CALENDAR_API_PORT -> api_port
        - BUSINESS_CALENDAR_LOG_LEVEL -> log_level

        Args:
            config_dict: Configuration dictionary from YAML.

        Returns:
            Updated configuration dictionary.
        """
        env_mappings = {
            "BUSINESS_CALENDAR_DIRECTORY": "calendar_directory",
            "BUSINESS_CALENDAR_DEFAULT": "default_calendar",
            "BUSINESS_CALENDAR_MAX_ROLL_DAYS": ("max_roll_days", int),
            "BUSINESS_CALENDAR_OUTPUT_FORMAT": "output_format",
            "BUSINESS_CALENDAR_OUTPUT_DIRECTORY": "output_directory",
            "BUSINESS_CALENDAR_API_HOST": "api_host",
            "BUSINESS_CALENDAR_API_PORT": ("api_port", int),
            "BUSINESS_CALENDAR_LOG_LEVEL": "log_level",
        }

        for env_var, mapping in env_mappings.items():
            env_value = os.environ.get(env_var)
            if env_value is not None:
                if isinstance(mapping, tuple):
                    config_key, type_converter = mapping
                    try:
                        config_dict[config_key] = type_converter(env_value)
                    except ValueError:
                        logger.warning(f"Ignoring invalid value for {env_var}: {env_value!r}")
                else:
                    config_dict[mapping] = env_value

        return config_dict

    def save_config(self, config: Config, output_path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: Configuration object to save.
            output_path: Optional output path. If not provided, uses default.
        """
        output_path = output_path or self.config_path

        config_dict = {
            "calendar": {
                "directory": config.calendar_directory,
                "default": config.default_calendar,
                "max_roll_days": config.max_roll_days,
            },
            "output": {
                "format": config.output_format,
                "directory": config.output_directory,
            },
            "api": {
                "host": config.api_host,
                "port": config.api_port,
            },
            "logging": {
                "level": config.log_level,
            },
        }

        # Ensure directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
