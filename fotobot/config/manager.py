"""Configuration manager for fotobot."""

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .defaults import (
    DEFAULT_CONFIG,
    ENV_OVERRIDES,
    FIELD_DESCRIPTIONS,
    REQUIRED_FIELDS,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration errors."""
    pass


class ConfigManager:
    """Loads, validates and exposes the bot configuration.

    Values come from three layers, later layers winning: built-in defaults,
    an optional YAML file, and environment variables. Keys are addressed with
    dot notation.

    Attributes:
        config: Dictionary containing all configuration values
        config_path: Path to the loaded configuration file, if any

    Examples:
        >>> config = ConfigManager.load("config.yaml")
        >>> config.get("geocoding.domain")
        'nominatim.openstreetmap.org'
        >>> config.api_id
        123456
    """

    def __init__(self, config: Dict[str, Any], config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config: Configuration dictionary
            config_path: Path to the configuration file (optional)
        """
        self.config = config
        self.config_path = config_path

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        validate: bool = True
    ) -> "ConfigManager":
        """Load configuration from file and environment.

        A missing file is not an error: deployments commonly provide every
        required value through the environment.

        Args:
            config_path: Path to configuration file (optional). When given,
                the file must exist.
            environ: Environment mapping (defaults to ``os.environ``)
            validate: Whether to check that required fields are present

        Returns:
            ConfigManager instance with loaded configuration

        Raises:
            ConfigError: If configuration cannot be loaded or validated
        """
        if config_path:
            path = Path(config_path).expanduser()
            if not path.exists():
                raise ConfigError(f"Configuration file not found: {path}")
        else:
            path = cls._find_config_file()

        if path:
            logger.info(f"Loading configuration from: {path}")
            config = cls._merge_with_defaults(cls._load_yaml(path))
        else:
            logger.debug("No configuration file found, using defaults and environment")
            config = deepcopy(DEFAULT_CONFIG)

        cls._apply_env_overrides(config, os.environ if environ is None else environ)

        if validate:
            cls._validate_required_fields(config)
            cls._validate_api_id(config)

        return cls(config, path)

    @staticmethod
    def _find_config_file() -> Optional[Path]:
        """Search for config.yaml in standard locations.

        Search order:
        1. ~/.config/fotobot/config.yaml
        2. ./config.yaml

        Returns:
            Path to config file if found, None otherwise
        """
        search_paths = [
            Path.home() / ".config" / "fotobot" / "config.yaml",
            Path.cwd() / "config.yaml",
        ]

        for path in search_paths:
            if path.exists():
                logger.debug(f"Found config file: {path}")
                return path

        return None

    @staticmethod
    def _load_yaml(path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML file.

        Raises:
            ConfigError: If file cannot be read or parsed
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Failed to parse YAML configuration: {path}\n"
                f"Error: {e}"
            ) from e
        except OSError as e:
            raise ConfigError(
                f"Failed to load configuration file: {path}\n"
                f"Error: {e}"
            ) from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigError(
                f"Invalid configuration file: {path}\n"
                "Configuration must be a YAML dictionary."
            )
        return config

    @staticmethod
    def _merge_with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
        """Deep-merge a loaded config over the defaults.

        User values always win; defaults only fill in missing keys.
        """
        def deep_merge(base: dict, updates: dict) -> dict:
            result = deepcopy(base)
            for key, value in updates.items():
                if isinstance(result.get(key), dict) and isinstance(value, dict):
                    result[key] = deep_merge(result[key], value)
                else:
                    result[key] = value
            return result

        return deep_merge(DEFAULT_CONFIG, config)

    @staticmethod
    def _apply_env_overrides(config: Dict[str, Any], environ: Mapping[str, str]) -> None:
        for key, names in ENV_OVERRIDES.items():
            for name in names:
                value = environ.get(name, "").strip()
                if value:
                    logger.debug(f"Using {name} for {key}")
                    ConfigManager._set_nested_value(config, key, value)
                    break

    @staticmethod
    def _validate_required_fields(config: Dict[str, Any]) -> None:
        """Validate that all required fields are present.

        Raises:
            ConfigError: If required fields are missing
        """
        missing = [
            field_path
            for field_path in REQUIRED_FIELDS
            if not ConfigManager._get_nested_value(config, field_path)
        ]

        if missing:
            raise ConfigError(
                "Missing required configuration fields:\n"
                + "\n".join(
                    f"  - {field}: {FIELD_DESCRIPTIONS.get(field, '')}"
                    for field in missing
                )
            )

    @staticmethod
    def _validate_api_id(config: Dict[str, Any]) -> None:
        value = ConfigManager._get_nested_value(config, "telegram.api_id")
        try:
            api_id = int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(
                f"telegram.api_id must be an integer, got {value!r}"
            ) from e
        ConfigManager._set_nested_value(config, "telegram.api_id", api_id)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "geocoding.timeout")
            default: Default value to return if key not found

        Returns:
            Configuration value or default
        """
        value = self._get_nested_value(self.config, key)
        return value if value is not None else default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation."""
        self._set_nested_value(self.config, key, value)

    @property
    def bot_token(self) -> str:
        return self.get("telegram.bot_token", "")

    @property
    def api_id(self) -> int:
        return int(self.get("telegram.api_id"))

    @property
    def api_hash(self) -> str:
        return self.get("telegram.api_hash", "")

    @staticmethod
    def _get_nested_value(config: Dict[str, Any], key: str) -> Any:
        value = config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return None
        return value

    @staticmethod
    def _set_nested_value(config: Dict[str, Any], key: str, value: Any) -> None:
        keys = key.split(".")
        current = config

        for k in keys[:-1]:
            if k not in current or not isinstance(current[k], dict):
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

    def to_dict(self) -> Dict[str, Any]:
        """Return a copy of the configuration as a dictionary."""
        return deepcopy(self.config)

    def __repr__(self) -> str:
        path_str = f" from {self.config_path}" if self.config_path else ""
        return f"<ConfigManager{path_str}>"
