"""Configuration management for fotobot."""

from fotobot.config.manager import ConfigManager, ConfigError
from fotobot.config.defaults import DEFAULT_CONFIG

__all__ = ["ConfigManager", "ConfigError", "DEFAULT_CONFIG"]
