"""Configuration module for twiauth."""

from twiauth.exceptions import ConfigurationError

from .settings import (
    LoggingSettings,
    OAuth1Settings,
    Settings,
    StorageSettings,
    config_manager,
    get_settings,
)


__all__ = [
    "Settings",
    "get_settings",
    "config_manager",
    "OAuth1Settings",
    "StorageSettings",
    "LoggingSettings",
    "ConfigurationError",
]
