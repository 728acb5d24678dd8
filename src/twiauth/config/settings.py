"""Settings configuration for twiauth."""

import os
import tomllib
from pathlib import Path
from typing import Any, Literal

import structlog
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from twiauth.auth.models import CredentialsConfig
from twiauth.auth.oauth1.endpoints import (
    ACCESS_TOKEN_PATH,
    AUTHORIZE_PATH,
    DEFAULT_API_BASE_URL,
    REQUEST_TOKEN_PATH,
    Endpoints,
)
from twiauth.config.discovery import CONFIG_FILE_ENV, find_toml_config_file
from twiauth.core.logging import setup_logging
from twiauth.core.system import get_default_token_file
from twiauth.exceptions import ConfigurationError


__all__ = [
    "Settings",
    "OAuth1Settings",
    "StorageSettings",
    "LoggingSettings",
    "ConfigurationError",
    "ConfigurationManager",
    "config_manager",
    "get_settings",
]

logger = structlog.get_logger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _coerce_settings(value: Any, settings_class: type) -> Any:
    """Coerce value to settings class instance.

    Handles: None → default, dict → instance, passthrough existing instances.
    """
    if value is None:
        return settings_class()
    if isinstance(value, settings_class):
        return value
    if isinstance(value, dict):
        return settings_class(**value)
    if hasattr(value, "model_dump"):
        return settings_class(**value.model_dump())
    return value


class OAuth1Settings(BaseSettings):
    """Application credentials and OAuth endpoint settings."""

    model_config = SettingsConfigDict(
        env_prefix="TWIAUTH_",
        case_sensitive=False,
        extra="ignore",
    )

    consumer_key: str | None = Field(
        default=None,
        description="OAuth consumer key of the registered application",
    )

    consumer_secret: str | None = Field(
        default=None,
        repr=False,
        description="OAuth consumer secret of the registered application",
    )

    callback_scheme: str | None = Field(
        default=None,
        description="Redirect scheme registered for the application",
    )

    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        description="Base URL of the OAuth endpoints",
    )

    request_token_path: str = Field(default=REQUEST_TOKEN_PATH)
    authorize_path: str = Field(default=AUTHORIZE_PATH)
    access_token_path: str = Field(default=ACCESS_TOKEN_PATH)

    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for each token request",
    )

    interactive_timeout: float = Field(
        default=300.0,
        gt=0,
        description="Seconds allowed for the user to authorize the application",
    )

    ephemeral_session: bool = Field(
        default=True,
        description="Ask the interactive session not to share browser state",
    )

    strict_parsing: bool = Field(
        default=False,
        description="Reject token responses with missing fields",
    )

    def credentials_config(self) -> CredentialsConfig:
        """Build the credentials used to sign requests.

        Raises:
            ConfigurationError: If any credential is missing
        """
        missing = [
            name
            for name in ("consumer_key", "consumer_secret", "callback_scheme")
            if not getattr(self, name)
        ]
        if missing:
            env_names = ", ".join(f"TWIAUTH_{name.upper()}" for name in missing)
            raise ConfigurationError(
                f"Missing OAuth settings: {', '.join(missing)} (set {env_names} "
                "or the [oauth] section of the config file)",
                details={"missing": missing},
            )
        return CredentialsConfig(
            consumer_key=self.consumer_key,
            consumer_secret=self.consumer_secret,
            callback_scheme=self.callback_scheme,
        )

    def endpoints(self) -> Endpoints:
        return Endpoints(
            base_url=self.api_base_url,
            request_token_path=self.request_token_path,
            authorize_path=self.authorize_path,
            access_token_path=self.access_token_path,
        )


class StorageSettings(BaseSettings):
    """Access token storage settings."""

    model_config = SettingsConfigDict(
        env_prefix="TWIAUTH_",
        case_sensitive=False,
        extra="ignore",
    )

    token_file: Path = Field(
        default_factory=get_default_token_file,
        description="JSON file holding the access token",
    )

    @field_validator("token_file", mode="after")
    @classmethod
    def expand_token_file(cls, v: Path) -> Path:
        return v.expanduser()


class LoggingSettings(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(
        env_prefix="TWIAUTH_",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Minimum log level")
    log_format: Literal["console", "json"] = Field(
        default="console", description="Log output format"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        level = str(v).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{v}', expected one of {', '.join(VALID_LOG_LEVELS)}"
            )
        return level


class Settings(BaseSettings):
    """
    Configuration settings for twiauth.

    Settings are loaded from environment variables, .env files, and TOML configuration files.
    TOML configuration files are searched in the following order:
    1. The file named by TWIAUTH_CONFIG_FILE
    2. .twiauth.toml or twiauth.toml in current directory
    3. config.toml in user config directory/twiauth/ (platform-specific)
    """

    model_config = SettingsConfigDict(
        env_prefix="TWIAUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    oauth: OAuth1Settings = Field(
        default_factory=OAuth1Settings,
        description="OAuth credentials and endpoints",
    )

    storage: StorageSettings = Field(
        default_factory=StorageSettings,
        description="Access token storage",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    @field_validator("oauth", mode="before")
    @classmethod
    def validate_oauth(cls, v: Any) -> Any:
        return _coerce_settings(v, OAuth1Settings)

    @field_validator("storage", mode="before")
    @classmethod
    def validate_storage(cls, v: Any) -> Any:
        return _coerce_settings(v, StorageSettings)

    @field_validator("logging", mode="before")
    @classmethod
    def validate_logging(cls, v: Any) -> Any:
        return _coerce_settings(v, LoggingSettings)

    def model_dump_safe(self) -> dict[str, Any]:
        """
        Dump model data with sensitive information masked.

        Returns:
            dict: Configuration with sensitive data masked
        """
        data = self.model_dump(mode="json")
        if data["oauth"].get("consumer_secret"):
            data["oauth"]["consumer_secret"] = "***"
        return data

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file.

        Raises:
            ConfigurationError: If the TOML file is invalid or cannot be read
        """
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read TOML config file {toml_path}: {e}",
                details={"path": str(toml_path)},
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(
                f"Invalid TOML syntax in {toml_path}: {e}",
                details={"path": str(toml_path)},
            ) from e

    @classmethod
    def from_config(
        cls, config_path: Path | str | None = None, **kwargs: Any
    ) -> "Settings":
        """Create Settings instance from configuration file.

        Args:
            config_path: Path to configuration file. Can be:
                - None: Use TWIAUTH_CONFIG_FILE or auto-discover a config file
                - Path or str: Use this specific config file, which must exist
            **kwargs: Additional keyword arguments to override config values

        Returns:
            Settings: Configured Settings instance

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        explicit = config_path is not None or bool(os.environ.get(CONFIG_FILE_ENV))

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path is not None:
            if config_path.exists():
                config_data = cls.load_toml_config(config_path)
                logger.debug("config_file_loaded", path=str(config_path))
            elif explicit:
                raise ConfigurationError(
                    f"Config file not found: {config_path}",
                    details={"path": str(config_path)},
                )

        # Merge config with kwargs (kwargs take precedence)
        merged_config = {**config_data, **kwargs}

        try:
            return cls(**merged_config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


class ConfigurationManager:
    """Centralized configuration management for the CLI."""

    def __init__(self) -> None:
        self._settings: Settings | None = None
        self._config_path: Path | None = None
        self._logging_configured = False

    def load_settings(self, config_path: Path | None = None) -> Settings:
        """Load settings with caching."""
        if self._settings is None or config_path != self._config_path:
            self._settings = Settings.from_config(config_path=config_path)
            self._config_path = config_path

        return self._settings

    def setup_logging(self, log_level: str | None = None) -> None:
        """Configure logging once based on settings."""
        if self._logging_configured:
            return
        settings = self.load_settings(self._config_path)
        setup_logging(
            log_level or settings.logging.log_level,
            settings.logging.log_format,
        )
        self._logging_configured = True

    def reset(self) -> None:
        """Reset configuration state (useful for testing)."""
        self._settings = None
        self._config_path = None
        self._logging_configured = False


# Global configuration manager instance
config_manager = ConfigurationManager()


def get_settings(config_path: Path | str | None = None) -> Settings:
    """Get a settings instance with configuration file support.

    Args:
        config_path: Optional path to configuration file. If None, uses
            TWIAUTH_CONFIG_FILE or auto-discovers a config file.

    Raises:
        ConfigurationError: If the configuration cannot be loaded
    """
    return Settings.from_config(config_path=config_path)
