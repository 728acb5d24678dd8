# tests/unit/config/test_settings.py
"""Tests for settings loading and TOML discovery."""

from pathlib import Path

import pytest

from twiauth.auth.oauth1.endpoints import DEFAULT_API_BASE_URL
from twiauth.config.discovery import find_toml_config_file
from twiauth.config.settings import (
    ConfigurationManager,
    OAuth1Settings,
    Settings,
    get_settings,
)
from twiauth.exceptions import ConfigurationError


CONFIG_TOML = """
[oauth]
consumer_key = "toml-key"
consumer_secret = "toml-secret"
callback_scheme = "myapp"
request_timeout = 12.5

[storage]
token_file = "~/tokens/twiauth.json"

[logging]
log_level = "debug"
log_format = "json"
"""


class TestOAuth1Settings:
    """Tests for OAuth settings."""

    def test_defaults(self) -> None:
        settings = OAuth1Settings()

        assert settings.consumer_key is None
        assert settings.api_base_url == DEFAULT_API_BASE_URL
        assert settings.request_timeout == 30.0
        assert settings.interactive_timeout == 300.0
        assert settings.ephemeral_session is True
        assert settings.strict_parsing is False

    def test_environment_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TWIAUTH_CONSUMER_KEY", "env-key")
        monkeypatch.setenv("TWIAUTH_CONSUMER_SECRET", "env-secret")
        monkeypatch.setenv("TWIAUTH_CALLBACK_SCHEME", "envapp")
        monkeypatch.setenv("TWIAUTH_STRICT_PARSING", "true")

        settings = OAuth1Settings()
        config = settings.credentials_config()

        assert config.consumer_key == "env-key"
        assert config.consumer_secret == "env-secret"
        assert config.callback_scheme == "envapp://twiAuth"
        assert settings.strict_parsing is True

    def test_credentials_config_missing_values(self) -> None:
        settings = OAuth1Settings(consumer_key="ck")

        with pytest.raises(ConfigurationError) as exc_info:
            settings.credentials_config()

        assert exc_info.value.details["missing"] == [
            "consumer_secret",
            "callback_scheme",
        ]
        assert "TWIAUTH_CONSUMER_SECRET" in str(exc_info.value)

    def test_endpoints(self) -> None:
        settings = OAuth1Settings(
            api_base_url="https://api.example.com", authorize_path="/oauth/authenticate"
        )

        endpoints = settings.endpoints()

        assert endpoints.authorize_url("t") == (
            "https://api.example.com/oauth/authenticate?oauth_token=t"
        )

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValueError):
            OAuth1Settings(request_timeout=0)

    def test_secret_hidden_from_repr(self) -> None:
        assert "shh" not in repr(OAuth1Settings(consumer_secret="shh"))


class TestSettings:
    """Tests for the top-level settings and file loading."""

    def test_from_config_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text(CONFIG_TOML)

        settings = Settings.from_config(config_file)

        assert settings.oauth.consumer_key == "toml-key"
        assert settings.oauth.request_timeout == 12.5
        assert settings.storage.token_file == Path("~/tokens/twiauth.json").expanduser()
        assert settings.logging.log_level == "DEBUG"
        assert settings.logging.log_format == "json"

    def test_kwargs_override_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text(CONFIG_TOML)

        settings = Settings.from_config(
            config_file, oauth={"consumer_key": "override"}
        )

        assert settings.oauth.consumer_key == "override"

    def test_discovers_file_in_current_directory(self, tmp_path: Path) -> None:
        (tmp_path / ".twiauth.toml").write_text(CONFIG_TOML)

        assert find_toml_config_file() == (tmp_path / ".twiauth.toml").resolve()
        assert get_settings().oauth.consumer_key == "toml-key"

    def test_config_file_environment_variable(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "elsewhere.toml"
        config_file.write_text(CONFIG_TOML)
        monkeypatch.setenv("TWIAUTH_CONFIG_FILE", str(config_file))

        assert get_settings().oauth.consumer_key == "toml-key"

    def test_no_config_file_uses_defaults(self) -> None:
        settings = get_settings()

        assert settings.oauth.consumer_key is None
        assert settings.logging.log_level == "INFO"

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            Settings.from_config(tmp_path / "absent.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "broken.toml"
        config_file.write_text("[oauth\nconsumer_key = ")

        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            Settings.from_config(config_file)

    def test_invalid_values(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.toml"
        config_file.write_text('[logging]\nlog_level = "LOUD"\n')

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            Settings.from_config(config_file)

    def test_model_dump_safe_masks_secret(self) -> None:
        settings = Settings(oauth={"consumer_secret": "shh"})

        data = settings.model_dump_safe()

        assert data["oauth"]["consumer_secret"] == "***"


class TestConfigurationManager:
    """Tests for cached settings loading."""

    def test_caches_settings(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text(CONFIG_TOML)
        manager = ConfigurationManager()

        first = manager.load_settings(config_file)
        second = manager.load_settings(config_file)

        assert first is second

    def test_reload_on_different_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text(CONFIG_TOML)
        manager = ConfigurationManager()

        first = manager.load_settings(config_file)
        second = manager.load_settings(None)

        assert first is not second
        assert second.oauth.consumer_key is None
