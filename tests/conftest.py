# tests/conftest.py
"""Shared fixtures for twiauth tests."""

import os

import pytest

from twiauth.auth.models import AccessToken, CredentialsConfig, RequestToken
from twiauth.config.settings import config_manager


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep host configuration out of every test."""
    for name in list(os.environ):
        if name.upper().startswith("TWIAUTH_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "twiauth.config.discovery.get_twiauth_config_dir",
        lambda: tmp_path / "user-config",
    )
    config_manager.reset()


@pytest.fixture
def credentials_config() -> CredentialsConfig:
    return CredentialsConfig(
        consumer_key="ck", consumer_secret="cs", callback_scheme="https://cb"
    )


@pytest.fixture
def request_token() -> RequestToken:
    return RequestToken(oauth_token="req-token", oauth_secret="req-secret")


@pytest.fixture
def access_token() -> AccessToken:
    return AccessToken(
        oauth_token="acc-token",
        oauth_secret="acc-secret",
        user_id="42",
        screen_name="alice",
    )
