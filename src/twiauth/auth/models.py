"""Credential records and authorization state for the OAuth 1.0a flow."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from twiauth.exceptions import MissingFieldError


CALLBACK_SUFFIX = "://twiAuth"


def _pick(
    record: str,
    attributes: Mapping[str, str],
    fields: dict[str, str],
    strict: bool,
) -> dict[str, str]:
    """Map response attribute names onto model field names.

    Missing attributes default to an empty string unless ``strict`` is set.
    """
    missing = [name for name in fields.values() if not attributes.get(name)]
    if strict and missing:
        raise MissingFieldError(record, missing)
    return {field: attributes.get(name, "") for field, name in fields.items()}


class CredentialsConfig(BaseModel):
    """Application identity used to sign every request of a session."""

    model_config = ConfigDict(frozen=True)

    consumer_key: str = Field(..., description="OAuth consumer key")
    consumer_secret: str = Field(..., repr=False, description="OAuth consumer secret")
    callback_scheme: str = Field(
        ..., description="Redirect scheme, stored with the twiauth suffix"
    )

    @field_validator("callback_scheme")
    @classmethod
    def append_callback_suffix(cls, value: str) -> str:
        if value.endswith(CALLBACK_SUFFIX):
            return value
        return value + CALLBACK_SUFFIX

    @property
    def bare_scheme(self) -> str:
        """The scheme as supplied, without the suffix."""
        return self.callback_scheme.removesuffix(CALLBACK_SUFFIX)


class RequestToken(BaseModel):
    """Temporary credentials returned by the request-token endpoint."""

    model_config = ConfigDict(frozen=True)

    oauth_token: str
    oauth_secret: str = Field(repr=False)

    @classmethod
    def from_response(cls, attributes: Mapping[str, str], *, strict: bool = False) -> Self:
        return cls(
            **_pick(
                "request_token",
                attributes,
                {"oauth_token": "oauth_token", "oauth_secret": "oauth_token_secret"},
                strict,
            )
        )


class AuthenticateToken(BaseModel):
    """Token and verifier reported back by the interactive session."""

    model_config = ConfigDict(frozen=True)

    oauth_token: str
    oauth_verifier: str

    @classmethod
    def from_response(cls, attributes: Mapping[str, str], *, strict: bool = False) -> Self:
        return cls(
            **_pick(
                "authenticate",
                attributes,
                {"oauth_token": "oauth_token", "oauth_verifier": "oauth_verifier"},
                strict,
            )
        )


class AccessToken(BaseModel):
    """Long-lived credentials produced by a completed authorization."""

    model_config = ConfigDict(frozen=True)

    oauth_token: str = Field(..., description="Access token")
    oauth_secret: str = Field(..., repr=False, description="Access token secret")
    user_id: str = Field(default="", description="Numeric user id")
    screen_name: str = Field(default="", description="User handle")

    @classmethod
    def from_response(cls, attributes: Mapping[str, str], *, strict: bool = False) -> Self:
        return cls(
            **_pick(
                "access_token",
                attributes,
                {
                    "oauth_token": "oauth_token",
                    "oauth_secret": "oauth_token_secret",
                    "user_id": "user_id",
                    "screen_name": "screen_name",
                },
                strict,
            )
        )


# ============================================================================
# Authorization state
# ============================================================================


@dataclass(frozen=True, slots=True)
class Idle:
    """No credential has been requested yet."""


@dataclass(frozen=True, slots=True)
class RequestedToken:
    """A request token was obtained; the user has not authorized it yet."""

    token: RequestToken


@dataclass(frozen=True, slots=True)
class Authenticated:
    """The user authorized the request token; a verifier is available.

    The request token is kept because its secret signs the exchange.
    """

    token: AuthenticateToken
    request_token: RequestToken


@dataclass(frozen=True, slots=True)
class Authorized:
    """The sequence completed and an access token is held."""

    token: AccessToken


AuthState = Idle | RequestedToken | Authenticated | Authorized


def state_name(state: AuthState) -> str:
    """Short lowercase label of a state, used in log events."""
    match state:
        case Idle():
            return "idle"
        case RequestedToken():
            return "requested_token"
        case Authenticated():
            return "authenticated"
        case Authorized():
            return "authorized"


__all__ = [
    "CALLBACK_SUFFIX",
    "CredentialsConfig",
    "RequestToken",
    "AuthenticateToken",
    "AccessToken",
    "Idle",
    "RequestedToken",
    "Authenticated",
    "Authorized",
    "AuthState",
    "state_name",
]
