"""Authentication module: credential models, OAuth 1.0a flow and token storage."""

from twiauth.auth.models import (
    AccessToken,
    Authenticated,
    AuthenticateToken,
    AuthState,
    Authorized,
    CredentialsConfig,
    Idle,
    RequestedToken,
    RequestToken,
)
from twiauth.auth.oauth1 import (
    AuthSequence,
    Endpoints,
    HeaderBuilder,
    OAuth1Auth,
    SignatureEngine,
)
from twiauth.auth.storage import (
    InMemoryTokenStorage,
    JsonFileTokenStorage,
    TokenStorage,
)


__all__ = [
    # Models
    "CredentialsConfig",
    "RequestToken",
    "AuthenticateToken",
    "AccessToken",
    # State
    "AuthState",
    "Idle",
    "RequestedToken",
    "Authenticated",
    "Authorized",
    # OAuth 1.0a
    "AuthSequence",
    "Endpoints",
    "HeaderBuilder",
    "OAuth1Auth",
    "SignatureEngine",
    # Storage
    "TokenStorage",
    "JsonFileTokenStorage",
    "InMemoryTokenStorage",
]
