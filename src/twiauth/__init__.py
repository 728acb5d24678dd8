"""twiauth - OAuth 1.0a three-legged authorization for Twitter-style APIs."""

from ._version import __version__
from .auth import (
    AccessToken,
    AuthSequence,
    AuthState,
    CredentialsConfig,
    HeaderBuilder,
    OAuth1Auth,
    SignatureEngine,
)
from .services import BrowserInteractiveSession, HttpxNetworkExecutor


__all__ = [
    "__version__",
    "AccessToken",
    "AuthSequence",
    "AuthState",
    "BrowserInteractiveSession",
    "CredentialsConfig",
    "HeaderBuilder",
    "HttpxNetworkExecutor",
    "OAuth1Auth",
    "SignatureEngine",
]
