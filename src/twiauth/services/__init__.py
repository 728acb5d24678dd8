"""Collaborators used by the authorization sequence."""

from twiauth.services.interactive import BrowserInteractiveSession, InteractiveSession
from twiauth.services.transport import (
    HttpxNetworkExecutor,
    NetworkExecutor,
    NetworkRequest,
    NetworkResponse,
)


__all__ = [
    "BrowserInteractiveSession",
    "HttpxNetworkExecutor",
    "InteractiveSession",
    "NetworkExecutor",
    "NetworkRequest",
    "NetworkResponse",
]
