"""Token storage implementations for authentication."""

from twiauth.auth.storage.base import TokenStorage
from twiauth.auth.storage.json_file import JsonFileTokenStorage
from twiauth.auth.storage.memory import InMemoryTokenStorage


__all__ = [
    "InMemoryTokenStorage",
    "JsonFileTokenStorage",
    "TokenStorage",
]
