"""Process-local token storage."""

from twiauth.auth.models import AccessToken
from twiauth.auth.storage.base import TokenStorage


class InMemoryTokenStorage(TokenStorage):
    """Keeps the access token for the lifetime of the process."""

    def __init__(self, token: AccessToken | None = None) -> None:
        self._token = token

    async def load(self) -> AccessToken | None:
        return self._token

    async def save(self, token: AccessToken) -> bool:
        self._token = token
        return True

    async def exists(self) -> bool:
        return self._token is not None

    async def delete(self) -> bool:
        existed = self._token is not None
        self._token = None
        return existed

    def get_location(self) -> str:
        return "memory"
