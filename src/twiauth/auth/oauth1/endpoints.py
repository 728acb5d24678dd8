"""URLs of the three OAuth 1.0a endpoints."""

from dataclasses import dataclass
from urllib.parse import urlencode


DEFAULT_API_BASE_URL = "https://api.twitter.com"
REQUEST_TOKEN_PATH = "/oauth/request_token"
AUTHORIZE_PATH = "/oauth/authorize"
ACCESS_TOKEN_PATH = "/oauth/access_token"


@dataclass(frozen=True)
class Endpoints:
    """OAuth endpoint configuration with sensible defaults."""

    base_url: str = DEFAULT_API_BASE_URL
    request_token_path: str = REQUEST_TOKEN_PATH
    authorize_path: str = AUTHORIZE_PATH
    access_token_path: str = ACCESS_TOKEN_PATH

    def _join(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @property
    def request_token_url(self) -> str:
        return self._join(self.request_token_path)

    @property
    def access_token_url(self) -> str:
        return self._join(self.access_token_path)

    def authorize_url(self, oauth_token: str) -> str:
        """Build the user authorization URL for a request token."""
        return f"{self._join(self.authorize_path)}?{urlencode({'oauth_token': oauth_token})}"
