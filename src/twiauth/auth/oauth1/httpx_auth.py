"""httpx authentication flow that signs API calls with an access token."""

from collections.abc import Generator
from urllib.parse import parse_qsl

import httpx

from twiauth.auth.models import AccessToken

from .header import HeaderBuilder


FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class OAuth1Auth(httpx.Auth):
    """Adds a signed OAuth 1.0a ``Authorization`` header to each request.

    Query parameters and url-encoded form fields are included in the
    signature; other body types are not.

    Example:
        async with httpx.AsyncClient(auth=sequence.httpx_auth()) as client:
            await client.get("https://api.twitter.com/1.1/account/verify_credentials.json")
    """

    requires_request_body = True

    def __init__(self, header_builder: HeaderBuilder, access_token: AccessToken):
        self.header_builder = header_builder
        self.access_token = access_token

    def _signed_parameters(self, request: httpx.Request) -> list[tuple[str, str]]:
        parameters = list(request.url.params.multi_items())
        content_type = request.headers.get("Content-Type", "")
        if content_type.split(";")[0].strip().lower() == FORM_CONTENT_TYPE:
            parameters.extend(
                parse_qsl(request.content.decode("utf-8"), keep_blank_values=True)
            )
        return parameters

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        base_url = request.url.copy_with(query=None, fragment=None)
        request.headers["Authorization"] = self.header_builder.resource_header(
            request.method,
            str(base_url),
            self.access_token,
            self._signed_parameters(request),
        )
        yield request
