"""Network executor used by the authorization sequence.

The sequence only depends on the :class:`NetworkExecutor` protocol; the
httpx-backed implementation supports connection pooling by reusing an
``httpx.AsyncClient`` across requests.
"""

import os
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import httpx
from structlog import get_logger

from twiauth.exceptions import HTTPConnectionError, HTTPTimeoutError


logger = get_logger(__name__)


@dataclass(frozen=True)
class NetworkRequest:
    """A request to be sent by a network executor."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None


@dataclass(frozen=True)
class NetworkResponse:
    """Status code and raw body of a completed request."""

    status_code: int
    body: bytes


@runtime_checkable
class NetworkExecutor(Protocol):
    """Sends requests on behalf of the authorization sequence.

    Implementations raise :class:`twiauth.exceptions.HTTPError` subclasses on
    transport failures; HTTP error statuses are returned, not raised.
    """

    async def send(self, request: NetworkRequest) -> NetworkResponse: ...


def _truncate_error_text(response_text: str) -> str:
    """Truncate response text for compact error logging.

    Args:
        response_text: Full response text

    Returns:
        Truncated text suitable for logging

    """
    if len(response_text) > 200:
        return f"{response_text[:100]}...{response_text[-50:]}"
    if len(response_text) > 100:
        return f"{response_text[:100]}..."
    return response_text


def _log_http_error_compact(request: NetworkRequest, response: httpx.Response) -> None:
    """Log HTTP error response in compact format."""
    verbose_api = os.environ.get("TWIAUTH_VERBOSE_API", "false").lower() == "true"

    if verbose_api:
        logger.warning(
            "http_request_failed",
            method=request.method,
            url=request.url,
            status_code=response.status_code,
            response_text=response.text,
        )
    else:
        logger.warning(
            "http_request_failed_compact",
            method=request.method,
            url=request.url,
            status_code=response.status_code,
            response_preview=_truncate_error_text(response.text),
            verbose_hint="use TWIAUTH_VERBOSE_API=true for full response",
        )


class HttpxNetworkExecutor:
    """Network executor backed by httpx."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        """Initialize executor.

        Args:
            http_client: Optional shared httpx client for connection pooling
            timeout: Default request timeout in seconds

        """
        self._shared_client = http_client
        self.timeout = timeout

    async def send(self, request: NetworkRequest) -> NetworkResponse:
        """Send a request and return its status code and body.

        Raises:
            HTTPTimeoutError: If the request timed out
            HTTPConnectionError: On any other transport failure

        """
        timeout = request.timeout if request.timeout is not None else self.timeout

        async def do_request(client: httpx.AsyncClient) -> httpx.Response:
            return await client.request(
                request.method,
                request.url,
                headers=request.headers,
                timeout=timeout,
            )

        try:
            if self._shared_client is not None:
                response = await do_request(self._shared_client)
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await do_request(client)
        except httpx.TimeoutException as e:
            logger.error("http_request_timeout", method=request.method, url=request.url)
            raise HTTPTimeoutError(f"Request to {request.url} timed out") from e
        except httpx.HTTPError as e:
            logger.error(
                "http_request_error",
                method=request.method,
                url=request.url,
                error=str(e),
            )
            raise HTTPConnectionError(f"Request to {request.url} failed: {e}") from e

        if response.status_code != 200:
            _log_http_error_compact(request, response)

        return NetworkResponse(status_code=response.status_code, body=response.content)
