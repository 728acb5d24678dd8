"""Three-legged OAuth 1.0a authorization sequence.

The session moves strictly forward through

    Idle -> RequestedToken -> Authenticated -> Authorized

and can only go back through :meth:`AuthSequence.reset_state`. Every step
checks its precondition before doing any I/O and raises an error that names
the step it belongs to:

- request token:  InitializationFailure (transport), BadAuthResponse, EncodingError
- authorization:  AuthenticatingFailure
- access token:   AccessTokenFailure

Operations are exclusive per session: starting one while another is in
flight raises SequenceInProgressError instead of interleaving transitions.
"""

import asyncio
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from structlog import get_logger

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
    state_name,
)
from twiauth.auth.storage.base import TokenStorage
from twiauth.exceptions import (
    AccessTokenFailure,
    AuthenticatingFailure,
    BadAuthResponse,
    EncodingError,
    HTTPError,
    CredentialsStorageError,
    InitializationFailure,
    MissingFieldError,
    NotAuthorizedError,
    OAuthSequenceError,
    SequenceInProgressError,
    TwiAuthError,
    UserCancelledError,
)
from twiauth.services.interactive import InteractiveSession
from twiauth.services.transport import NetworkExecutor, NetworkRequest

from .codec import parse_form_encoded
from .endpoints import Endpoints
from .header import HeaderBuilder
from .httpx_auth import OAuth1Auth


if TYPE_CHECKING:
    from twiauth.config.settings import Settings


logger = get_logger(__name__)


def _preview(token: str) -> str:
    """Shorten a token for log output."""
    return f"{token[:6]}..." if len(token) > 6 else token


class AuthSequence:
    """Drives one session from no credential to an access token."""

    def __init__(
        self,
        config: CredentialsConfig,
        executor: NetworkExecutor,
        interactive_session: InteractiveSession | None = None,
        token_storage: TokenStorage | None = None,
        endpoints: Endpoints | None = None,
        header_builder: HeaderBuilder | None = None,
        *,
        ephemeral: bool = True,
        strict_parsing: bool = False,
        request_timeout: float | None = None,
        interactive_timeout: float | None = None,
    ):
        """Initialize the sequence in the Idle state.

        Args:
            config: Application credentials
            executor: Sends the signed token requests
            interactive_session: Default session for the authorization step
            token_storage: Receives the access token once authorized
            endpoints: OAuth endpoint URLs, Twitter's if not provided
            header_builder: Header builder, built from ``config`` if not provided
            ephemeral: Ask the interactive session not to share browser state
            strict_parsing: Reject token responses with missing fields
            request_timeout: Timeout for each token request, in seconds
            interactive_timeout: Time allowed for the user to authorize

        """
        self.config = config
        self.executor = executor
        self.interactive_session = interactive_session
        self.token_storage = token_storage
        self.endpoints = endpoints or Endpoints()
        self.header_builder = header_builder or HeaderBuilder(config)
        self.ephemeral = ephemeral
        self.strict_parsing = strict_parsing
        self.request_timeout = request_timeout
        self.interactive_timeout = interactive_timeout

        self._state: AuthState = Idle()
        self._running: str | None = None
        self._generation = 0
        self._unsaved: AccessToken | None = None

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        executor: NetworkExecutor,
        interactive_session: InteractiveSession | None = None,
        token_storage: TokenStorage | None = None,
    ) -> "AuthSequence":
        """Create a sequence configured from application settings."""
        oauth = settings.oauth
        return cls(
            config=oauth.credentials_config(),
            executor=executor,
            interactive_session=interactive_session,
            token_storage=token_storage,
            endpoints=oauth.endpoints(),
            ephemeral=oauth.ephemeral_session,
            strict_parsing=oauth.strict_parsing,
            request_timeout=oauth.request_timeout,
            interactive_timeout=oauth.interactive_timeout,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def access_token(self) -> AccessToken | None:
        match self._state:
            case Authorized(token=token):
                return token
            case _:
                return None

    @property
    def in_progress(self) -> str | None:
        """Name of the operation currently running, if any."""
        return self._running

    def reset_state(self) -> None:
        """Discard all session data and return to Idle.

        A step still in flight when this is called fails instead of
        committing its result.
        """
        logger.info("oauth_state_reset", from_state=state_name(self._state))
        self._generation += 1
        self._state = Idle()
        self._unsaved = None

    @contextmanager
    def _exclusive(self, operation: str) -> Iterator[None]:
        if self._running is not None:
            logger.warning(
                "oauth_operation_rejected", operation=operation, running=self._running
            )
            raise SequenceInProgressError(operation, self._running)
        self._running = operation
        try:
            yield
        finally:
            self._running = None

    def _advance(
        self,
        new_state: AuthState,
        generation: int,
        failure: type[OAuthSequenceError],
    ) -> AuthState:
        if generation != self._generation:
            raise failure("Session was reset while the step was running")
        logger.info(
            "oauth_state_changed",
            from_state=state_name(self._state),
            to_state=state_name(new_state),
        )
        self._state = new_state
        return new_state

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------

    async def _post(self, url: str, authorization: str) -> str:
        """Send a signed POST and return the decoded success body.

        Raises:
            HTTPError: On transport failure
            EncodingError: If the body is not valid UTF-8
            BadAuthResponse: If the status is not 200

        """
        request = NetworkRequest(
            method="POST",
            url=url,
            headers={"Authorization": authorization},
            timeout=self.request_timeout,
        )
        response = await self.executor.send(request)
        try:
            text = response.body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(
                details={"url": url, "status_code": response.status_code}
            ) from e
        if response.status_code != 200:
            raise BadAuthResponse(text, status_code=response.status_code)
        return text

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def request_token(self) -> AuthState:
        """Obtain a request token and move to RequestedToken.

        Does nothing when the session is already authorized.

        Raises:
            InitializationFailure: If not in Idle, or on transport failure
            BadAuthResponse: If the server rejected the request
            EncodingError: If the response could not be decoded

        """
        with self._exclusive("request_token"):
            return await self._request_token()

    async def _request_token(self) -> AuthState:
        match self._state:
            case Authorized():
                return self._state
            case Idle():
                pass
            case other:
                raise InitializationFailure(
                    f"Cannot request token from state '{state_name(other)}'"
                )

        generation = self._generation
        url = self.endpoints.request_token_url
        header = self.header_builder.request_token_header(url)
        logger.info("oauth_request_token_started", url=url)

        try:
            body = await self._post(url, header)
        except HTTPError as e:
            logger.error("oauth_request_token_transport_failed", error=str(e))
            raise InitializationFailure(cause=e) from e
        except BadAuthResponse as e:
            logger.error("oauth_request_token_rejected", status_code=e.status_code)
            raise

        attributes = parse_form_encoded(body)
        token = RequestToken.from_response(attributes, strict=self.strict_parsing)
        if attributes.get("oauth_callback_confirmed") != "true":
            logger.warning(
                "oauth_callback_not_confirmed",
                value=attributes.get("oauth_callback_confirmed"),
            )
        logger.info(
            "oauth_request_token_completed", oauth_token=_preview(token.oauth_token)
        )
        return self._advance(RequestedToken(token), generation, InitializationFailure)

    async def authenticate(
        self,
        interactive_session: InteractiveSession | None = None,
        ephemeral: bool | None = None,
    ) -> AuthState:
        """Let the user authorize the request token and move to Authenticated.

        Args:
            interactive_session: Overrides the session given at construction
            ephemeral: Overrides the construction-time preference

        Raises:
            AuthenticatingFailure: If not in RequestedToken, or the user
                cancelled, or the session failed or returned an unusable
                callback

        """
        with self._exclusive("authenticate"):
            return await self._authenticate(interactive_session, ephemeral)

    async def _authenticate(
        self,
        interactive_session: InteractiveSession | None,
        ephemeral: bool | None,
    ) -> AuthState:
        match self._state:
            case RequestedToken(token=request_token):
                pass
            case other:
                raise AuthenticatingFailure(
                    f"Cannot authenticate from state '{state_name(other)}'"
                )

        session = interactive_session or self.interactive_session
        if session is None:
            raise AuthenticatingFailure("No interactive session configured")
        if ephemeral is None:
            ephemeral = self.ephemeral

        generation = self._generation
        url = self.endpoints.authorize_url(request_token.oauth_token)
        logger.info("oauth_authenticate_started", ephemeral=ephemeral)

        try:
            callback_url = await asyncio.wait_for(
                session.open(url, self.config.callback_scheme, ephemeral),
                timeout=self.interactive_timeout,
            )
        except UserCancelledError as e:
            logger.info("oauth_authenticate_cancelled")
            raise AuthenticatingFailure(cause=e) from e
        except TimeoutError as e:
            logger.warning("oauth_authenticate_timeout", timeout=self.interactive_timeout)
            raise AuthenticatingFailure(
                "Timed out waiting for user authorization", cause=e
            ) from e
        except asyncio.CancelledError as e:
            # Only a cancellation raised by the session itself is a step failure
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            logger.info("oauth_authenticate_session_cancelled")
            raise AuthenticatingFailure(
                "Interactive session was cancelled", cause=e
            ) from e
        except Exception as e:
            # Any collaborator failure belongs to this step
            logger.error("oauth_authenticate_session_failed", error=str(e))
            raise AuthenticatingFailure(cause=e) from e

        token = self._parse_callback(callback_url, request_token)
        logger.info("oauth_authenticate_completed")
        return self._advance(
            Authenticated(token=token, request_token=request_token),
            generation,
            AuthenticatingFailure,
        )

    def _parse_callback(
        self, callback_url: str, request_token: RequestToken
    ) -> AuthenticateToken:
        query = urlsplit(callback_url).query
        if not query:
            raise AuthenticatingFailure(
                "Callback URL carries no query parameters",
                cause=EncodingError("Callback URL carries no query parameters"),
            )

        parameters = parse_form_encoded(query)
        if "denied" in parameters:
            raise AuthenticatingFailure(
                "User denied the authorization request",
                cause=UserCancelledError("User denied the authorization request"),
            )

        try:
            token = AuthenticateToken.from_response(parameters, strict=True)
        except MissingFieldError as e:
            raise AuthenticatingFailure(cause=e) from e

        if token.oauth_token != request_token.oauth_token:
            raise AuthenticatingFailure("Callback token does not match the request token")
        return token

    async def exchange_access_token(self) -> AuthState:
        """Exchange the verified request token and move to Authorized.

        Raises:
            AccessTokenFailure: If not in Authenticated, or the exchange
                failed for any reason

        """
        with self._exclusive("exchange_access_token"):
            return await self._exchange_access_token()

    async def _exchange_access_token(self) -> AuthState:
        match self._state:
            case Authenticated(token=verified, request_token=request_token):
                pass
            case other:
                raise AccessTokenFailure(
                    f"Cannot exchange access token from state '{state_name(other)}'"
                )

        generation = self._generation
        url = self.endpoints.access_token_url
        header = self.header_builder.access_token_verifier_header(
            url, request_token, verified.oauth_verifier
        )
        logger.info("oauth_access_token_started", url=url)

        try:
            body = await self._post(url, header)
            token = AccessToken.from_response(
                parse_form_encoded(body), strict=self.strict_parsing
            )
        except TwiAuthError as e:
            logger.error(
                "oauth_access_token_failed",
                error_type=str(e.error_type),
                error=str(e),
            )
            raise AccessTokenFailure(cause=e) from e

        logger.info(
            "oauth_access_token_completed",
            user_id=token.user_id,
            screen_name=token.screen_name,
        )
        return self._advance(Authorized(token), generation, AccessTokenFailure)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    async def initialize(self) -> AccessToken:
        """Run the remaining steps and return the access token.

        Returns at once, without network I/O, if the session is already
        authorized. Otherwise resumes from the current state; the first failing
        step aborts the rest and its error propagates.

        A token that could not be written to storage is kept authorized and
        the write is retried by the next call.

        """
        with self._exclusive("initialize"):
            if isinstance(self._state, Authorized):
                logger.debug("oauth_already_authorized")
                if self._unsaved == self._state.token:
                    await self._save(self._state.token)
                return self._state.token

            while True:
                match self._state:
                    case Idle():
                        await self._request_token()
                    case RequestedToken():
                        await self._authenticate(None, None)
                    case Authenticated():
                        await self._exchange_access_token()
                    case Authorized(token=token):
                        break

            await self._save(token)
            return token

    async def _save(self, token: AccessToken) -> None:
        if self.token_storage is None:
            return
        try:
            saved = await self.token_storage.save(token)
        except CredentialsStorageError as e:
            logger.warning(
                "oauth_token_not_saved",
                location=self.token_storage.get_location(),
                error=str(e),
            )
            saved = False
        else:
            if not saved:
                logger.warning(
                    "oauth_token_not_saved",
                    location=self.token_storage.get_location(),
                )
        self._unsaved = None if saved else token

    async def restore(self) -> AccessToken | None:
        """Move straight to Authorized using a previously stored token.

        Returns:
            The stored token, or None if there is no storage or no token

        """
        with self._exclusive("restore"):
            if self.token_storage is None:
                return None
            token = await self.token_storage.load()
            if token is None:
                return None
            logger.info(
                "oauth_token_restored",
                location=self.token_storage.get_location(),
                screen_name=token.screen_name,
            )
            self._state = Authorized(token)
            self._unsaved = None
            return token

    # ------------------------------------------------------------------
    # Authorized API calls
    # ------------------------------------------------------------------

    def _require_access_token(self) -> AccessToken:
        token = self.access_token
        if token is None:
            raise NotAuthorizedError(
                f"Session is not authorized (state '{state_name(self._state)}')"
            )
        return token

    def authorization_header(
        self,
        method: str,
        url: str,
        parameters: Mapping[str, str] | Sequence[tuple[str, str]] | None = None,
    ) -> str:
        """Signed Authorization header for an API call.

        Args:
            method: HTTP method of the call
            url: URL without query string
            parameters: Query and form parameters sent with the call

        Raises:
            NotAuthorizedError: If the session holds no access token

        """
        token = self._require_access_token()
        return self.header_builder.resource_header(method, url, token, parameters)

    def httpx_auth(self) -> OAuth1Auth:
        """An ``httpx.Auth`` signing requests with the session's access token."""
        return OAuth1Auth(self.header_builder, self._require_access_token())
