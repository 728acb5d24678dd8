"""Signed OAuth parameter sets and Authorization header rendering."""

import secrets
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace

from twiauth.auth.models import AccessToken, CredentialsConfig, RequestToken
from twiauth.exceptions import UnsignedHeaderError

from .codec import percent_encode
from .signature import SIGNATURE_METHOD, SignatureEngine


OAUTH_VERSION = "1.0"
OAUTH_PREFIX = "oauth_"


def generate_nonce() -> str:
    """Generate a cryptographically secure random nonce."""
    return secrets.token_urlsafe(32)


def current_timestamp() -> str:
    """Current Unix timestamp as string."""
    return str(int(time.time()))


@dataclass(frozen=True)
class SignedRequestParameters:
    """Everything that goes into one signed request.

    ``oauth_parameters`` are the protocol fields of the step,
    ``extra_parameters`` the caller's query or form parameters. Both are
    signed; only ``oauth_*`` entries are rendered in the header.
    """

    method: str
    url: str
    oauth_parameters: Mapping[str, str]
    extra_parameters: Mapping[str, str] | Sequence[tuple[str, str]] = field(
        default_factory=dict
    )
    signature: str | None = None

    def signed_parameters(self) -> list[tuple[str, str]]:
        """The exact parameter set covered by the signature.

        Caller-supplied values take precedence on key collision.
        """
        extra = (
            list(self.extra_parameters.items())
            if isinstance(self.extra_parameters, Mapping)
            else list(self.extra_parameters)
        )
        overridden = {key for key, _ in extra}
        oauth = [
            (key, value)
            for key, value in self.oauth_parameters.items()
            if key not in overridden
        ]
        return oauth + extra

    def sign(
        self,
        engine: SignatureEngine,
        consumer_secret: str,
        token_secret: str | None = None,
    ) -> "SignedRequestParameters":
        signature = engine.compose(
            self.method,
            self.url,
            self.signed_parameters(),
            consumer_secret,
            token_secret,
        )
        return replace(self, signature=signature)

    @property
    def is_signed(self) -> bool:
        return self.signature is not None

    def header_parameters(self) -> dict[str, str]:
        if self.signature is None:
            raise UnsignedHeaderError()
        params = {
            key: value
            for key, value in self.signed_parameters()
            if key.startswith(OAUTH_PREFIX)
        }
        params["oauth_signature"] = self.signature
        return params

    def authorization_header(self) -> str:
        """Render the ``Authorization`` header value.

        Raises:
            UnsignedHeaderError: If the parameters were never signed
        """
        parts = [
            f'{percent_encode(key)}="{percent_encode(value)}"'
            for key, value in sorted(self.header_parameters().items())
        ]
        return "OAuth " + ", ".join(parts)


class HeaderBuilder:
    """Builds signed Authorization headers for each step of the flow."""

    def __init__(
        self,
        config: CredentialsConfig,
        engine: SignatureEngine | None = None,
        nonce_factory: Callable[[], str] | None = None,
        clock: Callable[[], str] | None = None,
    ):
        """Initialize header builder.

        Args:
            config: Application credentials
            engine: Signature engine, a default one if not provided
            nonce_factory: Source of fresh nonces, called once per header
            clock: Source of ``oauth_timestamp`` values
        """
        self.config = config
        self.engine = engine or SignatureEngine()
        self._nonce_factory = nonce_factory or generate_nonce
        self._clock = clock or current_timestamp

    def _base_parameters(self) -> dict[str, str]:
        return {
            "oauth_consumer_key": self.config.consumer_key,
            "oauth_nonce": self._nonce_factory(),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": self._clock(),
            "oauth_version": OAUTH_VERSION,
        }

    def build_request_token(self, url: str) -> SignedRequestParameters:
        oauth = self._base_parameters()
        oauth["oauth_callback"] = self.config.callback_scheme
        return SignedRequestParameters("POST", url, oauth).sign(
            self.engine, self.config.consumer_secret
        )

    def build_access_token_verifier(
        self, url: str, request_token: RequestToken, oauth_verifier: str
    ) -> SignedRequestParameters:
        oauth = self._base_parameters()
        oauth["oauth_token"] = request_token.oauth_token
        oauth["oauth_verifier"] = oauth_verifier
        return SignedRequestParameters("POST", url, oauth).sign(
            self.engine, self.config.consumer_secret, request_token.oauth_secret
        )

    def build_resource(
        self,
        method: str,
        url: str,
        access_token: AccessToken,
        parameters: Mapping[str, str] | Sequence[tuple[str, str]] | None = None,
    ) -> SignedRequestParameters:
        oauth = self._base_parameters()
        oauth["oauth_token"] = access_token.oauth_token
        return SignedRequestParameters(
            method.upper(), url, oauth, parameters if parameters is not None else {}
        ).sign(self.engine, self.config.consumer_secret, access_token.oauth_secret)

    def request_token_header(self, url: str) -> str:
        return self.build_request_token(url).authorization_header()

    def access_token_verifier_header(
        self, url: str, request_token: RequestToken, oauth_verifier: str
    ) -> str:
        return self.build_access_token_verifier(
            url, request_token, oauth_verifier
        ).authorization_header()

    def resource_header(
        self,
        method: str,
        url: str,
        access_token: AccessToken,
        parameters: Mapping[str, str] | Sequence[tuple[str, str]] | None = None,
    ) -> str:
        return self.build_resource(
            method, url, access_token, parameters
        ).authorization_header()
