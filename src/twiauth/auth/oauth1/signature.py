"""HMAC-SHA1 request signing (RFC 5849 §3.4).

The signature covers three parts joined with ``&``:

    METHOD & encode(base URL) & encode(normalized parameters)

and is keyed with ``encode(consumer_secret) & encode(token_secret)``.
"""

import base64
import hashlib
import hmac
from collections.abc import Iterable, Mapping

from .codec import percent_encode


Parameters = Mapping[str, str] | Iterable[tuple[str, str]]

SIGNATURE_METHOD = "HMAC-SHA1"


def _pairs(parameters: Parameters) -> list[tuple[str, str]]:
    if isinstance(parameters, Mapping):
        return [(str(k), str(v)) for k, v in parameters.items()]
    return [(str(k), str(v)) for k, v in parameters]


class SignatureEngine:
    """Builds signature base strings and computes HMAC-SHA1 signatures."""

    @staticmethod
    def parameter_string(parameters: Parameters) -> str:
        """Normalize parameters: encode, sort by name then value, join."""
        encoded = sorted(
            (percent_encode(key), percent_encode(value))
            for key, value in _pairs(parameters)
        )
        return "&".join(f"{key}={value}" for key, value in encoded)

    @classmethod
    def signature_base_string(
        cls, method: str, url: str, parameters: Parameters
    ) -> str:
        return "&".join(
            [
                method.upper(),
                percent_encode(url),
                percent_encode(cls.parameter_string(parameters)),
            ]
        )

    @staticmethod
    def signing_key(consumer_secret: str, token_secret: str | None = None) -> str:
        return f"{percent_encode(consumer_secret)}&{percent_encode(token_secret or '')}"

    @classmethod
    def compose(
        cls,
        method: str,
        url: str,
        parameters: Parameters,
        consumer_secret: str,
        token_secret: str | None = None,
    ) -> str:
        """Sign a request and return the base64-encoded HMAC-SHA1 digest.

        Args:
            method: HTTP method, any case
            url: Base URL of the request, without query string
            parameters: Every parameter sent on the wire, excluding
                ``oauth_signature``; a mapping or ``(key, value)`` pairs
            consumer_secret: Application secret
            token_secret: Request or access token secret, if any

        Returns:
            Base64 signature suitable for ``oauth_signature``
        """
        key = cls.signing_key(consumer_secret, token_secret).encode("utf-8")
        base = cls.signature_base_string(method, url, parameters).encode("utf-8")
        digest = hmac.new(key, base, hashlib.sha1).digest()
        return base64.b64encode(digest).decode("ascii")
