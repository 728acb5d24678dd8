"""OAuth 1.0a signing and the three-legged authorization sequence."""

from twiauth.auth.oauth1.codec import parse_form_encoded, percent_encode
from twiauth.auth.oauth1.endpoints import Endpoints
from twiauth.auth.oauth1.header import HeaderBuilder, SignedRequestParameters
from twiauth.auth.oauth1.httpx_auth import OAuth1Auth
from twiauth.auth.oauth1.sequence import AuthSequence
from twiauth.auth.oauth1.signature import SIGNATURE_METHOD, SignatureEngine


__all__ = [
    "AuthSequence",
    "Endpoints",
    "HeaderBuilder",
    "OAuth1Auth",
    "SIGNATURE_METHOD",
    "SignatureEngine",
    "SignedRequestParameters",
    "parse_form_encoded",
    "percent_encode",
]
