# tests/unit/auth/test_signature.py
"""Tests for HMAC-SHA1 signature composition."""

import base64
import hashlib
import hmac

import pytest

from twiauth.auth.oauth1.signature import SignatureEngine


REQUEST_TOKEN_URL = "https://api.example.com/oauth/request_token"

REQUEST_TOKEN_PARAMS = {
    "oauth_callback": "https://cb",
    "oauth_consumer_key": "ck",
    "oauth_nonce": "n1",
    "oauth_signature_method": "HMAC-SHA1",
    "oauth_timestamp": "1000000000",
    "oauth_version": "1.0",
}

# Example from Twitter's "Creating a signature" documentation
TWITTER_URL = "https://api.twitter.com/1.1/statuses/update.json"
TWITTER_PARAMS = {
    "status": "Hello Ladies + Gentlemen, a signed OAuth request!",
    "include_entities": "true",
    "oauth_consumer_key": "xvz1evFS4wEEPTGEFPHBog",
    "oauth_nonce": "kYjzVBB8Y0ZFabxSWbWovY3uYSQ2pTgmZeNu2VS4cg",
    "oauth_signature_method": "HMAC-SHA1",
    "oauth_timestamp": "1318622958",
    "oauth_token": "370773112-GmHxMAgYyLbNEtIKZeRNFsMKPR9EyMZeS9weJAEb",
    "oauth_version": "1.0",
}
TWITTER_CONSUMER_SECRET = "kAcSOqF21Fu85e7zjz7ZN2U4ZRhfV3WpwPAoE3Z7kBw"
TWITTER_TOKEN_SECRET = "LswwdoUaIvS8ltyTt5jkRh4J50vUPVVHtR2YPi5kE"


class TestParameterString:
    """Tests for parameter normalization."""

    def test_sorted_by_encoded_key(self) -> None:
        result = SignatureEngine.parameter_string({"b": "2", "a": "1", "c": "3"})
        assert result == "a=1&b=2&c=3"

    def test_repeated_key_sorted_by_value(self) -> None:
        result = SignatureEngine.parameter_string([("a", "2"), ("a", "1"), ("b", "0")])
        assert result == "a=1&a=2&b=0"

    def test_keys_and_values_encoded_before_sorting(self) -> None:
        # "a b" encodes to "a%20b", which sorts before "a-b"
        result = SignatureEngine.parameter_string({"a-b": "x", "a b": "y"})
        assert result == "a%20b=y&a-b=x"

    def test_sort_is_bytewise_not_case_insensitive(self) -> None:
        result = SignatureEngine.parameter_string({"b": "1", "B": "2", "a": "3"})
        assert result == "B=2&a=3&b=1"

    def test_empty_parameters(self) -> None:
        assert SignatureEngine.parameter_string({}) == ""


class TestSignatureBaseString:
    """Tests for base string construction."""

    def test_request_token_base_string(self) -> None:
        base = SignatureEngine.signature_base_string(
            "POST", REQUEST_TOKEN_URL, REQUEST_TOKEN_PARAMS
        )
        assert base == (
            "POST&https%3A%2F%2Fapi.example.com%2Foauth%2Frequest_token"
            "&oauth_callback%3Dhttps%253A%252F%252Fcb"
            "%26oauth_consumer_key%3Dck"
            "%26oauth_nonce%3Dn1"
            "%26oauth_signature_method%3DHMAC-SHA1"
            "%26oauth_timestamp%3D1000000000"
            "%26oauth_version%3D1.0"
        )

    def test_method_is_uppercased(self) -> None:
        base = SignatureEngine.signature_base_string("post", "url", {"String": "Any"})
        assert base == "POST&url&String%3DAny"


class TestSigningKey:
    """Tests for signing key construction."""

    def test_without_token_secret(self) -> None:
        assert SignatureEngine.signing_key("cs") == "cs&"

    def test_with_token_secret(self) -> None:
        assert SignatureEngine.signing_key("c s", "t&s") == "c%20s&t%26s"

    def test_empty_token_secret_same_as_none(self) -> None:
        assert SignatureEngine.signing_key("cs", "") == SignatureEngine.signing_key("cs")


class TestCompose:
    """Tests for the full signature against known vectors."""

    def test_request_token_vector(self) -> None:
        signature = SignatureEngine.compose(
            "POST", REQUEST_TOKEN_URL, REQUEST_TOKEN_PARAMS, "cs"
        )
        assert signature == "JlYIyaSKvdifimv5rK+EkdypwBo="

    def test_twitter_documentation_vector(self) -> None:
        signature = SignatureEngine.compose(
            "POST",
            TWITTER_URL,
            TWITTER_PARAMS,
            TWITTER_CONSUMER_SECRET,
            TWITTER_TOKEN_SECRET,
        )
        assert signature == "hCtSmYh+iHYCEqBWrE7C7hYmtUk="

    def test_minimal_vector(self) -> None:
        signature = SignatureEngine.compose(
            "POST", "url", {"String": "Any"}, "consumerSecret", "oAuthTokenSecret"
        )
        assert signature == "hFHEdXu+dfOee75swjlEy9zjKdk="

    def test_matches_manual_hmac(self) -> None:
        params = {"a": "1", "b": "two words"}
        expected = base64.b64encode(
            hmac.new(
                b"secret&token",
                b"GET&https%3A%2F%2Fexample.com%2Fx&a%3D1%26b%3Dtwo%2520words",
                hashlib.sha1,
            ).digest()
        ).decode()

        assert (
            SignatureEngine.compose(
                "GET", "https://example.com/x", params, "secret", "token"
            )
            == expected
        )

    def test_deterministic(self) -> None:
        first = SignatureEngine.compose("POST", TWITTER_URL, TWITTER_PARAMS, "a", "b")
        second = SignatureEngine.compose("POST", TWITTER_URL, TWITTER_PARAMS, "a", "b")
        assert first == second

    def test_pairs_and_mapping_agree(self) -> None:
        as_pairs = list(TWITTER_PARAMS.items())
        assert SignatureEngine.compose(
            "POST", TWITTER_URL, as_pairs, "a", "b"
        ) == SignatureEngine.compose("POST", TWITTER_URL, TWITTER_PARAMS, "a", "b")

    @pytest.mark.parametrize(
        "changed",
        [
            {"method": "GET"},
            {"url": "https://api.twitter.com/1.1/statuses/other.json"},
            {"consumer_secret": "other"},
            {"token_secret": None},
        ],
        ids=["method", "url", "consumer_secret", "token_secret"],
    )
    def test_any_input_changes_signature(self, changed: dict) -> None:
        args = {
            "method": "POST",
            "url": TWITTER_URL,
            "parameters": TWITTER_PARAMS,
            "consumer_secret": TWITTER_CONSUMER_SECRET,
            "token_secret": TWITTER_TOKEN_SECRET,
        }
        baseline = SignatureEngine.compose(**args)
        assert SignatureEngine.compose(**{**args, **changed}) != baseline
