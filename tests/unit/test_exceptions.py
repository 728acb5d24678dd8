# tests/unit/test_exceptions.py
"""Tests for the exception hierarchy."""

import pytest

from twiauth.exceptions import (
    AccessTokenFailure,
    AuthenticatingFailure,
    BadAuthResponse,
    ErrorType,
    HTTPConnectionError,
    InitializationFailure,
    OAuthSequenceError,
    SequenceInProgressError,
    TwiAuthError,
    UnsignedHeaderError,
    UserCancelledError,
)


class TestOAuthSequenceErrors:
    @pytest.mark.parametrize(
        ("error_class", "error_type"),
        [
            (InitializationFailure, ErrorType.INITIALIZATION),
            (AuthenticatingFailure, ErrorType.AUTHENTICATING),
            (AccessTokenFailure, ErrorType.ACCESS_TOKEN),
        ],
    )
    def test_step_error_types(
        self, error_class: type[OAuthSequenceError], error_type: ErrorType
    ) -> None:
        error = error_class()

        assert isinstance(error, TwiAuthError)
        assert error.error_type == error_type
        assert error.cause is None

    def test_message_includes_cause(self) -> None:
        cause = HTTPConnectionError("refused")

        error = InitializationFailure(cause=cause)

        assert str(error) == "Request token step failed: refused"
        assert error.cause is cause

    def test_explicit_message_kept(self) -> None:
        error = AuthenticatingFailure("Custom", cause=UserCancelledError())

        assert str(error) == "Custom"


class TestOtherErrors:
    def test_bad_auth_response_keeps_body(self) -> None:
        error = BadAuthResponse("<html>nope</html>", status_code=503)

        assert error.raw_body == "<html>nope</html>"
        assert error.details == {"status_code": 503}
        assert error.error_type == ErrorType.BAD_RESPONSE

    def test_sequence_in_progress(self) -> None:
        error = SequenceInProgressError("authenticate", "initialize")

        assert error.error_type == ErrorType.CONFLICT
        assert "initialize" in str(error)

    def test_unsigned_header_message(self) -> None:
        assert str(UnsignedHeaderError()) == "Needed signature for header to be authorized"

    def test_unknown_error_type_string_kept(self) -> None:
        assert TwiAuthError("x", error_type="custom").error_type == "custom"

    def test_known_error_type_string_converted(self) -> None:
        error = TwiAuthError("x", error_type="timeout_error")
        assert error.error_type is ErrorType.TIMEOUT
