"""Consolidated exception hierarchy for twiauth.

All exceptions use proper exception chaining with the `from` keyword.
Error types use StrEnum for type safety and autocompletion.
"""

from enum import StrEnum
from typing import Any


class ErrorType(StrEnum):
    """Error type codes attached to every twiauth error."""

    ENCODING = "encoding_error"
    BAD_RESPONSE = "bad_response_error"
    INITIALIZATION = "initialization_error"
    AUTHENTICATING = "authenticating_error"
    ACCESS_TOKEN = "access_token_error"
    CONFLICT = "conflict_error"
    NOT_AUTHORIZED = "not_authorized_error"
    INVALID_STATE = "invalid_state_error"
    TRANSPORT = "transport_error"
    TIMEOUT = "timeout_error"
    STORAGE = "storage_error"
    CONFIGURATION = "configuration_error"
    INTERNAL = "internal_error"


# ============================================================================
# Base Exceptions
# ============================================================================


class TwiAuthError(Exception):
    """Base exception for all twiauth errors.

    All exceptions inherit from this base class for easy catching.
    Supports a typed error code and structured error details.
    """

    def __init__(
        self,
        message: str,
        *,
        error_type: ErrorType | str = ErrorType.INTERNAL,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        # Convert string error_type to ErrorType if possible
        if isinstance(error_type, str) and not isinstance(error_type, ErrorType):
            try:
                self.error_type = ErrorType(error_type)
            except ValueError:
                self.error_type = error_type  # type: ignore[assignment]
        else:
            self.error_type = error_type
        self.details = details or {}


# ============================================================================
# HTTP & Network Errors
# ============================================================================


class HTTPError(TwiAuthError):
    """Base exception for transport failures raised by a network executor."""

    def __init__(
        self,
        message: str,
        *,
        error_type: ErrorType = ErrorType.TRANSPORT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_type=error_type, details=details)


class HTTPTimeoutError(HTTPError):
    """Exception raised when an HTTP request times out."""

    def __init__(self, message: str = "Request timed out") -> None:
        super().__init__(message, error_type=ErrorType.TIMEOUT)


class HTTPConnectionError(HTTPError):
    """Exception raised when an HTTP connection fails."""

    def __init__(self, message: str = "Connection failed") -> None:
        super().__init__(message)


# ============================================================================
# Response Decoding Errors
# ============================================================================


class EncodingError(TwiAuthError):
    """A response body could not be decoded as text."""

    def __init__(
        self,
        message: str = "Failed to decode the response received",
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_type=ErrorType.ENCODING, details=details)


class MissingFieldError(EncodingError):
    """A response was decoded but lacks required fields (strict parsing)."""

    def __init__(self, record: str, fields: list[str]) -> None:
        super().__init__(
            f"{record} response is missing required fields: {', '.join(fields)}",
            details={"record": record, "fields": fields},
        )
        self.record = record
        self.fields = fields


class BadAuthResponse(TwiAuthError):
    """The server answered with a non-success HTTP status."""

    def __init__(self, raw_body: str, *, status_code: int | None = None) -> None:
        super().__init__(
            f"Authorization server returned status {status_code}",
            error_type=ErrorType.BAD_RESPONSE,
            details={"status_code": status_code},
        )
        self.raw_body = raw_body
        self.status_code = status_code


# ============================================================================
# OAuth Sequence Errors
# ============================================================================


class OAuthSequenceError(TwiAuthError):
    """Base error for failures attributable to one step of the sequence."""

    default_message = "OAuth sequence step failed"
    step_error_type: ErrorType = ErrorType.INTERNAL

    def __init__(
        self,
        message: str | None = None,
        *,
        cause: BaseException | None = None,
    ) -> None:
        text = message or self.default_message
        if cause is not None and message is None:
            text = f"{text}: {cause}"
        super().__init__(text, error_type=self.step_error_type)
        self.cause = cause


class InitializationFailure(OAuthSequenceError):
    """Transport-level failure during the request-token step."""

    default_message = "Request token step failed"
    step_error_type = ErrorType.INITIALIZATION


class AuthenticatingFailure(OAuthSequenceError):
    """Interactive authorization failed, was cancelled, or ran out of sequence."""

    default_message = "User authorization step failed"
    step_error_type = ErrorType.AUTHENTICATING


class AccessTokenFailure(OAuthSequenceError):
    """The access token exchange failed or ran out of sequence."""

    default_message = "Access token exchange failed"
    step_error_type = ErrorType.ACCESS_TOKEN


class SequenceInProgressError(TwiAuthError):
    """Another operation is already running on the same session."""

    def __init__(self, operation: str, running: str) -> None:
        super().__init__(
            f"Cannot start '{operation}': '{running}' is already in progress",
            error_type=ErrorType.CONFLICT,
            details={"operation": operation, "running": running},
        )
        self.operation = operation
        self.running = running


class NotAuthorizedError(TwiAuthError):
    """An access token is required but the session is not authorized."""

    def __init__(self, message: str = "Session is not authorized") -> None:
        super().__init__(message, error_type=ErrorType.NOT_AUTHORIZED)


class UnsignedHeaderError(TwiAuthError):
    """An Authorization header was rendered before it was signed."""

    def __init__(
        self, message: str = "Needed signature for header to be authorized"
    ) -> None:
        super().__init__(message, error_type=ErrorType.INVALID_STATE)


# ============================================================================
# Interactive Session Errors
# ============================================================================


class InteractiveSessionError(TwiAuthError):
    """The interactive session could not complete."""

    def __init__(self, message: str = "Interactive session failed") -> None:
        super().__init__(message, error_type=ErrorType.AUTHENTICATING)


class UserCancelledError(InteractiveSessionError):
    """The user cancelled the interactive session."""

    def __init__(self, message: str = "User cancelled the authorization") -> None:
        super().__init__(message)


# ============================================================================
# Storage & Configuration Errors
# ============================================================================


class CredentialsStorageError(TwiAuthError):
    """Error occurred during credentials storage operations."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, error_type=ErrorType.STORAGE, details=details)


class ConfigurationError(TwiAuthError):
    """Raised when configuration loading or validation fails."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, error_type=ErrorType.CONFIGURATION, details=details)


__all__ = [
    # Enums
    "ErrorType",
    # Base
    "TwiAuthError",
    # HTTP & Network
    "HTTPError",
    "HTTPTimeoutError",
    "HTTPConnectionError",
    # Decoding
    "EncodingError",
    "MissingFieldError",
    "BadAuthResponse",
    # Sequence
    "OAuthSequenceError",
    "InitializationFailure",
    "AuthenticatingFailure",
    "AccessTokenFailure",
    "SequenceInProgressError",
    "NotAuthorizedError",
    "UnsignedHeaderError",
    # Interactive
    "InteractiveSessionError",
    "UserCancelledError",
    # Storage & configuration
    "CredentialsStorageError",
    "ConfigurationError",
]
