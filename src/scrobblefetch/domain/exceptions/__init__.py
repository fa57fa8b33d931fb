"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, we store message as an attribute so code can inspect it without parsing
    # str(exception). Always raise a specific subclass so callers (CLI, tests) can catch precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ConfigurationError(DomainException):
    """Application misconfiguration.

    Raised when required configuration is missing or invalid, always
    before any network call is made.

    Example:
        raise ConfigurationError("Missing required environment variable: LASTFM_API_KEY")
    """

    pass


class ValidationError(DomainException):
    """Input validation failed.

    Raised when caller input is outside the accepted domain (negative limits,
    incremental update on a kind without timestamps, ...).
    """

    pass


class TransportError(DomainException):
    """Network-level failure (connection refused, timeout, TLS).

    The core never retries; the original httpx exception is chained as __cause__.
    """

    pass


class ApiError(DomainException):
    """Last.fm answered with a structured error envelope.

    Both fields are kept verbatim from the {"error": <int>, "message": <str>} body.
    Not retried automatically - most codes mean an invalid parameter (6, 10, 29 ...).
    """

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"Last.fm API error {code}: {message}")
        self.code = code
        self.api_message = message


class DecodeError(DomainException):
    """Response body or a field did not match the expected schema.

    raw_value carries the offending value (or a body excerpt) for debugging.
    """

    def __init__(self, message: str, raw_value: Any = None) -> None:
        super().__init__(message)
        self.raw_value = raw_value


class StorageError(DomainException):
    """Reading or writing a persisted track file failed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


__all__ = [
    "ApiError",
    "ConfigurationError",
    "DecodeError",
    "DomainException",
    "StorageError",
    "TransportError",
    "ValidationError",
]
