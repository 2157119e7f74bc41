"""Exception hierarchy for vsports.

All exceptions inherit from :class:`VSportsError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`vsports.exit_codes`.
Library callers catch the specific subclasses; the CLI entry point in
:func:`vsports.app.main` catches ``VSportsError`` and exits with its code.

Subclass hierarchy::

    VSportsError (exit 1)
    +-- ConfigError         (exit 1)
    +-- RequestBuildError   (exit 2)
    +-- DecodeError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- TransportError      (exit 6)
    +-- BodyReadError       (exit 6)
    +-- CacheReadError      (exit 7)
    +-- CacheWriteError     (exit 7)
"""

from vsports.exit_codes import (
    EXIT_CACHE_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class VSportsError(Exception):
    """Base exception for all vsports errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(VSportsError):
    """Raised for configuration problems (missing file, invalid JSON, missing API key)."""

    exit_code = EXIT_GENERIC_FAILURE


class ConnectionError_(VSportsError):
    """Raised when the Redis cache cannot be reached while building a client.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class RequestBuildError(VSportsError):
    """Raised when the outgoing HTTP request cannot be assembled (malformed URL)."""

    exit_code = EXIT_INVALID_USAGE


class TransportError(VSportsError):
    """Raised on network-level failures: timeout, DNS resolution, connection refused."""

    exit_code = EXIT_CONNECTION_ERROR


class BodyReadError(VSportsError):
    """Raised when the response body is interrupted before it is fully read."""

    exit_code = EXIT_CONNECTION_ERROR


class CacheReadError(VSportsError):
    """Raised by the cache store when a read fails.

    The dispatcher treats this exactly like a miss; it never reaches
    callers of the endpoint methods.
    """

    exit_code = EXIT_CACHE_ERROR


class CacheWriteError(VSportsError):
    """Raised when a fetched payload cannot be written to the cache.

    The payload is discarded: the caller receives this error instead of
    the data.
    """

    exit_code = EXIT_CACHE_ERROR


class DecodeError(VSportsError):
    """Raised when a response body does not decode into the expected model."""

    exit_code = EXIT_DECODE_ERROR
