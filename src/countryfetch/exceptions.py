"""Exception hierarchy for countryfetch.

All exceptions inherit from :class:`CountryfetchError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`countryfetch.exit_codes`. The top-level error handler in
:func:`countryfetch.app.main` catches ``CountryfetchError`` and exits with
the appropriate code, while unexpected exceptions produce a crash log and
exit with :data:`EXIT_GENERIC_FAILURE`.

Besides the message, every subclass keeps the structured context that
caused it (the query, the cache key, the HTTP status) so callers can
branch on attributes instead of parsing text.

Subclass hierarchy::

    CountryfetchError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- NotFoundError       (exit 4)
    +-- FetchError          (exit 6)
    +-- ParseError          (exit 7)
    +-- CorruptCacheError   (exit 8)
    +-- EmptyDatasetError   (exit 9)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from typing import Optional

from countryfetch.exit_codes import (
    EXIT_CORRUPT_CACHE,
    EXIT_EMPTY_DATASET,
    EXIT_FETCH_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_PARSE_ERROR,
)


class CountryfetchError(Exception):
    """Base exception for all countryfetch errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`countryfetch.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CountryfetchError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(CountryfetchError):
    """Raised when a name or capital query matches no country.

    Args:
        query: The query exactly as the caller supplied it.
        kind: What was searched for, ``"name"`` or ``"capital"``.
    """

    exit_code = EXIT_NOT_FOUND

    def __init__(self, query: str, kind: str = "name") -> None:
        if kind == "capital":
            message = f"Could not find the country of capital: {query}"
        else:
            message = f"Cannot find country named {query}"
        super().__init__(message)
        self.query = query
        self.kind = kind


class FetchError(CountryfetchError):
    """Raised on network failures or non-2xx responses from a remote host.

    Args:
        message: Human-readable description.
        url: The URL that was requested.
        status_code: HTTP status, or ``None`` for network-level failures.
        body: The response body verbatim, kept for diagnostics.
    """

    exit_code = EXIT_FETCH_ERROR

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.body = body


class ParseError(CountryfetchError):
    """Raised when a remote or cached payload does not match the expected shape.

    Args:
        message: Human-readable description.
        source: Where the payload came from (a URL or a cache key).
    """

    exit_code = EXIT_PARSE_ERROR

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.source = source


class CorruptCacheError(CountryfetchError):
    """Raised when a cache entry is unreadable, or missing while the cache is fresh."""

    exit_code = EXIT_CORRUPT_CACHE

    def __init__(self, message: str, key: str) -> None:
        super().__init__(message)
        self.key = key


class EmptyDatasetError(CountryfetchError):
    """Raised when an operation needs at least one country and there are none."""

    exit_code = EXIT_EMPTY_DATASET


class ConfigError(CountryfetchError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
