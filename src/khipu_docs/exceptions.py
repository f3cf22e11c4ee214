"""Exception hierarchy for khipu-docs.

All exceptions inherit from :class:`KhipuDocsError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`khipu_docs.exit_codes`.
The top-level error handler in :func:`khipu_docs.app.main` catches
``KhipuDocsError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Lookup misses inside the navigation engine (unknown operationId, path or
schema name) are *not* exceptions: they are returned as descriptive payloads
so the caller can correct itself. Dangling or cyclic ``$ref`` pointers are
not exceptions either; they resolve to ``None`` in place.

Subclass hierarchy::

    KhipuDocsError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- SpecLoadError       (exit 7)
    +-- ApiRequestError     (exit 8)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from khipu_docs.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_REQUEST_ERROR,
    EXIT_SERVER_ERROR,
    EXIT_SPEC_LOAD_ERROR,
)


class KhipuDocsError(Exception):
    """Base exception for all khipu-docs errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`khipu_docs.exit_codes`. The entry point catches
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


class InvalidUsageError(KhipuDocsError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(KhipuDocsError):
    """Raised when no API key is available or the Khipu API rejects it (401/403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(KhipuDocsError):
    """Raised when the Khipu API returns HTTP 404 (e.g. unknown payment id)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(KhipuDocsError):
    """Raised when the Khipu API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(KhipuDocsError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SpecLoadError(KhipuDocsError):
    """Raised when the API description is missing, unreadable, or not OpenAPI 3.x."""

    exit_code = EXIT_SPEC_LOAD_ERROR


class ApiRequestError(KhipuDocsError):
    """Raised when the Khipu API rejects a request with a 4xx status (validation, conflict)."""

    exit_code = EXIT_REQUEST_ERROR


class ConfigError(KhipuDocsError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
