"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~khipu_docs.exceptions.KhipuDocsError` subclass.
Agents driving the CLI can inspect the exit code to tell a bad spec source
from a rejected API key without parsing stderr.

Example::

    $ khipu-docs --spec missing.json docs overview
    $ echo $?
    7   # EXIT_SPEC_LOAD_ERROR -- the document could not be loaded
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""The Khipu API rejected the API key, or no key is configured."""

EXIT_NOT_FOUND = 4
"""The remote resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The Khipu API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_SPEC_LOAD_ERROR = 7
"""The API description could not be loaded or is not an OpenAPI 3.x document."""

EXIT_REQUEST_ERROR = 8
"""The Khipu API rejected the request with a 4xx status other than 401/403/404."""
