"""khipu-docs -- Navigate the Khipu payment API description from the command line.

This package loads a static OpenAPI 3.x document once and answers structured
queries against it: an overview of the API, the ordered list of endpoints,
a single endpoint or schema with every ``$ref`` pointer inlined, and a
substring search across operations and schemas. Results are printed as JSON
so that automated agents can consume them without reading raw spec files.

Typical workflow::

    khipu-docs docs overview             # title, base URL, auth, endpoints
    khipu-docs docs endpoint --operation-id postPayment
    khipu-docs docs search refund

When a Khipu API key is configured, an ``api`` command group forwards
authenticated requests to the live payment API as well.

Modules:
    app: Typer application factory and CLI entry point.
    navigator: The five public query operations.
    spec: Document loading, ``$ref`` resolution, indices, and search.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and credential resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "1.0.0"
