"""Docs commands -- query the API description.

Provides the ``khipu-docs docs`` sub-command group with the five read-only
navigation operations: ``overview``, ``endpoints``, ``endpoint``, ``schema``
and ``search``. The group callback loads the document once (from the
resolved spec source) and shares a :class:`~khipu_docs.navigator.SpecNavigator`
with every sub-command through the Typer context.

Lookup misses are printed as regular results (exit code 0) so that an agent
can read the list of alternatives and retry.
"""

from __future__ import annotations

from typing import Optional

import typer

from khipu_docs.exceptions import InvalidUsageError
from khipu_docs.models import EndpointNotFound, SchemaNotFound
from khipu_docs.navigator import SpecNavigator
from khipu_docs.output import debug, format_response, suggest


docs_app = typer.Typer(no_args_is_help=True)


@docs_app.callback()
def docs_callback(ctx: typer.Context) -> None:
    """Load the API description before any docs command runs.

    Raises:
        SpecLoadError: If the document cannot be loaded; the entry point
            turns this into exit code 7.
    """
    from khipu_docs.config import resolve_config
    from khipu_docs.spec import SpecStore

    ctx.ensure_object(dict)
    config = ctx.obj.get("config") or resolve_config()

    store = SpecStore()
    debug(f"Loading spec from {config.spec or 'package data'}")
    store.load(config.spec)
    ctx.obj["navigator"] = SpecNavigator(store, config.api)


def _navigator(ctx: typer.Context) -> SpecNavigator:
    return ctx.obj["navigator"]


@docs_app.command("overview")
def docs_overview(ctx: typer.Context) -> None:
    """Show title, version, base URL, authentication, and all endpoints.

    Example::

        khipu-docs docs overview --json
    """
    format_response(_navigator(ctx).get_overview())


@docs_app.command("endpoints")
def docs_endpoints(ctx: typer.Context) -> None:
    """List every endpoint with method, path, operationId, summary and a short description."""
    format_response(_navigator(ctx).list_endpoints())


@docs_app.command("endpoint")
def docs_endpoint(
    ctx: typer.Context,
    operation_id: Optional[str] = typer.Option(
        None, "--operation-id", "-o", help="operationId, e.g. 'postPayment'."
    ),
    path: Optional[str] = typer.Option(
        None, "--path", help="Route template, e.g. '/v3/payments'."
    ),
    method: Optional[str] = typer.Option(
        None, "--method", "-m", help="HTTP method, e.g. 'post'."
    ),
) -> None:
    """Show one endpoint with parameters, request body and responses fully resolved.

    Select the endpoint with ``--operation-id`` or with ``--path`` and
    ``--method`` together.

    Example::

        khipu-docs docs endpoint --operation-id postPayment
        khipu-docs docs endpoint --path /v3/payments --method post
    """
    if not operation_id and not (path and method):
        raise InvalidUsageError(
            "Provide --operation-id, or both --path and --method"
        )

    result = _navigator(ctx).get_endpoint(operation_id=operation_id, path=path, method=method)
    format_response(result)
    if isinstance(result, EndpointNotFound):
        suggest("Run: khipu-docs docs endpoints")


@docs_app.command("schema")
def docs_schema(
    ctx: typer.Context,
    name: str = typer.Argument(help="Schema name, e.g. 'payment-post-payment'."),
) -> None:
    """Show a named schema with every $ref resolved."""
    result = _navigator(ctx).get_schema(name)
    format_response(result)
    if isinstance(result, SchemaNotFound):
        suggest("Pick one of the schema names listed under 'available'")


@docs_app.command("search")
def docs_search(
    ctx: typer.Context,
    query: str = typer.Argument(help="Text to search for in the API description."),
) -> None:
    """Search endpoints and schemas for a keyword or phrase (case-insensitive)."""
    format_response(_navigator(ctx).search_docs(query))
