"""The five query operations exposed to callers.

:class:`SpecNavigator` composes the loaded :class:`~khipu_docs.spec.SpecStore`
with the endpoint and schema indices, the ``$ref`` resolver, and the search
engine. It adds no logic of its own beyond shaping inputs and outputs:

==================  =====================================================
Operation           Method
==================  =====================================================
get-overview        :meth:`SpecNavigator.get_overview`
list-endpoints      :meth:`SpecNavigator.list_endpoints`
get-endpoint        :meth:`SpecNavigator.get_endpoint`
get-schema          :meth:`SpecNavigator.get_schema`
search-docs         :meth:`SpecNavigator.search_docs`
==================  =====================================================

Every operation is a side-effect-free read of the immutable document. Lookup
misses return :class:`~khipu_docs.models.EndpointNotFound` or
:class:`~khipu_docs.models.SchemaNotFound` payloads instead of raising.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from khipu_docs.models import (
    ApiSettings,
    AuthenticationInfo,
    EndpointListing,
    EndpointNotFound,
    Overview,
    SchemaNotFound,
    SearchResult,
)
from khipu_docs.spec import EndpointIndex, SchemaIndex, SearchEngine, SpecStore, resolve_refs

DESCRIPTION_LIMIT = 150
"""Maximum description length in :meth:`SpecNavigator.list_endpoints`."""


class SpecNavigator:
    """Query facade over a loaded OpenAPI document.

    Args:
        store: A :class:`~khipu_docs.spec.SpecStore` that has already been
            loaded.
        settings: API settings used for the overview's base URL fallback
            and authentication header. Defaults to :class:`ApiSettings`.

    Example::

        store = SpecStore()
        store.load()
        nav = SpecNavigator(store)
        nav.get_endpoint(path="/v3/payments", method="post")
    """

    def __init__(self, store: SpecStore, settings: Optional[ApiSettings] = None) -> None:
        self._document = store.get()
        self._settings = settings or ApiSettings()
        self._endpoints = EndpointIndex(self._document)
        self._schemas = SchemaIndex(self._document)
        self._search = SearchEngine(self._endpoints, self._schemas)

    @property
    def endpoints(self) -> EndpointIndex:
        return self._endpoints

    @property
    def schemas(self) -> SchemaIndex:
        return self._schemas

    def get_overview(self) -> Overview:
        """Describe the API: title, version, base URL, authentication, endpoints."""
        info = self._document.get("info")
        info = info if isinstance(info, dict) else {}

        components = self._document.get("components")
        schemes = components.get("securitySchemes") if isinstance(components, dict) else None
        if isinstance(schemes, dict):
            schemes = resolve_refs(schemes, self._document)
        else:
            schemes = None

        header = self._settings.auth_header
        return Overview(
            title=_text(info.get("title")),
            version=_text(info.get("version")),
            description=_text(info.get("description")),
            base_url=self._base_url(),
            authentication=AuthenticationInfo(
                header=header,
                description=f"Pass your Khipu API key in the {header} request header",
                schemes=schemes,
            ),
            endpoints=self._endpoints.records(),
        )

    def list_endpoints(self) -> list[EndpointListing]:
        """List every endpoint with a description truncated to 150 characters."""
        listings: list[EndpointListing] = []
        for entry, record in zip(self._endpoints, self._endpoints.records()):
            listings.append(
                EndpointListing(
                    method=record.method,
                    path=record.path,
                    operation_id=record.operation_id,
                    summary=record.summary,
                    description=truncate(entry.operation.get("description")),
                )
            )
        return listings

    def get_endpoint(
        self,
        operation_id: Optional[str] = None,
        path: Optional[str] = None,
        method: Optional[str] = None,
    ) -> Union[dict[str, Any], EndpointNotFound]:
        """Return one operation with every ``$ref`` resolved.

        Select by ``operation_id`` or by ``path`` + ``method``; see
        :meth:`~khipu_docs.spec.EndpointIndex.find` for precedence.

        Returns:
            ``{"method": ..., "path": ..., **operation}`` on success,
            otherwise an :class:`EndpointNotFound` listing every
            ``"METHOD path"`` in the document.
        """
        match = self._endpoints.find(operation_id=operation_id, path=path, method=method)
        if match is None:
            return EndpointNotFound(
                operation_id=operation_id,
                path=path,
                method=method,
                available=self._endpoints.available(),
            )

        payload: dict[str, Any] = {"method": match.method, "path": match.path}
        resolved = resolve_refs(match.operation, self._document)
        if isinstance(resolved, dict):
            for key, value in resolved.items():
                payload.setdefault(key, value)
        return payload

    def get_schema(self, name: str) -> Union[Any, SchemaNotFound]:
        """Return the named schema with every ``$ref`` resolved.

        Returns:
            The resolved schema, or a :class:`SchemaNotFound` listing every
            schema name in the document.
        """
        if name not in self._schemas:
            return SchemaNotFound(
                message=f"Schema '{name}' not found.",
                name=name,
                available=self._schemas.names(),
            )
        return resolve_refs(self._schemas.get(name), self._document)

    def search_docs(self, query: str) -> SearchResult:
        """Search endpoints and schemas for *query* (case-insensitive substring)."""
        return self._search.search(query)

    def _base_url(self) -> Optional[str]:
        servers = self._document.get("servers")
        if isinstance(servers, list) and servers:
            first = servers[0]
            if isinstance(first, dict) and isinstance(first.get("url"), str):
                return first["url"]
        return self._settings.base_url


def truncate(description: Any, limit: int = DESCRIPTION_LIMIT) -> Optional[str]:
    """Clip *description* to *limit* characters, appending ``…`` when clipped."""
    if not isinstance(description, str):
        return None
    if len(description) > limit:
        return description[:limit] + "…"
    return description


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)
