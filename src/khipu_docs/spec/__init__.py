"""OpenAPI document navigation engine -- load, index, resolve, and search.

This sub-package holds everything that reads the OpenAPI document. It has
no knowledge of the command line or of the outbound payment client.

Typical usage::

    from khipu_docs.spec import SpecStore, EndpointIndex, resolve_refs

    store = SpecStore()
    document = store.load("openapi.yaml")
    match = EndpointIndex(document).find(operation_id="postPayment")
    resolved = resolve_refs(match.operation, document)

Sub-modules:

* :mod:`~khipu_docs.spec.loader` -- I/O layer (package data, URL, file,
  stdin), format detection, OpenAPI version validation, and
  :class:`~khipu_docs.spec.loader.SpecStore`.
* :mod:`~khipu_docs.spec.resolver` -- Recursive ``$ref`` inlining with
  cycle and depth guards.
* :mod:`~khipu_docs.spec.index` -- Ordered endpoint index and named
  schema index.
* :mod:`~khipu_docs.spec.search` -- Substring search and context snippets.
"""

from khipu_docs.spec.index import EndpointIndex, EndpointMatch, SchemaIndex
from khipu_docs.spec.loader import SpecStore, load_document, validate_openapi_version
from khipu_docs.spec.resolver import resolve_refs
from khipu_docs.spec.search import SearchEngine

__all__ = [
    "EndpointIndex",
    "EndpointMatch",
    "SchemaIndex",
    "SearchEngine",
    "SpecStore",
    "load_document",
    "resolve_refs",
    "validate_openapi_version",
]
