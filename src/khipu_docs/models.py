"""Canonical Pydantic models shared across all khipu_docs modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`ApiSettings`, and :class:`GlobalConfig`.

**Query result models** -- produced by the navigation engine and printed by
the ``docs`` commands:
    :class:`EndpointRecord`, :class:`EndpointListing`,
    :class:`AuthenticationInfo`, :class:`Overview`, :class:`SearchResult`,
    :class:`EndpointNotFound`, and :class:`SchemaNotFound`.

**Payment API models** -- request bodies for the outbound ``api`` commands:
    :class:`PaymentRequest`.

Result models use camelCase aliases (``operationId``, ``baseUrl``,
``matchingEndpoints``) because their JSON form is what agents read; Python
code uses the snake_case attribute names. Call :meth:`ResultModel.to_payload`
to obtain the JSON-ready dict.
"""

from __future__ import annotations

import uuid
from typing import Any, Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, Field


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class ApiSettings(BaseModel):
    """Connection settings for the Khipu payment API.

    Used by the overview (base URL fallback and auth header name) and by
    :class:`~khipu_docs.client.ApiClient` for outbound requests.
    """

    base_url: str = Field(
        default="https://payment-api.khipu.com",
        description="Base URL of the Khipu payment API",
    )
    auth_header: str = Field(
        default="x-api-key", description="Header carrying the API key"
    )
    api_key_source: str = Field(
        default="env:KHIPU_API_KEY",
        description="Credential source: env:VAR or file:/path",
    )
    timeout: int = Field(default=30, description="Request timeout in seconds")
    max_retries: int = Field(default=3, description="Max retry attempts")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/khipu-docs/config.json``.

    Loaded and saved by :func:`~khipu_docs.config.load_global_config` and
    :func:`~khipu_docs.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~khipu_docs.config.resolve_config`.
    """

    spec: Optional[str] = Field(
        default=None,
        description="URL or file path of the OpenAPI document (bundled when unset)",
    )
    api: ApiSettings = Field(default_factory=ApiSettings)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Query results ---


class ResultModel(BaseModel):
    """Base for result payloads with camelCase JSON aliases."""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready dict, using aliases and dropping ``None`` fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EndpointRecord(ResultModel):
    """One flattened ``(method, path, operationId, summary)`` entry.

    Derived from ``paths`` in declaration order. ``method`` is upper-case.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    method: str
    path: str
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    summary: Optional[str] = None


class EndpointListing(EndpointRecord):
    """An :class:`EndpointRecord` plus a description truncated for listings."""

    description: Optional[str] = None


class AuthenticationInfo(ResultModel):
    """How to authenticate against the API, as shown in the overview."""

    type: str = "API Key"
    header: str
    description: str
    schemes: Optional[dict[str, Any]] = None


class Overview(ResultModel):
    """Result of the ``get-overview`` operation."""

    title: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    base_url: Optional[str] = Field(default=None, alias="baseUrl")
    authentication: AuthenticationInfo
    endpoints: list[EndpointRecord] = Field(default_factory=list)


class SearchResult(ResultModel):
    """Result of the ``search-docs`` operation.

    Lists follow document declaration order; there is no relevance ranking.
    """

    query: str
    matching_endpoints: list[EndpointRecord] = Field(
        default_factory=list, alias="matchingEndpoints"
    )
    matching_schemas: list[str] = Field(default_factory=list, alias="matchingSchemas")
    context_snippets: list[str] = Field(default_factory=list, alias="contextSnippets")
    total_matches: int = Field(default=0, alias="totalMatches")


class EndpointNotFound(ResultModel):
    """Payload returned when ``get-endpoint`` matches nothing.

    Echoes the selectors that were supplied and lists every available
    ``"METHOD path"`` so the caller can retry without another round trip.
    """

    message: str = "Endpoint not found."
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    path: Optional[str] = None
    method: Optional[str] = None
    available: list[str] = Field(default_factory=list)


class SchemaNotFound(ResultModel):
    """Payload returned when ``get-schema`` is asked for an unknown name."""

    message: str
    name: str
    available: list[str] = Field(default_factory=list)


# --- Payment API ---


class PaymentRequest(BaseModel):
    """Body of ``POST /v3/payments``.

    Only ``subject``, ``currency`` and ``amount`` are required; unset optional
    fields are omitted from the request body.
    """

    subject: str = Field(max_length=255, description="Payment subject shown to the payer")
    currency: str = Field(
        min_length=3, max_length=3, description="Currency in ISO-4217 format, e.g. 'CLP'"
    )
    amount: float = Field(gt=0, description="Payment amount")
    transaction_id: Optional[str] = Field(default=None, max_length=255)
    custom: Optional[str] = Field(default=None, max_length=4096)
    body: Optional[str] = Field(default=None, max_length=4096)
    bank_id: Optional[str] = Field(default=None, max_length=255)
    return_url: Optional[AnyUrl] = None
    cancel_url: Optional[AnyUrl] = None
    notify_url: Optional[AnyUrl] = None
    notify_api_version: Optional[str] = Field(default=None, max_length=255)
    expires_date: Optional[str] = Field(default=None, description="ISO-8601 datetime")
    send_email: Optional[bool] = None
    payer_name: Optional[str] = Field(default=None, max_length=255)
    payer_email: Optional[str] = Field(default=None, max_length=255)
    send_reminders: Optional[bool] = None
    responsible_user_email: Optional[str] = Field(default=None, max_length=255)
    fixed_payer_personal_identifier: Optional[str] = Field(default=None, max_length=255)
    integrator_fee: Optional[float] = None
    collect_account_uuid: Optional[uuid.UUID] = None
    confirm_timeout_date: Optional[str] = None
    mandatory_payment_method: Optional[str] = None
    picture_url: Optional[AnyUrl] = None

    def to_body(self) -> dict[str, Any]:
        """Return the JSON request body with unset fields removed."""
        return self.model_dump(mode="json", exclude_none=True)
