"""HTTP client for the Khipu payment API.

Only the ``api`` command group uses :class:`ApiClient`; the documentation
commands never open a connection. Every request carries the API key in the
configured header. 5xx answers and network failures are retried with
exponential backoff, and error statuses surface as
:class:`~khipu_docs.exceptions.KhipuDocsError` subclasses.
"""

from __future__ import annotations

import json
import time
from typing import Any, Optional

import httpx

from khipu_docs.client.response import extract_response_data
from khipu_docs.exceptions import (
    ApiRequestError,
    AuthError,
    ConnectionError_,
    KhipuDocsError,
    NotFoundError,
    ServerError,
)
from khipu_docs.models import ApiSettings
from khipu_docs.output import get_output

_TRANSIENT = (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError)

_STATUS_ERRORS: dict[int, type[KhipuDocsError]] = {
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
}

DRY_RUN_RESULT = {"dry_run": True, "message": "Request was not sent"}


class ApiClient:
    """Context-managed wrapper around :class:`httpx.Client`.

    Args:
        settings: Connection settings from the ``api`` config section.
        api_key: Sent in ``settings.auth_header``. Required in dry-run mode
            as well.
        dry_run: Describe each request on stderr instead of sending it.
        transport: Custom httpx transport, e.g. :class:`httpx.MockTransport`.

    Raises:
        AuthError: *api_key* is empty.

    Example::

        with ApiClient(settings, api_key) as client:
            banks = client.invoke("/v3/banks", "GET")
    """

    def __init__(
        self,
        settings: ApiSettings,
        api_key: Optional[str],
        dry_run: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not api_key:
            raise AuthError("KHIPU_API_KEY is not set; API commands are unavailable")
        self._settings = settings
        self._api_key = api_key
        self._dry_run = dry_run
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> ApiClient:
        settings = self._settings
        self._client = httpx.Client(
            base_url=settings.base_url,
            timeout=settings.timeout,
            verify=settings.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None

    def invoke(
        self,
        route: str,
        method: str,
        payload: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Perform ``method route`` and return the decoded body.

        *payload* becomes the JSON body when given; *params* the query
        string. The result is parsed JSON, raw text for non-JSON bodies, or
        ``None`` when the body is empty.

        Raises:
            AuthError: 401 or 403.
            NotFoundError: 404.
            ApiRequestError: Any other 4xx.
            ServerError: 5xx once retries are used up.
            ConnectionError_: Network failure once retries are used up.
        """
        request = self._build_request(method.upper(), route, payload, params)
        if self._dry_run:
            self._describe(request, route, payload)
            return dict(DRY_RUN_RESULT)

        response = self._send(request)
        body = extract_response_data(response)
        _raise_for_status(response.status_code, body)
        return body

    def _build_request(
        self,
        method: str,
        route: str,
        payload: Optional[dict[str, Any]],
        params: Optional[dict[str, Any]],
    ) -> httpx.Request:
        if self._client is None:
            raise RuntimeError("ApiClient must be used as a context manager")
        return self._client.build_request(
            method,
            route,
            headers={
                self._settings.auth_header: self._api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            params=params or None,
            content=json.dumps(payload) if payload is not None else None,
        )

    def _send(self, request: httpx.Request) -> httpx.Response:
        """Send *request*, retrying transient failures with 1 s, 2 s, 4 s, ... pauses."""
        retries = self._settings.max_retries
        attempt = 0
        while True:
            try:
                response = self._client.send(request)
            except _TRANSIENT as exc:
                if attempt >= retries:
                    raise ConnectionError_(
                        f"Connection failed after {attempt + 1} attempts: {exc}"
                    ) from exc
                self._pause(attempt, f"Connection error: {exc}")
            else:
                if response.status_code < 500 or attempt >= retries:
                    return response
                self._pause(attempt, f"Server error {response.status_code}")
            attempt += 1

    def _pause(self, attempt: int, reason: str) -> None:
        delay = 2 ** attempt
        get_output().debug(
            f"{reason}, retrying in {delay}s (attempt {attempt + 1}/{self._settings.max_retries})"
        )
        time.sleep(delay)

    def _describe(
        self, request: httpx.Request, route: str, payload: Optional[dict[str, Any]]
    ) -> None:
        """Print what would be sent, with the API key masked."""
        output = get_output()
        output.info(f"[dry-run] {request.method} {self._settings.base_url}{route}")
        secret_header = self._settings.auth_header.lower()
        for name, value in request.headers.items():
            if name in ("content-type", "accept", secret_header):
                shown = _mask(value) if name == secret_header else value
                output.info(f"  Header: {name}: {shown}")
        for name, value in request.url.params.multi_items():
            output.info(f"  Param: {name}={value}")
        if payload is not None:
            output.info(f"  Body (JSON): {json.dumps(payload, indent=2)}")


def _raise_for_status(status: int, body: Any) -> None:
    if status < 400:
        return
    detail = json.dumps(body, ensure_ascii=False) if body is not None else ""
    message = f"Khipu API error {status}" + (f": {detail}" if detail else "")
    if status >= 500:
        raise ServerError(message)
    raise _STATUS_ERRORS.get(status, ApiRequestError)(message)


def _mask(secret: str) -> str:
    """Hide all but the last four characters."""
    if len(secret) <= 4:
        return "****"
    return "****" + secret[-4:]
