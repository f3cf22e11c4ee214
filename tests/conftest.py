"""Shared test fixtures for khipu_docs.

Provides a small in-memory OpenAPI document exercising every navigation
edge case (duplicate operationIds, path-level parameters, self-referencing
and dangling ``$ref`` pointers, escaped pointer segments), plus isolated
config environments, output state management, and a CLI runner. These
fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from khipu_docs.navigator import SpecNavigator
from khipu_docs.output import OutputFormat, OutputManager, reset_output, set_output
from khipu_docs.spec import SpecStore


REFUND_DESCRIPTION = (
    "Refund a payment fully or partially. Only available for merchants "
    "collecting into a Khipu account and before the funds are settled."
)

LONG_DESCRIPTION = "Lists payments created by the merchant. " * 6


SAMPLE_DOCUMENT: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {
        "title": "Test Payments API",
        "version": "1.2",
        "description": "Payments used in tests.",
    },
    "servers": [{"url": "https://sandbox.example.com"}],
    "paths": {
        "/v3/payments": {
            "post": {
                "operationId": "postPayment",
                "summary": "Create a payment",
                "description": "Create a new payment for the payer.",
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/payment-post"}
                        }
                    }
                },
                "responses": {
                    "200": {
                        "description": "Created",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/success"}
                            }
                        },
                    }
                },
            },
            "get": {
                "operationId": "listPayments",
                "summary": "List payments",
                "description": LONG_DESCRIPTION,
                "responses": {"200": {"description": "OK"}},
            },
        },
        "/v3/payments/{id}": {
            "parameters": [{"$ref": "#/components/parameters/PaymentId"}],
            "get": {
                "operationId": "getPaymentById",
                "summary": "Get a payment",
                "description": "Returns the payment status.",
                "parameters": [{"$ref": "#/components/parameters/PaymentId"}],
                "responses": {"200": {"description": "OK"}},
            },
            "delete": {
                "operationId": "deletePaymentById",
                "summary": "Delete a payment",
                "responses": {"200": {"description": "Deleted"}},
            },
        },
        "/v3/payments/{id}/refunds": {
            "post": {
                "operationId": "postPaymentRefundsById",
                "summary": "Refund a payment",
                "description": REFUND_DESCRIPTION,
                "responses": {"200": {"description": "OK"}},
            },
        },
        "/v3/banks": {
            "x-internal": True,
            "get": {
                "operationId": "getBanks",
                "summary": "List banks",
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/bank"}
                            }
                        },
                    }
                },
            },
        },
        "/v3/legacy": {
            "get": {
                "operationId": "postPayment",
                "summary": "Shadowed duplicate operationId",
                "responses": {"200": {"description": "OK"}},
            },
        },
    },
    "components": {
        "securitySchemes": {
            "api_key": {"type": "apiKey", "name": "x-api-key", "in": "header"},
        },
        "parameters": {
            "PaymentId": {
                "name": "id",
                "in": "path",
                "required": True,
                "schema": {"type": "string"},
            },
        },
        "schemas": {
            "payment-post": {
                "type": "object",
                "required": ["subject", "currency", "amount"],
                "properties": {
                    "subject": {"type": "string", "maxLength": 255},
                    "currency": {"type": "string"},
                    "amount": {"type": "number"},
                    "bank": {"$ref": "#/components/schemas/bank"},
                },
            },
            "bank": {
                "type": "object",
                "properties": {
                    "bank_id": {"type": "string"},
                    "name": {"type": "string"},
                },
            },
            "success": {
                "type": "object",
                "properties": {"message": {"type": "string"}},
            },
            "node": {
                "type": "object",
                "properties": {
                    "value": {"type": "string"},
                    "child": {"$ref": "#/components/schemas/node"},
                },
            },
            "ping": {
                "type": "object",
                "properties": {"pong": {"$ref": "#/components/schemas/pong"}},
            },
            "pong": {
                "type": "object",
                "properties": {"ping": {"$ref": "#/components/schemas/ping"}},
            },
            "dangling": {
                "type": "object",
                "properties": {
                    "missing": {"$ref": "#/components/schemas/does-not-exist"},
                    "kept": {"type": "integer"},
                },
            },
            "a/b~c": {"type": "string", "format": "escaped"},
            "escaped": {"$ref": "#/components/schemas/a~1b~0c"},
        },
    },
}


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When CliRunner redirects those streams the cached
    references go stale once the test finishes.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_document() -> dict[str, Any]:
    """A fresh deep copy of the sample OpenAPI document."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def spec_file(tmp_path: Path, sample_document: dict[str, Any]) -> Path:
    """The sample document written to a JSON file."""
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(sample_document), encoding="utf-8")
    return path


@pytest.fixture
def store(sample_document: dict[str, Any]) -> SpecStore:
    """A SpecStore already holding the sample document."""
    return SpecStore.from_document(sample_document)


@pytest.fixture
def navigator(store: SpecStore) -> SpecNavigator:
    """A SpecNavigator over the sample document with default settings."""
    return SpecNavigator(store)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path,
    clears all KHIPU_* environment variables and changes the working
    directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("khipu_docs.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["KHIPU_API_KEY", "KHIPU_DOCS_SPEC", "KHIPU_BASE_URL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
