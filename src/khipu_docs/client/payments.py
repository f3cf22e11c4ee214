"""Typed wrappers around the Khipu v3 payment endpoints.

Each method of :class:`PaymentsApi` maps to exactly one route and delegates
to :meth:`~khipu_docs.client.ApiClient.invoke`. Identifiers taken from the
caller are URL-encoded before being placed into the route.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

from khipu_docs.client.api_client import ApiClient
from khipu_docs.exceptions import InvalidUsageError
from khipu_docs.models import PaymentRequest


def _segment(value: str) -> str:
    if not value:
        raise InvalidUsageError("Payment ID must not be empty")
    return quote(value, safe="")


class PaymentsApi:
    """Khipu payment operations.

    Args:
        client: An open :class:`~khipu_docs.client.ApiClient`.
    """

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def get_banks(self) -> Any:
        """List the banks available for payments (ids, names, minimum amounts, logos)."""
        return self._client.invoke("/v3/banks", "GET")

    def create_payment(self, request: PaymentRequest) -> Any:
        """Create a payment; returns ``payment_id`` and the payment URLs."""
        return self._client.invoke("/v3/payments", "POST", request.to_body())

    def get_payment(self, payment_id: str) -> Any:
        """Return full information and current status of a payment."""
        return self._client.invoke(f"/v3/payments/{_segment(payment_id)}", "GET")

    def delete_payment(self, payment_id: str) -> Any:
        """Delete a pending payment. Only ``pending`` payments can be deleted."""
        return self._client.invoke(f"/v3/payments/{_segment(payment_id)}", "DELETE")

    def confirm_payment(self, payment_id: str) -> Any:
        """Confirm a payment for settlement on the next business day."""
        return self._client.invoke(f"/v3/payments/{_segment(payment_id)}/confirm", "POST")

    def refund_payment(self, payment_id: str, amount: Optional[float] = None) -> Any:
        """Refund a payment fully, or partially when *amount* is given."""
        if amount is not None and amount <= 0:
            raise InvalidUsageError("Refund amount must be positive")
        body: dict[str, Any] = {}
        if amount is not None:
            body["amount"] = amount
        return self._client.invoke(f"/v3/payments/{_segment(payment_id)}/refunds", "POST", body)

    def predict(self, payer_email: str, bank_id: str, amount: str, currency: str) -> Any:
        """Predict whether a payment will succeed and the maximum transferable amount."""
        params = {
            "payer_email": payer_email,
            "bank_id": bank_id,
            "amount": amount,
            "currency": currency,
        }
        return self._client.invoke("/v3/predict", "GET", params=params)

    def get_payment_methods(self, merchant_id: int) -> Any:
        """List the payment methods available for a merchant account."""
        if merchant_id <= 0:
            raise InvalidUsageError("Merchant ID must be a positive integer")
        return self._client.invoke(f"/v3/merchants/{merchant_id}/paymentMethods", "GET")
