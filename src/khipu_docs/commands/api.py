"""API commands -- call the live Khipu payment API.

Provides the ``khipu-docs api`` sub-command group. It is registered by
:func:`khipu_docs.app.main` only when an API key is available (by default
from ``KHIPU_API_KEY``); without a key the documentation commands keep
working and this group is simply absent.

Every command prints the decoded response body to stdout. HTTP failures
surface as typed exceptions and map to exit codes in the entry point.
``--dry-run`` on the root command prints the request instead of sending it.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional

import typer
from pydantic import ValidationError

from khipu_docs.exceptions import InvalidUsageError
from khipu_docs.models import PaymentRequest
from khipu_docs.output import format_response

if TYPE_CHECKING:
    from khipu_docs.client import PaymentsApi


api_app = typer.Typer(no_args_is_help=True)


@contextmanager
def _payments(ctx: typer.Context) -> Iterator[PaymentsApi]:
    """Open an :class:`ApiClient` for one command and yield a :class:`PaymentsApi`."""
    from khipu_docs.client import ApiClient, PaymentsApi
    from khipu_docs.config import resolve_config, resolve_credential

    obj = ctx.obj or {}
    config = obj.get("config") or resolve_config()
    api_key = resolve_credential(config.api.api_key_source)

    with ApiClient(config.api, api_key, dry_run=obj.get("dry_run", False)) as client:
        yield PaymentsApi(client)


@api_app.command("banks")
def api_banks(ctx: typer.Context) -> None:
    """List banks available for payments (ids, names, minimum amounts, logos)."""
    with _payments(ctx) as payments:
        format_response(payments.get_banks())


@api_app.command("create-payment")
def api_create_payment(
    ctx: typer.Context,
    subject: str = typer.Option(..., help="Payment subject shown to the payer."),
    currency: str = typer.Option(..., help="ISO-4217 currency, e.g. 'CLP'."),
    amount: float = typer.Option(..., help="Payment amount."),
    transaction_id: Optional[str] = typer.Option(None, help="Your internal transaction ID."),
    custom: Optional[str] = typer.Option(None, help="Custom data associated with the payment."),
    body: Optional[str] = typer.Option(None, help="Additional payment details."),
    bank_id: Optional[str] = typer.Option(None, help="Bank ID to pre-select for the payer."),
    return_url: Optional[str] = typer.Option(None, help="Redirect URL after a successful payment."),
    cancel_url: Optional[str] = typer.Option(None, help="Redirect URL if the payer cancels."),
    notify_url: Optional[str] = typer.Option(None, help="Webhook URL for status notifications."),
    notify_api_version: Optional[str] = typer.Option(None, help="Notification API version, e.g. '3.0'."),
    expires_date: Optional[str] = typer.Option(None, help="Expiry datetime in ISO-8601 format."),
    send_email: Optional[bool] = typer.Option(None, help="Send a payment email to the payer."),
    payer_name: Optional[str] = typer.Option(None, help="Name of the payer."),
    payer_email: Optional[str] = typer.Option(None, help="Email of the payer."),
    send_reminders: Optional[bool] = typer.Option(None, help="Send payment reminder emails."),
    responsible_user_email: Optional[str] = typer.Option(None, help="Email of the responsible user."),
    fixed_payer_personal_identifier: Optional[str] = typer.Option(
        None, help="Fixed national ID of the payer."
    ),
    integrator_fee: Optional[float] = typer.Option(None, help="Integrator fee amount."),
    collect_account_uuid: Optional[str] = typer.Option(None, help="UUID of the collection account."),
    confirm_timeout_date: Optional[str] = typer.Option(None, help="Confirmation timeout datetime."),
    mandatory_payment_method: Optional[str] = typer.Option(None, help="Force a payment method."),
    picture_url: Optional[str] = typer.Option(None, help="Image shown on the payment page."),
) -> None:
    """Create a payment and print payment_id and the payment URLs."""
    fields = dict(locals())
    fields.pop("ctx")
    try:
        request = PaymentRequest.model_validate(fields)
    except ValidationError as exc:
        raise InvalidUsageError(f"Invalid payment: {exc}") from exc

    with _payments(ctx) as payments:
        format_response(payments.create_payment(request))


@api_app.command("get-payment")
def api_get_payment(
    ctx: typer.Context,
    payment_id: str = typer.Argument(help="Payment ID returned by create-payment."),
) -> None:
    """Show full information and current status of a payment."""
    with _payments(ctx) as payments:
        format_response(payments.get_payment(payment_id))


@api_app.command("delete-payment")
def api_delete_payment(
    ctx: typer.Context,
    payment_id: str = typer.Argument(help="Payment ID to delete."),
) -> None:
    """Delete a pending payment. This cannot be undone."""
    with _payments(ctx) as payments:
        format_response(payments.delete_payment(payment_id))


@api_app.command("confirm-payment")
def api_confirm_payment(
    ctx: typer.Context,
    payment_id: str = typer.Argument(help="Payment ID to confirm."),
) -> None:
    """Confirm a payment; it settles on the next business day.

    Only available to merchants who have contracted the feature.
    """
    with _payments(ctx) as payments:
        format_response(payments.confirm_payment(payment_id))


@api_app.command("refund-payment")
def api_refund_payment(
    ctx: typer.Context,
    payment_id: str = typer.Argument(help="Payment ID to refund."),
    amount: Optional[float] = typer.Option(
        None, help="Amount to refund. If omitted, the full amount is refunded."
    ),
) -> None:
    """Refund a payment fully or partially."""
    with _payments(ctx) as payments:
        format_response(payments.refund_payment(payment_id, amount))


@api_app.command("predict")
def api_predict(
    ctx: typer.Context,
    payer_email: str = typer.Option(..., help="Email address of the payer."),
    bank_id: str = typer.Option(..., help="Bank ID of the payer's bank."),
    amount: str = typer.Option(..., help="Payment amount as a string."),
    currency: str = typer.Option(..., help="ISO-4217 currency, e.g. 'CLP'."),
) -> None:
    """Predict whether a payment will succeed for a payer, bank and amount."""
    with _payments(ctx) as payments:
        format_response(payments.predict(payer_email, bank_id, amount, currency))


@api_app.command("payment-methods")
def api_payment_methods(
    ctx: typer.Context,
    merchant_id: int = typer.Argument(help="Merchant account (receiver) numeric ID."),
) -> None:
    """List payment methods available for a merchant account."""
    with _payments(ctx) as payments:
        format_response(payments.get_payment_methods(merchant_id))
