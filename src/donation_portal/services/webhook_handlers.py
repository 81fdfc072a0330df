"""
Paystack lifecycle event handlers.

Nothing is persisted yet, so each handler only records that the event
arrived. Only identifiers are logged; payloads carry customer and card data.
These are the hooks for storing subscriptions, sending receipts and updating
account state.
"""
import logging
from typing import Any, Callable

from donation_portal.models.donation import WebhookEventKind

logger = logging.getLogger(__name__)

WebhookHandler = Callable[[dict[str, Any]], None]


def _identifiers(data: dict[str, Any]) -> dict[str, Any]:
    keys = ("reference", "subscription_code", "invoice_code")
    return {key: data[key] for key in keys if isinstance(data.get(key), str)}


def handle_subscription_create(data: dict[str, Any]) -> None:
    logger.info("Subscription created", extra=_identifiers(data))


def handle_subscription_disable(data: dict[str, Any]) -> None:
    logger.info("Subscription disabled", extra=_identifiers(data))


def handle_subscription_not_renew(data: dict[str, Any]) -> None:
    logger.info("Subscription set to not renew", extra=_identifiers(data))


def handle_invoice_create(data: dict[str, Any]) -> None:
    logger.info("Invoice created", extra=_identifiers(data))


def handle_invoice_payment_failed(data: dict[str, Any]) -> None:
    logger.warning("Invoice payment failed", extra=_identifiers(data))


def handle_invoice_update(data: dict[str, Any]) -> None:
    logger.info("Invoice updated", extra=_identifiers(data))


def handle_charge_success(data: dict[str, Any]) -> None:
    logger.info("Charge successful", extra=_identifiers(data))


def handle_unknown(data: dict[str, Any]) -> None:
    logger.info("Unhandled webhook event")


DEFAULT_HANDLERS: dict[WebhookEventKind, WebhookHandler] = {
    WebhookEventKind.SUBSCRIPTION_CREATE: handle_subscription_create,
    WebhookEventKind.SUBSCRIPTION_DISABLE: handle_subscription_disable,
    WebhookEventKind.SUBSCRIPTION_NOT_RENEW: handle_subscription_not_renew,
    WebhookEventKind.INVOICE_CREATE: handle_invoice_create,
    WebhookEventKind.INVOICE_PAYMENT_FAILED: handle_invoice_payment_failed,
    WebhookEventKind.INVOICE_UPDATE: handle_invoice_update,
    WebhookEventKind.CHARGE_SUCCESS: handle_charge_success,
    WebhookEventKind.UNKNOWN: handle_unknown,
}
