import hashlib
import hmac
import json
import logging
from typing import Mapping

from pydantic import ValidationError

from donation_portal.core.errors import BadRequestError
from donation_portal.models.donation import WebhookEvent, WebhookEventKind
from donation_portal.services.webhook_handlers import DEFAULT_HANDLERS, WebhookHandler

logger = logging.getLogger(__name__)


class WebhookReceiver:
    def __init__(
        self,
        secret_key: str,
        handlers: Mapping[WebhookEventKind, WebhookHandler] | None = None,
    ):
        self._secret = secret_key.encode("utf-8")
        self.handlers = dict(DEFAULT_HANDLERS)
        if handlers:
            self.handlers.update(handlers)

    def compute_signature(self, payload: bytes) -> str:
        return hmac.new(self._secret, payload, hashlib.sha512).hexdigest()

    def verify_signature(self, payload: bytes, signature: str) -> bool:
        expected = self.compute_signature(payload).encode("ascii")
        return hmac.compare_digest(expected, signature.strip().lower().encode("utf-8"))

    def parse_event(self, payload: bytes) -> WebhookEvent:
        try:
            body = json.loads(payload)
        except ValueError as e:
            logger.warning(f"Webhook error: Invalid payload - {e}")
            raise BadRequestError("Invalid JSON payload") from e

        try:
            return WebhookEvent.model_validate(body)
        except ValidationError as e:
            logger.warning("Webhook error: Unexpected event envelope", extra={"errors": e.error_count()})
            raise BadRequestError("Invalid webhook data") from e

    def dispatch(self, event: WebhookEvent) -> None:
        handler = self.handlers.get(event.kind, self.handlers[WebhookEventKind.UNKNOWN])
        try:
            handler(event.data)
        except Exception:
            # The acknowledgement must not depend on handler outcome
            logger.exception("Webhook handler failed", extra={"event": event.event})

    def handle(self, payload: bytes, signature: str | None) -> WebhookEvent:
        """
        Authenticate, parse and dispatch one webhook delivery.

        The signature is checked against the raw bytes as received; the body
        is only parsed once it is known to come from Paystack.
        """
        if not signature:
            raise BadRequestError("Missing signature")
        if not self.verify_signature(payload, signature):
            logger.warning("Webhook signature verification failed")
            raise BadRequestError("Invalid signature")

        event = self.parse_event(payload)
        logger.info("Received webhook event", extra={"event": event.event})
        self.dispatch(event)
        return event
