"""Typed, logged wrapper around the Paystack REST API."""
import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from donation_portal.core.config import Settings
from donation_portal.core.errors import GatewayError
from donation_portal.models.paystack import (
    InitializedTransaction,
    ManagementLink,
    PaystackResponse,
    Subscription,
    Transaction,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

# Upper bound on provider error text copied into exception messages
_ERROR_BODY_LIMIT = 1000


class PaystackClient:
    """
    One method per Paystack endpoint used by the portal.

    Every method returns the decoded response envelope, including
    ``status: false`` business rejections; deciding what a rejection means is
    left to the caller. Transport failures, non-2xx answers and unexpected
    response shapes raise ``GatewayError``. Nothing is retried.
    """

    def __init__(self, settings: Settings, client: httpx.Client | None = None):
        if not settings.PAYSTACK_SECRET_KEY:
            raise ValueError("Paystack secret key is not configured")
        self._client = client or httpx.Client(
            base_url=settings.PAYSTACK_BASE_URL,
            timeout=settings.PAYSTACK_TIMEOUT_SECONDS,
        )
        self._headers = {
            "Authorization": f"Bearer {settings.PAYSTACK_SECRET_KEY}",
            "Content-Type": "application/json",
        }

    def close(self) -> None:
        self._client.close()

    def initialize_transaction(
        self,
        email: str,
        amount: int,
        callback_url: str,
        metadata: dict[str, Any] | None = None,
        plan: str | None = None,
    ) -> PaystackResponse[InitializedTransaction]:
        """``amount`` is in minor currency units (cents)."""
        payload: dict[str, Any] = {
            "email": email,
            "amount": amount,
            "callback_url": callback_url,
        }
        if plan:
            payload["plan"] = plan
        if metadata:
            payload["metadata"] = metadata

        return self._request(
            "POST",
            "/transaction/initialize",
            PaystackResponse[InitializedTransaction],
            action="initialize transaction",
            json=payload,
        )

    def verify_transaction(self, reference: str) -> PaystackResponse[Transaction]:
        return self._request(
            "GET",
            f"/transaction/verify/{quote(reference, safe='')}",
            PaystackResponse[Transaction],
            action="verify transaction",
        )

    def fetch_subscription(self, subscription_code: str) -> PaystackResponse[Subscription]:
        return self._request(
            "GET",
            f"/subscription/{quote(subscription_code, safe='')}",
            PaystackResponse[Subscription],
            action="fetch subscription",
        )

    def generate_subscription_management_link(
        self, subscription_code: str
    ) -> PaystackResponse[ManagementLink]:
        return self._request(
            "GET",
            f"/subscription/{quote(subscription_code, safe='')}/manage/link",
            PaystackResponse[ManagementLink],
            action="generate management link",
        )

    def create_customer(
        self,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> PaystackResponse[dict[str, Any]]:
        payload = {"email": email, "first_name": first_name, "last_name": last_name, "phone": phone}
        return self._request(
            "POST",
            "/customer",
            PaystackResponse[dict[str, Any]],
            action="create customer",
            json={key: value for key, value in payload.items() if value is not None},
        )

    def create_subscription(
        self,
        customer: str,
        plan: str,
        authorization: str | None = None,
        start_date: str | None = None,
    ) -> PaystackResponse[dict[str, Any]]:
        payload = {"customer": customer, "plan": plan, "authorization": authorization, "start_date": start_date}
        return self._request(
            "POST",
            "/subscription",
            PaystackResponse[dict[str, Any]],
            action="create subscription",
            json={key: value for key, value in payload.items() if value is not None},
        )

    def _request(
        self,
        method: str,
        path: str,
        response_model: type[ResponseT],
        action: str,
        json: dict[str, Any] | None = None,
    ) -> ResponseT:
        logger.info("Paystack request", extra={"action": action, "method": method, "path": path})

        try:
            response = self._client.request(method, path, json=json, headers=self._headers)
        except httpx.HTTPError as e:
            logger.error("Paystack transport error", extra={"action": action, "error": str(e)})
            raise GatewayError(f"Failed to {action}: {e}") from e

        if not response.is_success:
            body = response.text[:_ERROR_BODY_LIMIT]
            logger.warning(
                "Paystack HTTP error",
                extra={"action": action, "status_code": response.status_code, "error_message": body},
            )
            raise GatewayError(f"Failed to {action}: {body}", status_code=response.status_code)

        try:
            return response_model.model_validate(response.json())
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
            kind = "shape" if isinstance(e, ValidationError) else "JSON"
            logger.error(
                "Paystack response rejected",
                extra={"action": action, "reason": kind, "error": str(e)},
            )
            raise GatewayError(f"Failed to parse {action} response: {e}") from e
