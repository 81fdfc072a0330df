from functools import lru_cache

from donation_portal.core.config import get_settings
from donation_portal.services.intent_service import IntentService
from donation_portal.services.paystack_client import PaystackClient
from donation_portal.services.plan_catalog import PlanCatalog, build_catalog
from donation_portal.services.webhook_service import WebhookReceiver


@lru_cache()
def get_plan_catalog() -> PlanCatalog:
    settings = get_settings()
    return build_catalog(settings.PLAN_CODE_OVERRIDES)

@lru_cache()
def get_paystack_client() -> PaystackClient:
    return PaystackClient(settings=get_settings())

@lru_cache()
def get_intent_service() -> IntentService:
    settings = get_settings()
    return IntentService(
        gateway=get_paystack_client(),
        catalog=get_plan_catalog(),
        callback_url=settings.callback_url
    )

@lru_cache()
def get_webhook_receiver() -> WebhookReceiver:
    settings = get_settings()
    return WebhookReceiver(secret_key=settings.PAYSTACK_SECRET_KEY)
