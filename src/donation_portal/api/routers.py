from fastapi import (
    APIRouter,
    Request,
    Header,
    Depends,
    Query
)
from typing import Any, Optional
import logging

from donation_portal.core.dependencies import get_intent_service, get_plan_catalog, get_webhook_receiver
from donation_portal.models.donation import PlanInterval
from donation_portal.api.schemas import (
    DonorValidationRequest,
    DonorValidationResponse,
    InitializeSubscriptionRequest,
    InitializeSubscriptionResponse,
    ManageSubscriptionRequest,
    ManagementLinkResponse,
    PublicPlanResponse,
    VerifyTransactionRequest,
    VerifyTransactionResponse,
    WebhookAcknowledgement,
)
from donation_portal.services.donor_validation import format_phone, validate_donor
from donation_portal.services.intent_service import IntentService
from donation_portal.services.plan_catalog import PlanCatalog, format_amount
from donation_portal.services.webhook_service import WebhookReceiver

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/plans",
    response_model=list[PublicPlanResponse]
)
def list_plans(
    interval: Optional[PlanInterval] = None,
    catalog: PlanCatalog = Depends(get_plan_catalog)
):
    plans = catalog.plans_for_interval(interval) if interval else catalog.all()
    return [
        PublicPlanResponse(
            id=plan.id,
            name=plan.name,
            amount=plan.amount,
            currency=plan.currency,
            interval=plan.interval,
            description=plan.description,
            display_amount=format_amount(plan.amount, plan.currency)
        )
        for plan in plans
    ]


@router.post(
    "/donor/validate",
    response_model=DonorValidationResponse
)
def validate_donor_details(body: DonorValidationRequest):
    result = validate_donor(
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone
    )
    return DonorValidationResponse(
        valid=result.is_valid,
        errors=result.errors,
        donor=result.donor,
        formatted_phone=format_phone(body.phone) if body.phone else None
    )


@router.post(
    "/subscription/initialize",
    response_model=InitializeSubscriptionResponse
)
def initialize_subscription(
    body: InitializeSubscriptionRequest,
    intents: IntentService = Depends(get_intent_service)
):
    intent = intents.initialize(
        plan_id=body.plan_id,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone
    )
    return InitializeSubscriptionResponse(
        access_code=intent.access_code,
        authorization_url=intent.authorization_url,
        reference=intent.reference
    )


def _verify(intents: IntentService, reference: Optional[str], trxref: Optional[str]) -> VerifyTransactionResponse:
    resolved = intents.resolve_reference(reference, trxref)
    result = intents.require_success(intents.verify(resolved))
    return VerifyTransactionResponse(transaction=result.transaction)


@router.get(
    "/subscription/verify",
    response_model=VerifyTransactionResponse
)
def verify_transaction(
    reference: Optional[str] = Query(default=None),
    trxref: Optional[str] = Query(default=None),
    intents: IntentService = Depends(get_intent_service)
):
    return _verify(intents, reference, trxref)


@router.post(
    "/subscription/verify",
    response_model=VerifyTransactionResponse
)
def verify_transaction_from_body(
    body: VerifyTransactionRequest,
    intents: IntentService = Depends(get_intent_service)
):
    return _verify(intents, body.reference, body.trxref)


@router.get(
    "/donation/callback",
    response_model=VerifyTransactionResponse
)
def donation_callback(
    reference: Optional[str] = Query(default=None),
    trxref: Optional[str] = Query(default=None),
    intents: IntentService = Depends(get_intent_service)
):
    """
    Landing point for the browser after Paystack's hosted page.
    Paystack appends ``reference`` and the legacy ``trxref`` to the URL.
    """
    return _verify(intents, reference, trxref)


@router.post(
    "/subscription/manage",
    response_model=ManagementLinkResponse
)
def subscription_management_link(
    body: ManageSubscriptionRequest,
    intents: IntentService = Depends(get_intent_service)
):
    link = intents.management_link(body.subscription_code)
    return ManagementLinkResponse(link=link)


@router.get("/subscription/manage")
def fetch_subscription(
    subscription_code: Optional[str] = Query(default=None),
    intents: IntentService = Depends(get_intent_service)
) -> dict[str, Any]:
    subscription = intents.fetch_subscription(subscription_code)
    return subscription.model_dump(mode="json")


@router.post(
    "/webhooks/paystack",
    response_model=WebhookAcknowledgement
)
async def handle_paystack_webhook(
    request: Request,
    x_paystack_signature: Optional[str] = Header(default=None),
    receiver: WebhookReceiver = Depends(get_webhook_receiver)
):
    """
    Receives lifecycle events from Paystack. The signature is checked
    against the raw body before anything is parsed.
    """
    payload = await request.body()
    receiver.handle(payload=payload, signature=x_paystack_signature)
    return WebhookAcknowledgement()
