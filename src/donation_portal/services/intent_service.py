import logging
from typing import Any

from donation_portal.core.errors import BadRequestError, GatewayError, TransactionFailedError
from donation_portal.models.donation import (
    DonationPlan,
    DonorInfo,
    TransactionIntent,
    VerificationFailure,
    VerificationResult,
    VerificationSuccess,
)
from donation_portal.models.paystack import Subscription
from donation_portal.services.donor_validation import normalize_phone
from donation_portal.services.paystack_client import PaystackClient
from donation_portal.services.plan_catalog import PlanCatalog
from donation_portal.services.transaction_normalizer import normalize_transaction

logger = logging.getLogger(__name__)


class IntentService:
    """
    Drives a donation through its payment states.

    ``initialize`` moves a (plan, donor) pair to an initialized Paystack
    transaction; the donor then pays on Paystack's hosted page, which this
    service never sees; ``verify`` reads the outcome back by reference.
    Nothing is stored locally, Paystack holds the only record.
    """

    def __init__(self, gateway: PaystackClient, catalog: PlanCatalog, callback_url: str):
        self.gateway = gateway
        self.catalog = catalog
        self.callback_url = callback_url

    def build_initialization_request(self, plan: DonationPlan, donor: DonorInfo) -> dict[str, Any]:
        metadata = {
            "plan_id": plan.id,
            "plan_name": plan.name,
            "plan_interval": plan.interval,
            "first_name": donor.first_name,
            "last_name": donor.last_name,
            "phone": donor.phone,
        }
        request: dict[str, Any] = {
            "email": donor.email,
            "amount": plan.amount * 100,
            "callback_url": self.callback_url,
            "metadata": {key: value for key, value in metadata.items() if value is not None},
        }
        # One-off donations are single charges and must never carry a plan
        if plan.is_recurring and plan.plan_code:
            request["plan"] = plan.plan_code
        return request

    def initialize(
        self,
        plan_id: str,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> TransactionIntent:
        plan = self.catalog.get_plan_by_id(plan_id)
        if plan is None:
            raise BadRequestError("Invalid plan")

        trimmed_email = (email or "").strip()
        if not trimmed_email:
            raise BadRequestError("Email is required")

        donor = DonorInfo(
            email=trimmed_email,
            first_name=first_name.strip() if first_name else None,
            last_name=last_name.strip() if last_name else None,
            phone=normalize_phone(phone) or None,
        )

        request = self.build_initialization_request(plan, donor)
        result = self.gateway.initialize_transaction(**request)
        if not result.status:
            raise BadRequestError(result.message or "Failed to initialize transaction")
        if result.data is None:
            raise GatewayError("Initialize transaction response has no data")

        logger.info(
            "Transaction initialized",
            extra={"plan_id": plan.id, "reference": result.data.reference},
        )
        return TransactionIntent(
            plan=plan,
            donor=donor,
            reference=result.data.reference,
            access_code=result.data.access_code,
            authorization_url=result.data.authorization_url,
        )

    @staticmethod
    def resolve_reference(reference: str | None, trxref: str | None = None) -> str:
        # Paystack appends both to the callback URL; trxref is the legacy name
        resolved = reference or trxref
        if not resolved:
            raise BadRequestError("Transaction reference is required")
        return resolved

    def verify(self, reference: str) -> VerificationResult:
        result = self.gateway.verify_transaction(reference)
        if not result.status:
            raise BadRequestError(result.message or "Failed to verify transaction")
        if result.data is None:
            raise GatewayError("Verify transaction response has no data")

        transaction = result.data
        if transaction.status != "success":
            logger.info(
                "Transaction not successful",
                extra={"reference": reference, "transaction_status": transaction.status},
            )
            return VerificationFailure(
                status=transaction.status or "unknown",
                gateway_response=transaction.gateway_response or "No gateway response",
            )

        logger.info("Transaction verified", extra={"reference": reference})
        return VerificationSuccess(transaction=normalize_transaction(transaction))

    @staticmethod
    def require_success(result: VerificationResult) -> VerificationSuccess:
        if isinstance(result, VerificationFailure):
            raise TransactionFailedError(result.status, result.gateway_response)
        return result

    def management_link(self, subscription_code: str | None) -> str:
        if not subscription_code:
            raise BadRequestError("Subscription code is required")

        result = self.gateway.generate_subscription_management_link(subscription_code)
        if not result.status:
            raise BadRequestError(result.message or "Failed to generate management link")
        if result.data is None:
            raise GatewayError("Management link response has no data")
        return result.data.link

    def fetch_subscription(self, subscription_code: str | None) -> Subscription:
        if not subscription_code:
            raise BadRequestError("Subscription code is required")

        result = self.gateway.fetch_subscription(subscription_code)
        if not result.status:
            raise BadRequestError(result.message or "Failed to fetch subscription")
        if result.data is None:
            raise GatewayError("Fetch subscription response has no data")
        return result.data
