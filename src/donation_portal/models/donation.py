from enum import Enum
from typing import Any, Literal
from pydantic import BaseModel, ConfigDict, Field


PlanInterval = Literal["monthly", "annually", "one-off"]

class DonationPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    amount: int = Field(gt=0)  # whole currency units
    currency: str = "ZAR"
    interval: PlanInterval
    plan_code: str | None = None  # Paystack plan, recurring intervals only
    description: str | None = None

    @property
    def is_recurring(self) -> bool:
        return self.interval != "one-off"

class DonorInfo(BaseModel):
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None  # digits only, e.g. 0828322321

class TransactionIntent(BaseModel):
    plan: DonationPlan
    donor: DonorInfo
    reference: str
    access_code: str
    authorization_url: str

class SafeCustomer(BaseModel):
    email: str | None = None

class SafeMetadata(BaseModel):
    plan_interval: str | None = None

class SafeTransaction(BaseModel):
    amount: int | None = None
    currency: str | None = None
    reference: str | None = None
    plan: Any = None
    customer: SafeCustomer
    metadata: SafeMetadata

class VerificationSuccess(BaseModel):
    outcome: Literal["success"] = "success"
    transaction: SafeTransaction

    @property
    def amount(self) -> int | None:
        return self.transaction.amount

    @property
    def currency(self) -> str | None:
        return self.transaction.currency

    @property
    def reference(self) -> str | None:
        return self.transaction.reference

    @property
    def plan(self) -> Any:
        return self.transaction.plan

    @property
    def customer_email(self) -> str | None:
        return self.transaction.customer.email

    @property
    def plan_interval(self) -> str | None:
        return self.transaction.metadata.plan_interval

class VerificationFailure(BaseModel):
    outcome: Literal["failure"] = "failure"
    status: str
    gateway_response: str

VerificationResult = VerificationSuccess | VerificationFailure

class WebhookEventKind(str, Enum):
    SUBSCRIPTION_CREATE = "subscription.create"
    SUBSCRIPTION_DISABLE = "subscription.disable"
    SUBSCRIPTION_NOT_RENEW = "subscription.not_renew"
    INVOICE_CREATE = "invoice.create"
    INVOICE_PAYMENT_FAILED = "invoice.payment_failed"
    INVOICE_UPDATE = "invoice.update"
    CHARGE_SUCCESS = "charge.success"
    UNKNOWN = "unknown"

class WebhookEvent(BaseModel):
    event: str
    data: dict[str, Any]

    @property
    def kind(self) -> WebhookEventKind:
        try:
            return WebhookEventKind(self.event)
        except ValueError:
            return WebhookEventKind.UNKNOWN
