"""Response shapes returned by the Paystack REST API.

Only the fields the service reads are declared; everything else is kept
(``extra="allow"``) so callers can still see the full provider record.
"""
from typing import Any, Generic, TypeVar
from pydantic import BaseModel, ConfigDict

DataT = TypeVar("DataT")


class PaystackModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class PaystackResponse(PaystackModel, Generic[DataT]):
    status: bool
    message: str | None = None
    data: DataT | None = None


class InitializedTransaction(PaystackModel):
    access_code: str
    authorization_url: str
    reference: str


class TransactionCustomer(PaystackModel):
    email: str
    customer_code: str | None = None


class Transaction(PaystackModel):
    id: int | None = None
    reference: str
    amount: int
    currency: str
    status: str
    gateway_response: str | None = None
    paid_at: str | None = None
    customer: TransactionCustomer
    plan: Any = None
    authorization: dict[str, Any] | None = None
    # Paystack sends an empty string when no metadata was attached
    metadata: dict[str, Any] | str | None = None


class SubscriptionPlan(PaystackModel):
    id: int
    name: str
    plan_code: str
    description: str | None = None
    amount: int
    interval: str
    currency: str


class SubscriptionCustomer(PaystackModel):
    id: int
    email: str
    customer_code: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


class Subscription(PaystackModel):
    id: int
    status: str
    subscription_code: str
    email_token: str | None = None
    amount: int
    cron_expression: str | None = None
    next_payment_date: str | None = None
    open_invoice: str | None = None
    plan: SubscriptionPlan
    customer: SubscriptionCustomer
    authorization: dict[str, Any] | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ManagementLink(PaystackModel):
    link: str
