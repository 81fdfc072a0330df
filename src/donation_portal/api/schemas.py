from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal, Optional

from donation_portal.models.donation import DonorInfo, PlanInterval, SafeTransaction
from donation_portal.services.donor_validation import EMAIL_PATTERN

class InitializeSubscriptionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    plan_id: str = Field(alias="planId")
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    phone: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("invalid email address")
        return value

class InitializeSubscriptionResponse(BaseModel):
    access_code: str
    authorization_url: str
    reference: str

class VerifyTransactionRequest(BaseModel):
    reference: Optional[str] = None
    trxref: Optional[str] = None

class VerifyTransactionResponse(BaseModel):
    status: Literal["success"] = "success"
    transaction: SafeTransaction

class ManageSubscriptionRequest(BaseModel):
    subscription_code: Optional[str] = None

class ManagementLinkResponse(BaseModel):
    link: str

class DonorValidationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    phone: Optional[str] = None

class DonorValidationResponse(BaseModel):
    valid: bool
    errors: dict[str, str]
    donor: Optional[DonorInfo] = None
    formatted_phone: Optional[str] = None

class PublicPlanResponse(BaseModel):
    id: str
    name: str
    amount: int
    currency: str
    interval: PlanInterval
    description: Optional[str] = None
    display_amount: str

class WebhookAcknowledgement(BaseModel):
    status: Literal["success"] = "success"

class ErrorResponse(BaseModel):
    error: str
    status: Optional[str] = None
    gateway_response: Optional[str] = None
