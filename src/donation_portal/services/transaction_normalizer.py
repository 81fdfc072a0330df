from typing import Any, Mapping

from pydantic import BaseModel

from donation_portal.models.donation import SafeCustomer, SafeMetadata, SafeTransaction


def normalize_transaction(record: Mapping[str, Any] | BaseModel) -> SafeTransaction:
    """
    Reduce a Paystack transaction record to the fields the browser may see.

    This is an allow-list: fields Paystack adds later stay out until they are
    added here. Card authorization data and the rest of the metadata never
    leave the server.
    """
    if isinstance(record, BaseModel):
        record = record.model_dump()

    customer = record.get("customer")
    metadata = record.get("metadata")
    if not isinstance(customer, Mapping):
        customer = {}
    if not isinstance(metadata, Mapping):
        metadata = {}

    return SafeTransaction(
        amount=record.get("amount"),
        currency=record.get("currency"),
        reference=record.get("reference"),
        plan=record.get("plan"),
        customer=SafeCustomer(email=customer.get("email")),
        metadata=SafeMetadata(plan_interval=metadata.get("plan_interval")),
    )
