import pytest

from conftest import successful_transaction
from donation_portal.core.errors import BadRequestError, GatewayError, TransactionFailedError
from donation_portal.models.donation import DonorInfo, VerificationFailure, VerificationSuccess
from donation_portal.services.intent_service import IntentService

INITIALIZED = {
    "status": True,
    "message": "Authorization URL created",
    "data": {
        "access_code": "0peioxfhpn",
        "authorization_url": "https://checkout.paystack.com/0peioxfhpn",
        "reference": "7PVGX8MEk85tgeEpVDtD",
    },
}


def test_one_off_requests_never_carry_a_plan(intent_service, catalog):
    donor = DonorInfo(email="a@b.co")
    for plan in catalog.plans_for_interval("one-off"):
        # even if a code slipped into the plan definition
        with_code = plan.model_copy(update={"plan_code": "PLN_should_not_be_sent"})
        request = intent_service.build_initialization_request(with_code, donor)
        assert "plan" not in request


def test_recurring_requests_carry_their_plan_code(intent_service, catalog):
    donor = DonorInfo(email="a@b.co")
    for plan in catalog.plans_for_interval("monthly") + catalog.plans_for_interval("annually"):
        request = intent_service.build_initialization_request(plan, donor)
        assert request["plan"] == plan.plan_code


def test_recurring_plan_without_code_sends_no_plan(intent_service, catalog):
    plan = catalog.get_plan_by_id("monthly-100").model_copy(update={"plan_code": None})
    request = intent_service.build_initialization_request(plan, DonorInfo(email="a@b.co"))
    assert "plan" not in request


def test_initialization_request_shape(intent_service, catalog):
    plan = catalog.get_plan_by_id("monthly-500")
    donor = DonorInfo(email="a@b.co", first_name="Jan", last_name="Marais", phone="0828322321")

    request = intent_service.build_initialization_request(plan, donor)

    assert request == {
        "email": "a@b.co",
        "amount": 50000,
        "callback_url": "https://donate.example.org/donation/callback",
        "plan": plan.plan_code,
        "metadata": {
            "plan_id": "monthly-500",
            "plan_name": plan.name,
            "plan_interval": "monthly",
            "first_name": "Jan",
            "last_name": "Marais",
            "phone": "0828322321",
        },
    }


def test_initialize_creates_intent(intent_service, fake_paystack):
    fake_paystack.add("/transaction/initialize", INITIALIZED)

    intent = intent_service.initialize(
        plan_id="one-off-1000",
        email="  jan.marais@skenker.co.za ",
        first_name=" Jan ",
        phone="082 832 2321",
    )

    assert intent.reference == "7PVGX8MEk85tgeEpVDtD"
    assert intent.authorization_url == "https://checkout.paystack.com/0peioxfhpn"
    assert intent.plan.id == "one-off-1000"
    sent = fake_paystack.last_json()
    assert sent["email"] == "jan.marais@skenker.co.za"
    assert sent["amount"] == 100000
    assert "plan" not in sent
    assert sent["metadata"] == {
        "plan_id": "one-off-1000",
        "plan_name": "R1,000 One-Off",
        "plan_interval": "one-off",
        "first_name": "Jan",
        "phone": "0828322321",
    }


def test_initialize_rejects_unknown_plan(intent_service, fake_paystack):
    with pytest.raises(BadRequestError, match="Invalid plan"):
        intent_service.initialize(plan_id="monthly-3", email="a@b.co")
    assert fake_paystack.requests == []


def test_initialize_rejects_blank_email(intent_service, fake_paystack):
    with pytest.raises(BadRequestError, match="Email is required"):
        intent_service.initialize(plan_id="monthly-100", email="   ")
    assert fake_paystack.requests == []


def test_initialize_surfaces_provider_rejection(intent_service, fake_paystack):
    fake_paystack.add("/transaction/initialize", {"status": False, "message": "Invalid Email Address Passed"})

    with pytest.raises(BadRequestError, match="Invalid Email Address Passed"):
        intent_service.initialize(plan_id="monthly-100", email="a@b.co")


def test_initialize_gateway_failure(intent_service, fake_paystack):
    fake_paystack.add("/transaction/initialize", {"status": False, "message": "boom"}, status_code=502)

    with pytest.raises(GatewayError) as excinfo:
        intent_service.initialize(plan_id="monthly-100", email="a@b.co")
    assert excinfo.value.status_code == 502


def test_reference_takes_precedence_over_trxref():
    assert IntentService.resolve_reference("ref123", "legacy") == "ref123"
    assert IntentService.resolve_reference(None, "legacy") == "legacy"
    with pytest.raises(BadRequestError):
        IntentService.resolve_reference(None, None)


def test_verify_success_is_normalized(intent_service, fake_paystack):
    fake_paystack.add("/transaction/verify/ref123", {
        "status": True,
        "data": {
            "status": "success",
            "amount": 10000,
            "currency": "ZAR",
            "reference": "ref123",
            "customer": {"email": "a@b.co"},
            "metadata": {"plan_interval": "monthly"},
        },
    })

    result = intent_service.verify("ref123")

    assert isinstance(result, VerificationSuccess)
    assert result.transaction.model_dump() == {
        "amount": 10000,
        "currency": "ZAR",
        "reference": "ref123",
        "plan": None,
        "customer": {"email": "a@b.co"},
        "metadata": {"plan_interval": "monthly"},
    }
    assert result.customer_email == "a@b.co"
    assert result.plan_interval == "monthly"


def test_verify_is_idempotent(intent_service, fake_paystack):
    fake_paystack.add("/transaction/verify/ref123", successful_transaction())

    first = intent_service.verify("ref123")
    second = intent_service.verify("ref123")

    assert first.model_dump_json() == second.model_dump_json()
    assert len(fake_paystack.requests) == 2


def test_verify_failed_transaction(intent_service, fake_paystack):
    fake_paystack.add("/transaction/verify/ref123", successful_transaction(status="failed", gateway_response="Declined"))

    result = intent_service.verify("ref123")

    assert result == VerificationFailure(status="failed", gateway_response="Declined")
    with pytest.raises(TransactionFailedError) as excinfo:
        intent_service.require_success(result)
    assert excinfo.value.status == "failed"
    assert excinfo.value.gateway_response == "Declined"


def test_verify_failure_without_gateway_response(intent_service, fake_paystack):
    fake_paystack.add("/transaction/verify/ref123", successful_transaction(status="abandoned", gateway_response=None))

    result = intent_service.verify("ref123")

    assert result.gateway_response == "No gateway response"


def test_verify_provider_rejection(intent_service, fake_paystack):
    fake_paystack.add("/transaction/verify/ref123", {"status": False, "message": "Transaction reference not found"})

    with pytest.raises(BadRequestError, match="Transaction reference not found"):
        intent_service.verify("ref123")


def test_management_link(intent_service, fake_paystack):
    fake_paystack.add("/subscription/SUB_1/manage/link", {"status": True, "data": {"link": "https://paystack.com/manage/x"}})

    assert intent_service.management_link("SUB_1") == "https://paystack.com/manage/x"


def test_management_link_requires_code(intent_service):
    with pytest.raises(BadRequestError, match="Subscription code is required"):
        intent_service.management_link(None)
