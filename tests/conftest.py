import json
import os

import httpx
import pytest

# Settings are read when the app module is imported
os.environ.setdefault("PAYSTACK_SECRET_KEY", "sk_test_secret")
os.environ.setdefault("APP_URL", "https://donate.example.org")

from fastapi.testclient import TestClient

from donation_portal.api.main import app
from donation_portal.core.config import Settings
from donation_portal.core.dependencies import get_intent_service, get_plan_catalog, get_webhook_receiver
from donation_portal.models.donation import WebhookEventKind
from donation_portal.services.intent_service import IntentService
from donation_portal.services.paystack_client import PaystackClient
from donation_portal.services.plan_catalog import build_catalog
from donation_portal.services.webhook_service import WebhookReceiver

SECRET_KEY = "sk_test_secret"
BASE_URL = "https://api.paystack.test"


class FakePaystack:
    """Routes requests by path to canned responses and records what was sent."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, path, body=None, status_code=200, content=None):
        self.routes[path] = (status_code, body, content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path not in self.routes:
            return httpx.Response(404, json={"status": False, "message": "Not found"})
        status_code, body, content = self.routes[request.url.path]
        if content is not None:
            return httpx.Response(status_code, content=content)
        return httpx.Response(status_code, json=body)

    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def settings():
    return Settings(PAYSTACK_SECRET_KEY=SECRET_KEY, APP_URL="https://donate.example.org/", PAYSTACK_BASE_URL=BASE_URL)


@pytest.fixture
def fake_paystack():
    return FakePaystack()


@pytest.fixture
def paystack_client(settings, fake_paystack):
    http_client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(fake_paystack))
    client = PaystackClient(settings=settings, client=http_client)
    yield client
    client.close()


@pytest.fixture
def catalog():
    return build_catalog()


@pytest.fixture
def intent_service(paystack_client, catalog, settings):
    return IntentService(gateway=paystack_client, catalog=catalog, callback_url=settings.callback_url)


@pytest.fixture
def webhook_calls():
    return []


@pytest.fixture
def webhook_receiver(webhook_calls):
    def record(data):
        webhook_calls.append(data)

    return WebhookReceiver(SECRET_KEY, handlers={kind: record for kind in WebhookEventKind})


@pytest.fixture
def client(intent_service, catalog, webhook_receiver):
    app.dependency_overrides[get_intent_service] = lambda: intent_service
    app.dependency_overrides[get_plan_catalog] = lambda: catalog
    app.dependency_overrides[get_webhook_receiver] = lambda: webhook_receiver
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def successful_transaction(**overrides):
    data = {
        "id": 4099260516,
        "status": "success",
        "reference": "ref123",
        "amount": 10000,
        "currency": "ZAR",
        "gateway_response": "Successful",
        "paid_at": "2024-08-22T09:15:02.000Z",
        "customer": {"email": "a@b.co", "customer_code": "CUS_xnxdt6s1zg1f4nx"},
        "plan": None,
        "authorization": {"authorization_code": "AUTH_pmx3mgawyd", "last4": "4081", "bin": "408408"},
        "metadata": {"plan_interval": "monthly", "plan_id": "monthly-100", "phone": "0828322321"},
    }
    data.update(overrides)
    return {"status": True, "message": "Verification successful", "data": data}
