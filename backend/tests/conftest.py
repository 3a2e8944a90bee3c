import json
import os

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before the app reads them
os.environ.update(
    {
        "STRIPE_WEBHOOK_SECRET": "whsec_test",
        "APPS_SCRIPT_URL": "https://script.google.com/macros/s/test/exec",
        "PROXY_SECRET": "proxy_test",
        "LOG_LEVEL": "DEBUG",
    }
)

from stripe_relay.core.config import Settings, get_settings
from stripe_relay.main import app
from stripe_relay.services.stripe_verify import sign_header

SIGNING_SECRET = "whsec_test"
FORWARD_URL = "https://script.google.com/macros/s/test/exec"
PROXY_SECRET = "proxy_test"

EVENT_BODY = b'{"id":"evt_1","type":"payment_intent.succeeded","livemode":false}'


def make_settings(**overrides) -> Settings:
    values = {
        "stripe_webhook_secret": SIGNING_SECRET,
        "apps_script_url": FORWARD_URL,
        "proxy_secret": PROXY_SECRET,
        "_env_file": None,
    }
    values.update(overrides)
    return Settings(**values)


def signed_headers(body: bytes, secret: str = SIGNING_SECRET) -> dict:
    return {
        "Stripe-Signature": sign_header(body, secret),
        "Content-Type": "application/json",
    }


def tamper(header: str) -> str:
    """Flip the last hex digit of the v1 signature."""
    last = header[-1]
    return header[:-1] + ("0" if last != "0" else "1")


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def event_body() -> bytes:
    return EVENT_BODY


@pytest.fixture
def event_payload(event_body) -> dict:
    return json.loads(event_body)


@pytest.fixture
def client(settings):
    """Test client with the relay settings injected."""
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
