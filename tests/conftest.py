"""Shared test fixtures."""

import json
import time

import pytest
from httpx import ASGITransport, AsyncClient

from app.auth.stripe_signature import generate_signature_header
from app.config import Settings

WEBHOOK_SECRET = "whsec_test_secret"


def _make_event(event_type: str = "payment_intent.succeeded", resource: dict | None = None, **extra) -> dict:
    event = {
        "id": "evt_test_123",
        "object": "event",
        "type": event_type,
        "created": int(time.time()),
        "livemode": False,
        "data": {"object": resource if resource is not None else {"id": "pi_123", "amount": 2999, "currency": "usd"}},
    }
    event.update(extra)
    return event


def _signed_request(event: dict, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> tuple[bytes, dict]:
    """Serialize an event and build the headers Stripe would send with it."""
    payload = json.dumps(event).encode("utf-8")
    headers = {
        "Content-Type": "application/json",
        "Stripe-Signature": generate_signature_header(payload, secret, timestamp),
    }
    return payload, headers


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "last_webhook.json"


@pytest.fixture
def settings(store_path):
    return Settings(
        _env_file=None,
        stripe_webhook_secret=WEBHOOK_SECRET,
        stripe_secret_key="",
        webhook_verification_mode="auto",
        last_webhook_file=str(store_path),
    )


@pytest.fixture
def app(settings):
    """Create a test application instance writing to a temporary store."""
    from app.main import create_app

    return create_app(settings)


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def webhook_secret():
    return WEBHOOK_SECRET


@pytest.fixture
def make_event():
    """Factory for Stripe-shaped event dicts."""
    return _make_event


@pytest.fixture
def signed_request():
    """Factory returning (raw body, headers) for a signed delivery."""
    return _signed_request
