"""Tests for Stripe signature verification."""

import hashlib
import hmac
import json
import time

import pytest

from app.auth.stripe_signature import (
    WebhookVerifier,
    compute_signature,
    generate_signature_header,
    verify,
)
from app.errors import VerificationError

SECRET = "whsec_unit"
NOW = int(time.time())
PAYLOAD = json.dumps(
    {"id": "evt_1", "type": "payment_intent.succeeded", "created": NOW, "data": {"object": {"id": "pi_1"}}}
).encode("utf-8")


def test_compute_signature_matches_stripe_scheme():
    """v1 is HMAC-SHA256 over '{t}.{body}' keyed with the secret."""
    expected = hmac.new(SECRET.encode(), f"{NOW}.".encode() + PAYLOAD, hashlib.sha256).hexdigest()
    assert compute_signature(PAYLOAD, SECRET, NOW) == expected


def test_verify_valid_signature_returns_event():
    header = generate_signature_header(PAYLOAD, SECRET, NOW)
    event = verify(PAYLOAD, header, SECRET)
    assert event.id == "evt_1"
    assert event.type == "payment_intent.succeeded"
    assert event.resource == {"id": "pi_1"}


def test_verify_rejects_mutated_body():
    """Flipping one byte of the body breaks the signature."""
    header = generate_signature_header(PAYLOAD, SECRET, NOW)
    tampered = PAYLOAD.replace(b"pi_1", b"pi_2")
    with pytest.raises(VerificationError, match="No signatures found matching"):
        verify(tampered, header, SECRET)


def test_verify_rejects_mutated_token():
    header = generate_signature_header(PAYLOAD, SECRET, NOW)
    last = header[-1]
    tampered = header[:-1] + ("0" if last != "0" else "1")
    with pytest.raises(VerificationError, match="No signatures found matching"):
        verify(PAYLOAD, tampered, SECRET)


def test_verify_rejects_wrong_secret():
    header = generate_signature_header(PAYLOAD, "whsec_other", NOW)
    with pytest.raises(VerificationError):
        verify(PAYLOAD, header, SECRET)


def test_verify_rejects_stale_timestamp_even_with_matching_hash():
    """A capture replayed 20 minutes later fails with a 5 minute tolerance."""
    sent_at = NOW - 20 * 60
    header = generate_signature_header(PAYLOAD, SECRET, sent_at)
    with pytest.raises(VerificationError, match="Timestamp outside the tolerance zone"):
        verify(PAYLOAD, header, SECRET, tolerance=300)


def test_verify_accepts_timestamp_inside_tolerance():
    header = generate_signature_header(PAYLOAD, SECRET, int(time.time()) - 240)
    assert verify(PAYLOAD, header, SECRET, tolerance=300).id == "evt_1"


def test_verify_accepts_sender_clock_ahead():
    header = generate_signature_header(PAYLOAD, SECRET, NOW + 600)
    assert verify(PAYLOAD, header, SECRET, tolerance=300).id == "evt_1"


def test_verify_zero_tolerance_disables_age_check():
    header = generate_signature_header(PAYLOAD, SECRET, NOW - 86_400)
    assert verify(PAYLOAD, header, SECRET, tolerance=0).id == "evt_1"


def test_verify_accepts_any_matching_v1_during_secret_roll():
    good = compute_signature(PAYLOAD, SECRET, NOW)
    header = f"t={NOW},v1={'0' * 64},v1={good},v0=legacy"
    assert verify(PAYLOAD, header, SECRET).id == "evt_1"


@pytest.mark.parametrize("header", [None, ""])
def test_verify_rejects_missing_header(header):
    with pytest.raises(VerificationError, match="No stripe-signature header"):
        verify(PAYLOAD, header, SECRET)


@pytest.mark.parametrize("header", ["garbage", "v1=abc", "t=notanumber,v1=abc"])
def test_verify_rejects_unparsable_header(header):
    with pytest.raises(VerificationError, match="Unable to extract timestamp"):
        verify(PAYLOAD, header, SECRET)


def test_verify_rejects_header_without_v1():
    with pytest.raises(VerificationError, match="No signatures found with expected scheme"):
        verify(PAYLOAD, f"t={NOW},v0=abc", SECRET)


def test_verify_rejects_signed_non_json_body():
    body = b"not json"
    header = generate_signature_header(body, SECRET, NOW)
    with pytest.raises(VerificationError, match="Invalid payload"):
        verify(body, header, SECRET)


def test_verify_rejects_event_without_type():
    body = json.dumps({"id": "evt_1", "data": {}}).encode()
    header = generate_signature_header(body, SECRET, NOW)
    with pytest.raises(VerificationError, match="missing required field 'type'"):
        verify(body, header, SECRET)


def test_verify_treats_missing_data_as_empty():
    body = json.dumps({"id": "evt_1", "type": "ping"}).encode()
    header = generate_signature_header(body, SECRET, NOW)
    event = verify(body, header, SECRET)
    assert event.data == {}
    assert event.resource == {}


def test_permissive_mode_parses_without_secret():
    event = verify(PAYLOAD, None, None, mode="permissive-test")
    assert event.type == "payment_intent.succeeded"


def test_permissive_mode_still_rejects_bad_json():
    with pytest.raises(VerificationError, match="Invalid payload"):
        verify(b"{", None, None, mode="permissive-test")


def test_strict_mode_without_secret_rejects_everything():
    with pytest.raises(VerificationError, match="secret is not configured"):
        verify(PAYLOAD, "t=1,v1=abc", None, mode="strict")


def test_permissive_mode_with_secret_still_verifies():
    verifier = WebhookVerifier(SECRET, "permissive-test")
    with pytest.raises(VerificationError):
        verifier.verify(PAYLOAD, None, "application/json")


def test_verifier_rejects_non_json_content_type():
    verifier = WebhookVerifier(SECRET, "strict")
    header = generate_signature_header(PAYLOAD, SECRET)
    with pytest.raises(VerificationError, match="Unsupported content type"):
        verifier.verify(PAYLOAD, header, "text/plain")


def test_verifier_accepts_json_content_type_with_charset():
    verifier = WebhookVerifier(SECRET, "strict")
    header = generate_signature_header(PAYLOAD, SECRET)
    assert verifier.verify(PAYLOAD, header, "application/json; charset=utf-8").id == "evt_1"


def test_verify_rejects_non_ascii_signature():
    """Latin-1 decoded header bytes count as a mismatch, not a crash."""
    with pytest.raises(VerificationError, match="No signatures found matching"):
        verify(PAYLOAD, f"t={int(time.time())},v1=\xe9abc", SECRET)


def test_verify_rejects_signed_non_utf8_body():
    body = b"\xff\xfe{}"
    header = generate_signature_header(body, SECRET)
    with pytest.raises(VerificationError, match="Invalid payload"):
        verify(body, header, SECRET)
