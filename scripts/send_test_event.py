#!/usr/bin/env python3
"""
Signed Test Event Sender

Builds a sample Stripe event, signs it with STRIPE_WEBHOOK_SECRET the same way
Stripe does, and POSTs it to a running observer.

Usage:
    python scripts/send_test_event.py [event_type] [--url URL] [--bad-signature]

Examples:
    python scripts/send_test_event.py payment_intent.succeeded
    python scripts/send_test_event.py foo.bar
    python scripts/send_test_event.py --bad-signature
"""

import argparse
import json
import os
import sys
import time
import uuid
from pathlib import Path

# Add parent directory to path so we can import from app
sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx
from dotenv import load_dotenv

from app.auth.stripe_signature import SIGNATURE_HEADER, generate_signature_header

# Load environment variables
load_dotenv()


def build_event(event_type: str) -> dict:
    created = int(time.time())
    return {
        "id": f"evt_test_{uuid.uuid4().hex[:16]}",
        "object": "event",
        "type": event_type,
        "created": created,
        "livemode": False,
        "data": {
            "object": {
                "id": f"pi_test_{uuid.uuid4().hex[:16]}",
                "object": "payment_intent",
                "amount": 2999,
                "currency": "usd",
                "customer": None,
                "created": created,
            }
        },
    }


def main():
    parser = argparse.ArgumentParser(description="Send a signed test webhook")
    parser.add_argument("event_type", nargs="?", default="payment_intent.succeeded")
    parser.add_argument(
        "--url", default=f"http://localhost:{os.environ.get('PORT', '4242')}/webhook"
    )
    parser.add_argument("--bad-signature", action="store_true", help="Send a tampered signature")
    args = parser.parse_args()

    secret = os.environ.get("STRIPE_WEBHOOK_SECRET", "")
    payload = json.dumps(build_event(args.event_type)).encode("utf-8")

    headers = {"Content-Type": "application/json"}
    if secret:
        signature = generate_signature_header(payload, secret)
        if args.bad_signature:
            signature = signature[:-1] + ("0" if signature[-1] != "0" else "1")
        headers[SIGNATURE_HEADER] = signature
    else:
        print("STRIPE_WEBHOOK_SECRET not set - sending unsigned event")

    print(f"POST {args.url} ({args.event_type})")

    try:
        response = httpx.post(args.url, content=payload, headers=headers, timeout=10.0)
    except httpx.HTTPError as e:
        print("ERROR:", str(e))
        print()
        print("Is the observer running?  python -m app.server_cli")
        sys.exit(1)

    print(f"Status: {response.status_code}")
    print(response.text)
    sys.exit(0 if response.is_success else 1)


if __name__ == "__main__":
    main()
