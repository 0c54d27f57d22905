"""Error types for webhook ingestion and shared error-parsing utilities."""

import json
from enum import Enum


class WebhookError(Exception):
    """Base exception for the webhook receiver."""


class VerificationError(WebhookError):
    """The inbound payload could not be authenticated or parsed.

    Always surfaced to the sender as HTTP 400 with ``reason`` in the body.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class HandlerError(WebhookError):
    """A per-type handler raised while processing an authenticated event."""

    def __init__(self, event_type: str, event_id: str, message: str):
        self.event_type = event_type
        self.event_id = event_id
        self.message = message
        super().__init__(f"{event_type} ({event_id}): {message}")


class PersistErrorKind(str, Enum):
    INVALID_DATA = "invalid_data"
    EMPTY_DATA = "empty_data"
    CORRUPT = "corrupt"
    WRITE_FAILED = "write_failed"


class PersistError(WebhookError):
    """The last-event slot could not be written or read back."""

    def __init__(self, kind: PersistErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"{kind.value}: {message}")


def parse_stripe_error(response_text: str) -> str:
    """Extract a readable message from a Stripe API error response.

    Stripe returns JSON like {"error": {"type": "invalid_request_error", "message": "..."}}.
    Returns "type: message" when parseable, raw text otherwise.
    """
    try:
        body = json.loads(response_text)
        err = body.get("error", {})
        msg = err.get("message", "")
        err_type = err.get("type", "")
        if msg:
            return f"{err_type}: {msg}" if err_type else msg
    except Exception:
        pass
    return response_text
