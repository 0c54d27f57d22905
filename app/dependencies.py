"""Request-scoped access to the receiver state built at startup."""

from dataclasses import dataclass

from fastapi import Request

from app.auth.stripe_signature import WebhookVerifier
from app.config import Settings
from app.events import HandlerRegistry, build_registry
from app.store import LastEventStore


@dataclass(frozen=True)
class ReceiverContext:
    settings: Settings
    verifier: WebhookVerifier
    registry: HandlerRegistry
    store: LastEventStore


def build_context(settings: Settings, registry: HandlerRegistry | None = None) -> ReceiverContext:
    return ReceiverContext(
        settings=settings,
        verifier=WebhookVerifier(
            settings.stripe_webhook_secret,
            settings.resolve_verification_mode(),
            settings.webhook_tolerance_seconds,
        ),
        registry=registry if registry is not None else build_registry(),
        store=LastEventStore(settings.last_webhook_file),
    )


def get_receiver(request: Request) -> ReceiverContext:
    return request.app.state.receiver
