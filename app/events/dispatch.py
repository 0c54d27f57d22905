"""Event routing - exact-type dispatch with an unhandled-type fallback."""

import json
import logging
from collections.abc import Mapping
from types import MappingProxyType

from app.errors import HandlerError
from app.events.base import Event, EventHandler, HandlerRegistry, RouteOutcome
from app.events.handlers import DEFAULT_HANDLERS

logger = logging.getLogger(__name__)


def build_registry(handlers: Mapping[str, EventHandler] | None = None) -> HandlerRegistry:
    """Freeze a type -> handler mapping. Built once at startup, read-only afterwards."""
    return MappingProxyType(dict(DEFAULT_HANDLERS if handlers is None else handlers))


def log_unhandled(event: Event) -> None:
    """Fallback for event types with no registered handler."""
    logger.info(f"Unhandled event type: {event.type}")
    logger.info(f"   Event data: {json.dumps(event.resource, indent=2, default=str)}")


def route(event: Event, registry: HandlerRegistry) -> RouteOutcome:
    """Run exactly one handler (or the fallback) for ``event``.

    Handler failures are contained: they come back as ``outcome.error`` and
    never propagate to the caller.
    """
    handler = registry.get(event.type)
    handled = handler is not None

    try:
        if handled:
            handler(event)
        else:
            log_unhandled(event)
    except Exception as e:
        error = HandlerError(event.type, event.id, str(e) or type(e).__name__)
        logger.error(f"Error processing event {event.type} ({event.id}): {error.message}")
        return RouteOutcome(handled=handled, error=error)

    return RouteOutcome(handled=handled)
