"""
Stripe Events

Event model, per-type handlers and the dispatch table.
"""

from .base import Event, HandlerRegistry, RouteOutcome
from .dispatch import build_registry, route

__all__ = ["Event", "HandlerRegistry", "RouteOutcome", "build_registry", "route"]
