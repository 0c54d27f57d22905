"""Event model and dispatch types."""

from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict

from app.errors import HandlerError


class Event(BaseModel):
    """A verified Stripe event."""
    model_config = ConfigDict(extra="allow")

    id: str
    type: str
    created: int = 0
    livemode: bool = False
    data: dict[str, Any] = {}

    @property
    def resource(self) -> dict[str, Any]:
        """The underlying object (payment intent, customer, ...), or {} if absent."""
        obj = (self.data or {}).get("object")
        return obj if isinstance(obj, dict) else {}

    @property
    def created_at(self) -> str:
        try:
            return datetime.fromtimestamp(self.created, tz=timezone.utc).isoformat()
        except (OverflowError, ValueError, OSError):
            return str(self.created)


class RouteOutcome(BaseModel):
    """Result of dispatching one event."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    handled: bool
    error: HandlerError | None = None


EventHandler = Callable[[Event], None]
HandlerRegistry = Mapping[str, EventHandler]
