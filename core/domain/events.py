"""
Domain events base classes and infrastructure.

Domain events represent something that happened in the domain.
They are used for decoupling modules and enabling event-driven architecture.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Optional

FieldDiff = Dict[str, Dict[str, Any]]


def plain_value(value: Any) -> Any:
    """Render a field value the way event payloads and activity details store it."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def diff_fields(before: Any, after: Any, fields: Iterable[str]) -> FieldDiff:
    """
    Describe the fields that differ between two versions of an entity.

    Returns:
        ``{field: {"from": old, "to": new}}`` with JSON-friendly values
    """
    return {
        name: {"from": plain_value(getattr(before, name)), "to": plain_value(getattr(after, name))}
        for name in fields
        if getattr(before, name) != getattr(after, name)
    }


class DomainEvent(ABC):
    """
    Base class for all domain events.

    Domain events represent something that happened in the domain.
    ``actor_id`` is the user who caused the change, or None for system actions.
    """

    def __init__(
        self,
        aggregate_id: str,
        actor_id: Optional[uuid.UUID] = None,
        occurred_at: Optional[datetime] = None,
        event_id: Optional[uuid.UUID] = None,
    ):
        self.event_id = event_id or uuid.uuid4()
        self.occurred_at = occurred_at or datetime.now(timezone.utc)
        self.aggregate_id = aggregate_id
        self.actor_id = actor_id
        self.event_type = type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "actor_id": str(self.actor_id) if self.actor_id else None,
            "event_type": self.event_type,
        }


class EventHandler(ABC):
    """
    Base class for event handlers.

    Event handlers process domain events asynchronously.
    """

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """
        Handle a domain event.

        Args:
            event: The domain event to handle
        """
        pass


class EventBus(ABC):
    """
    Abstract event bus for publishing and subscribing to domain events.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event.

        Args:
            event: The domain event to publish
        """
        pass

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        """
        Subscribe to a domain event type.

        Args:
            event_type: The type of event to subscribe to
            handler: The handler to call when event is published
        """
        pass
