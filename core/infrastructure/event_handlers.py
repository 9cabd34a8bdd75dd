"""
Event handlers for domain events.

These handlers process domain events after the originating change has
been committed, for side effects like the activity log.
"""

import logging
from typing import Optional

from accounts.domain.activity import ActivityEntry
from accounts.infrastructure.repositories.django_activity_log_repository import (
    DjangoActivityLogRepository,
)
from accounts.ports.activity_log_repository import ActivityLogRepository
from billing.domain.events import InvoiceCreated, InvoiceDeleted, InvoiceUpdated
from core.domain.events import DomainEvent, EventBus, EventHandler
from core.domain.value_objects import ActivityAction, EntityType
from devices.domain.events import DeviceActivated
from licenses.domain.events import (
    LicenseCreated,
    LicenseDeleted,
    LicenseStatusChanged,
    LicenseUpdated,
)

logger = logging.getLogger(__name__)


def activity_entry_for(event: DomainEvent) -> Optional[ActivityEntry]:
    """
    Translate a domain event into an activity log entry.

    Args:
        event: Domain event

    Returns:
        ActivityEntry, or None for events that are not logged
    """
    if isinstance(event, LicenseCreated):
        return ActivityEntry(
            action=ActivityAction.CREATE,
            entity_type=EntityType.LICENSE,
            entity_name=event.key,
            actor_id=event.actor_id,
            details={"status": event.status.value},
        )
    if isinstance(event, LicenseUpdated):
        return ActivityEntry(
            action=ActivityAction.UPDATE,
            entity_type=EntityType.LICENSE,
            entity_name=event.key,
            actor_id=event.actor_id,
            details={"changes": event.changes},
        )
    if isinstance(event, LicenseDeleted):
        return ActivityEntry(
            action=ActivityAction.DELETE,
            entity_type=EntityType.LICENSE,
            entity_name=event.key,
            actor_id=event.actor_id,
        )
    if isinstance(event, LicenseStatusChanged):
        return ActivityEntry(
            action=ActivityAction.UPDATE,
            entity_type=EntityType.LICENSE,
            entity_name=event.key,
            actor_id=event.actor_id,
            details={
                "status": {"from": event.from_status.value, "to": event.to_status.value},
                "reason": event.reason,
            },
        )
    if isinstance(event, InvoiceCreated):
        return ActivityEntry(
            action=ActivityAction.CREATE,
            entity_type=EntityType.INVOICE,
            entity_name=event.invoice_number,
            actor_id=event.actor_id,
            details={"status": event.status.value, "licenses_issued": event.licenses_issued},
        )
    if isinstance(event, InvoiceUpdated):
        return ActivityEntry(
            action=ActivityAction.UPDATE,
            entity_type=EntityType.INVOICE,
            entity_name=event.invoice_number,
            actor_id=event.actor_id,
            details={"changes": event.changes},
        )
    if isinstance(event, InvoiceDeleted):
        return ActivityEntry(
            action=ActivityAction.DELETE,
            entity_type=EntityType.INVOICE,
            entity_name=event.invoice_number,
            actor_id=event.actor_id,
        )
    if isinstance(event, DeviceActivated):
        return ActivityEntry(
            action=ActivityAction.CREATE,
            entity_type=EntityType.DEVICE,
            entity_name=event.device_name or event.computer_id,
            actor_id=event.actor_id,
            details={"license_id": str(event.license_id), "computer_id": event.computer_id},
        )
    return None


class ActivityLogEventHandler(EventHandler):
    """
    Event handler for the activity log.

    Writes one activity row per license, invoice and device event.
    """

    def __init__(self, repository: Optional[ActivityLogRepository] = None):
        self.repository = repository or DjangoActivityLogRepository()

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for activity logging.

        Args:
            event: Domain event to log
        """
        entry = activity_entry_for(event)
        if entry is None:
            return
        await self.repository.record(entry)
        logger.debug(
            "Activity logged: %s",
            event.event_type,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
            },
        )


LOGGED_EVENTS = (
    LicenseCreated,
    LicenseUpdated,
    LicenseDeleted,
    LicenseStatusChanged,
    InvoiceCreated,
    InvoiceUpdated,
    InvoiceDeleted,
    DeviceActivated,
)

activity_log_handler = ActivityLogEventHandler()


def register_event_handlers(bus: Optional[EventBus] = None):
    """Register all event handlers with the event bus. Safe to call twice."""
    from core.infrastructure.events import event_bus

    bus = bus or event_bus
    for event_type in LOGGED_EVENTS:
        bus.subscribe(event_type, activity_log_handler)

    logger.info("Event handlers registered")
