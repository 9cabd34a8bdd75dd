"""
License lifecycle service.

Applies LicenseLifecycleManager decisions to stored licenses: writes
read-time corrections back, and reports every status change through
metrics, logs and LicenseStatusChanged events.
"""
import logging
import uuid
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from core.domain.events import EventBus
from core.metrics import license_status_transitions_total, licenses_swept_total
from licenses.domain.events import LicenseStatusChanged
from licenses.domain.license import License
from licenses.domain.services import LicenseLifecycleManager
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

EXPIRED = "expired"
INVOICE_CREATED = "invoice_created"
INVOICE_UPDATED = "invoice_updated"
INVOICE_DELETED = "invoice_deleted"
DEVICE_ACTIVATED = "device_activated"
LICENSE_UPDATED = "license_updated"


async def publish_status_changes(
    changes: Iterable[Tuple[License, License]],
    reason: str,
    event_bus: EventBus,
    actor_id: Optional[uuid.UUID] = None,
) -> None:
    """
    Report status changes that have already been persisted.

    Args:
        changes: (before, after) pairs
        reason: Why the status changed
        event_bus: Bus receiving LicenseStatusChanged events
        actor_id: User who caused the change, None for system actions
    """
    for before, after in changes:
        license_status_transitions_total.labels(
            from_status=before.status.value,
            to_status=after.status.value,
            reason=reason,
        ).inc()
        logger.info(
            "License %s status %s -> %s (%s)",
            after.id,
            before.status.value,
            after.status.value,
            reason,
        )
        await event_bus.publish(
            LicenseStatusChanged(
                license_id=after.id,
                key=after.key,
                from_status=before.status,
                to_status=after.status,
                reason=reason,
                actor_id=actor_id,
            )
        )


class LicenseObserver:
    """Returns licenses as they must be seen now, persisting expiry corrections."""

    def __init__(self, license_repository: LicenseRepository, event_bus: EventBus):
        self.license_repository = license_repository
        self.event_bus = event_bus

    async def observe(self, license: License, now: datetime) -> License:
        """
        Apply the read-time expiry check to one license.

        The write-back is conditional on the stored status still being
        Active, so concurrent readers converge on the same value.

        Args:
            license: License as stored
            now: Current time

        Returns:
            License as observed
        """
        observed = LicenseLifecycleManager.observe(license, now)
        if observed is license:
            return license

        written = await self.license_repository.update_status(
            license.id, license.status, observed.status, now
        )
        if written:
            await publish_status_changes([(license, observed)], EXPIRED, self.event_bus)
        return observed

    async def observe_all(self, licenses: Iterable[License], now: datetime) -> List[License]:
        return [await self.observe(license, now) for license in licenses]

    async def sweep(self, now: datetime, trigger: str = "list") -> int:
        """
        Expire every overdue Active license in one statement and report
        each change like a read-time correction.

        Args:
            now: Current time
            trigger: What started the sweep, used as metric label

        Returns:
            Number of licenses expired
        """
        changes = await self.license_repository.expire_overdue(now)
        if changes:
            licenses_swept_total.labels(trigger=trigger).inc(len(changes))
            logger.info("Expired %d overdue license(s) before %s", len(changes), trigger)
            await publish_status_changes(changes, EXPIRED, self.event_bus)
        return len(changes)
