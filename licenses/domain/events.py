"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent
from core.domain.value_objects import LicenseStatus


class LicenseCreated(DomainEvent):
    """Event raised when a license is created."""

    def __init__(
        self,
        license_id: uuid.UUID,
        key: str,
        status: LicenseStatus,
        actor_id: Optional[uuid.UUID] = None,
    ):
        """
        Initialize LicenseCreated event.

        Args:
            license_id: License UUID
            key: License key
            status: Status the license was created with
            actor_id: User who created the license
        """
        super().__init__(aggregate_id=str(license_id), actor_id=actor_id)
        self.license_id = license_id
        self.key = key
        self.status = status


class LicenseUpdated(DomainEvent):
    """Event raised when license fields are edited."""

    def __init__(
        self,
        license_id: uuid.UUID,
        key: str,
        changes: Dict[str, Dict[str, Any]],
        actor_id: Optional[uuid.UUID] = None,
    ):
        """
        Initialize LicenseUpdated event.

        Args:
            license_id: License UUID
            key: License key
            changes: ``{field: {"from": old, "to": new}}`` for each changed field
            actor_id: User who edited the license
        """
        super().__init__(aggregate_id=str(license_id), actor_id=actor_id)
        self.license_id = license_id
        self.key = key
        self.changes = changes


class LicenseDeleted(DomainEvent):
    """Event raised when a license is deleted."""

    def __init__(self, license_id: uuid.UUID, key: str, actor_id: Optional[uuid.UUID] = None):
        super().__init__(aggregate_id=str(license_id), actor_id=actor_id)
        self.license_id = license_id
        self.key = key


class LicenseStatusChanged(DomainEvent):
    """
    Event raised when the lifecycle moves a license to another status.

    ``reason`` is one of "expired", "invoice_created", "invoice_updated",
    "invoice_deleted" or "device_activated".
    """

    def __init__(
        self,
        license_id: uuid.UUID,
        key: str,
        from_status: LicenseStatus,
        to_status: LicenseStatus,
        reason: str,
        actor_id: Optional[uuid.UUID] = None,
    ):
        super().__init__(aggregate_id=str(license_id), actor_id=actor_id)
        self.license_id = license_id
        self.key = key
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
