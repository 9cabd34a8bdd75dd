"""
Device domain events.
"""

import uuid
from typing import Optional

from core.domain.events import DomainEvent


class DeviceActivated(DomainEvent):
    """Event raised when a new machine is bound to a license."""

    def __init__(
        self,
        device_id: uuid.UUID,
        license_id: uuid.UUID,
        computer_id: str,
        device_name: Optional[str] = None,
        actor_id: Optional[uuid.UUID] = None,
    ):
        """
        Initialize DeviceActivated event.

        Args:
            device_id: Device UUID
            license_id: License UUID
            computer_id: Machine identifier
            device_name: Machine name
            actor_id: User who triggered the activation, None for clients
        """
        super().__init__(aggregate_id=str(device_id), actor_id=actor_id)
        self.device_id = device_id
        self.license_id = license_id
        self.computer_id = computer_id
        self.device_name = device_name
