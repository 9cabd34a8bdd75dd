"""
Device repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from devices.domain.device import Device


class DeviceRepository(ABC):
    """
    Abstract repository for Device entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def register(self, device: Device, device_limit: int) -> Tuple[Device, bool]:
        """
        Bind a machine to a license, or refresh it if already bound.

        A known machine only gets its last_seen_at refreshed (and is
        reactivated if it was deactivated). A new machine is inserted if
        the license still has a free slot. Counting and writing are atomic
        with respect to other registrations for the same license.

        Args:
            device: Device entity to insert
            device_limit: Maximum number of active devices for the license

        Returns:
            (device, created) where created is False for a known machine

        Raises:
            DeviceLimitReachedError: If the license has no free slot
        """
        pass

    @abstractmethod
    async def save(self, device: Device) -> Device:
        """
        Update an existing device entity.

        Args:
            device: Device entity to save

        Returns:
            Saved device entity
        """
        pass

    @abstractmethod
    async def find_by_license_and_computer(
        self, license_id: uuid.UUID, computer_id: str
    ) -> Optional[Device]:
        """
        Find the device a machine registered for a license.

        Args:
            license_id: License UUID
            computer_id: Machine identifier

        Returns:
            Device entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_license(self, license_id: uuid.UUID) -> List[Device]:
        """
        List the devices bound to a license.

        Args:
            license_id: License UUID

        Returns:
            List of Device entities
        """
        pass
