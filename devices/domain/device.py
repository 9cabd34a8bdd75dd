"""
Device domain entity.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Device:
    """
    Device domain entity.

    A machine, identified by ``computer_id``, that activated a license.
    """

    id: uuid.UUID
    license_id: uuid.UUID
    computer_id: str
    is_active: bool
    activated_at: datetime
    last_seen_at: datetime
    name: Optional[str] = None
    processor: Optional[str] = None
    os: Optional[str] = None
    ram: Optional[str] = None

    def __post_init__(self):
        """Validate device entity."""
        if not self.license_id:
            raise ValueError("License ID is required")
        if not self.computer_id or len(self.computer_id.strip()) == 0:
            raise ValueError("Computer ID cannot be empty")
        if len(self.computer_id) > 255:
            raise ValueError("Computer ID too long")

    @classmethod
    def create(
        cls,
        license_id: uuid.UUID,
        computer_id: str,
        now: datetime,
        name: Optional[str] = None,
        processor: Optional[str] = None,
        os: Optional[str] = None,
        ram: Optional[str] = None,
        device_id: Optional[uuid.UUID] = None,
    ) -> "Device":
        """
        Create a new, active Device entity.

        Args:
            license_id: License UUID the device binds to
            computer_id: Stable machine identifier reported by the client
            now: Activation timestamp
            name: Machine name
            processor: CPU description
            os: Operating system description
            ram: Memory description
            device_id: Optional UUID (generated if not provided)

        Returns:
            Device entity instance
        """
        return cls(
            id=device_id or uuid.uuid4(),
            license_id=license_id,
            computer_id=computer_id.strip(),
            is_active=True,
            activated_at=now,
            last_seen_at=now,
            name=name,
            processor=processor,
            os=os,
            ram=ram,
        )

    def touch(self, now: datetime) -> "Device":
        """
        Create a new Device instance seen at ``now``.

        Returns:
            New Device instance with updated last_seen_at
        """
        return replace(self, last_seen_at=now)
