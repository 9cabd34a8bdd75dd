"""
Device DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from devices.domain.device import Device
from licenses.application.dto.license_dto import LicenseDTO


@dataclass
class DeviceDTO:
    """DTO for device information."""

    id: uuid.UUID
    license_id: uuid.UUID
    computer_id: str
    name: Optional[str]
    processor: Optional[str]
    os: Optional[str]
    ram: Optional[str]
    is_active: bool
    activated_at: datetime
    last_seen_at: datetime


@dataclass
class ActivationResultDTO:
    """DTO for activate device response."""

    device: DeviceDTO
    license: LicenseDTO
    created: bool


@dataclass
class HeartbeatDTO:
    """DTO for heartbeat response."""

    license_key: str
    status: str
    expires_at: Optional[datetime]
    last_seen_at: datetime


def device_to_dto(device: Device) -> DeviceDTO:
    return DeviceDTO(
        id=device.id,
        license_id=device.license_id,
        computer_id=device.computer_id,
        name=device.name,
        processor=device.processor,
        os=device.os,
        ram=device.ram,
        is_active=device.is_active,
        activated_at=device.activated_at,
        last_seen_at=device.last_seen_at,
    )
