"""
Django implementation of DeviceRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import logging
import uuid
from typing import List, Optional, Tuple

from asgiref.sync import sync_to_async

from core.domain.exceptions import DeviceLimitReachedError, LicenseNotFoundError
from core.infrastructure.database import run_atomic
from devices.domain.device import Device
from devices.domain.services import ActivationPolicy
from devices.infrastructure.models import Device as DeviceModel
from devices.ports.device_repository import DeviceRepository
from licenses.infrastructure.models import License as LicenseModel

logger = logging.getLogger(__name__)


class DjangoDeviceRepository(DeviceRepository):
    """Django ORM implementation of DeviceRepository."""

    def _to_domain(self, model: DeviceModel) -> Device:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Device model

        Returns:
            Device domain entity
        """
        return Device(
            id=model.id,
            license_id=model.license_id,
            computer_id=model.computer_id,
            is_active=model.is_active,
            activated_at=model.activated_at,
            last_seen_at=model.last_seen_at,
            name=model.name,
            processor=model.processor,
            os=model.os,
            ram=model.ram,
        )

    def _to_model(self, device: Device) -> DeviceModel:
        return DeviceModel(
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

    def _ensure_free_slot(self, license_id: uuid.UUID, device_limit: int) -> None:
        active = DeviceModel.objects.filter(license_id=license_id, is_active=True).count()
        if not ActivationPolicy.has_free_slot(active, device_limit):
            raise DeviceLimitReachedError(
                f"License already has {active} active device(s) of {device_limit} allowed"
            )

    def _register_sync(self, device: Device, device_limit: int) -> Tuple[Device, bool]:
        # Lock the license row so concurrent registrations queue up.
        if not LicenseModel.objects.select_for_update().filter(id=device.license_id).exists():
            raise LicenseNotFoundError(f"License {device.license_id} not found")

        existing = DeviceModel.objects.filter(
            license_id=device.license_id, computer_id=device.computer_id
        ).first()
        if existing is not None:
            if not existing.is_active:
                self._ensure_free_slot(device.license_id, device_limit)
                existing.is_active = True
            existing.last_seen_at = device.last_seen_at
            existing.save(update_fields=["is_active", "last_seen_at"])
            return self._to_domain(existing), False

        self._ensure_free_slot(device.license_id, device_limit)
        model = self._to_model(device)
        model.save(force_insert=True)
        return self._to_domain(model), True

    async def register(self, device: Device, device_limit: int) -> Tuple[Device, bool]:
        """
        Bind a machine to a license, or refresh it if already bound.

        Returns:
            (device, created) where created is False for a known machine

        Raises:
            DeviceLimitReachedError: If a new or reactivated device does not fit
        """
        saved, created = await run_atomic(self._register_sync, device, device_limit)
        if created:
            logger.info(
                "Registered device %s for license %s", saved.computer_id, saved.license_id
            )
        return saved, created

    @sync_to_async
    def save(self, device: Device) -> Device:
        """Update an existing device entity."""
        model = self._to_model(device)
        model.save(force_update=True)
        return self._to_domain(model)

    @sync_to_async
    def find_by_license_and_computer(
        self, license_id: uuid.UUID, computer_id: str
    ) -> Optional[Device]:
        """Find the device a machine registered for a license."""
        model = DeviceModel.objects.filter(license_id=license_id, computer_id=computer_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_license(self, license_id: uuid.UUID) -> List[Device]:
        """List the devices bound to a license."""
        return [
            self._to_domain(model) for model in DeviceModel.objects.filter(license_id=license_id)
        ]
