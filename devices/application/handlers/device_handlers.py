"""
Device activation and heartbeat handlers.
"""
import logging

from billing.ports.invoice_repository import InvoiceRepository
from catalog.ports.plan_repository import PlanRepository
from core.domain.events import EventBus
from core.domain.exceptions import (
    DeviceLimitReachedError,
    DeviceNotFoundError,
    InvalidLicenseKeyError,
    LicenseExpiredError,
    LicenseInactiveError,
    LicenseNotFoundError,
)
from core.domain.value_objects import LicenseStatus
from core.infrastructure.clock import system_clock
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import device_activations_total
from core.ports.clock import Clock
from devices.application.commands.device_commands import ActivateDeviceCommand, HeartbeatCommand
from devices.application.dto.device_dto import (
    ActivationResultDTO,
    HeartbeatDTO,
    device_to_dto,
)
from devices.domain.device import Device
from devices.domain.events import DeviceActivated
from devices.domain.services import DEFAULT_DEVICE_LIMIT, ActivationPolicy
from devices.ports.device_repository import DeviceRepository
from licenses.application.dto.license_dto import license_to_dto
from licenses.application.services.lifecycle_service import (
    DEVICE_ACTIVATED,
    LicenseObserver,
    publish_status_changes,
)
from licenses.domain.services import LicenseLifecycleManager
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ActivateDeviceHandler:
    """Handler for ActivateDeviceCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        plan_repository: PlanRepository,
        invoice_repository: InvoiceRepository,
        device_repository: DeviceRepository,
        clock: Clock = system_clock,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.plan_repository = plan_repository
        self.invoice_repository = invoice_repository
        self.device_repository = device_repository
        self.clock = clock
        self.event_bus = event_bus
        self.observer = LicenseObserver(license_repository, event_bus)

    async def handle(self, command: ActivateDeviceCommand) -> ActivationResultDTO:
        """
        Handle activate device command.

        Args:
            command: ActivateDeviceCommand

        Returns:
            ActivationResultDTO with the device and the license as stored afterwards

        Raises:
            InvalidLicenseKeyError: If no license has the key
            LicenseExpiredError: If the license is Expired
            LicenseInactiveError: If the license waits for an unpaid invoice
            DeviceLimitReachedError: If the plan's device limit is used up
        """
        now = self.clock.now()
        key = (command.license_key or "").strip()
        license = await self.license_repository.find_by_key(key) if key else None
        if not license:
            device_activations_total.labels(outcome="invalid_key").inc()
            raise InvalidLicenseKeyError()

        license = await self.observer.observe(license, now)

        invoice_status = None
        if license.invoice_id:
            invoice = await self.invoice_repository.find_by_id(license.invoice_id)
            invoice_status = invoice.status if invoice else None

        try:
            ActivationPolicy.ensure_usable(license, invoice_status)
        except LicenseExpiredError:
            device_activations_total.labels(outcome="expired").inc()
            raise
        except LicenseInactiveError:
            device_activations_total.labels(outcome="inactive").inc()
            raise

        target = LicenseLifecycleManager.apply_expiry(
            ActivationPolicy.status_after_activation(license), license.expires_at, now
        )
        if target == LicenseStatus.EXPIRED:
            device_activations_total.labels(outcome="expired").inc()
            raise LicenseExpiredError(f"License {license.key} has expired")

        plan = await self.plan_repository.find_by_id(license.plan_id)
        device_limit = plan.device_limit if plan else DEFAULT_DEVICE_LIMIT

        candidate = Device.create(
            license_id=license.id,
            computer_id=command.computer_id,
            now=now,
            name=command.name,
            processor=command.processor,
            os=command.os,
            ram=command.ram,
        )
        try:
            device, created = await self.device_repository.register(candidate, device_limit)
        except DeviceLimitReachedError:
            device_activations_total.labels(outcome="limit_reached").inc()
            logger.info("Device limit reached for license %s", license.id)
            raise

        if target != license.status:
            written = await self.license_repository.update_status(
                license.id, license.status, target, now
            )
            if written:
                activated = license.with_status(target, now)
                await publish_status_changes(
                    [(license, activated)], DEVICE_ACTIVATED, self.event_bus
                )
                license = activated

        device_activations_total.labels(outcome="activated" if created else "refreshed").inc()
        if created:
            await self.event_bus.publish(
                DeviceActivated(
                    device_id=device.id,
                    license_id=license.id,
                    computer_id=device.computer_id,
                    device_name=device.name,
                )
            )
        return ActivationResultDTO(
            device=device_to_dto(device), license=license_to_dto(license), created=created
        )


class HeartbeatHandler:
    """Handler for HeartbeatCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        device_repository: DeviceRepository,
        clock: Clock = system_clock,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.device_repository = device_repository
        self.clock = clock
        self.observer = LicenseObserver(license_repository, event_bus)

    async def handle(self, command: HeartbeatCommand) -> HeartbeatDTO:
        """
        Handle heartbeat command.

        Returns:
            HeartbeatDTO with the license status in lower case

        Raises:
            LicenseNotFoundError: If no license has the key
            DeviceNotFoundError: If the machine never activated the license
        """
        now = self.clock.now()
        key = (command.license_key or "").strip()
        license = await self.license_repository.find_by_key(key) if key else None
        if not license:
            raise LicenseNotFoundError(f"License with key {key} not found")
        license = await self.observer.observe(license, now)

        device = await self.device_repository.find_by_license_and_computer(
            license.id, (command.computer_id or "").strip()
        )
        if not device:
            raise DeviceNotFoundError(
                f"Device {command.computer_id} is not registered for this license"
            )
        device = await self.device_repository.save(device.touch(now))

        return HeartbeatDTO(
            license_key=license.key,
            status=license.status.value.lower(),
            expires_at=license.expires_at,
            last_seen_at=device.last_seen_at,
        )
