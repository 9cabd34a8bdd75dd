"""
Unit tests for device activation and heartbeat.
"""

from dataclasses import replace
from datetime import timedelta

import pytest

from billing.domain.invoice import Invoice
from core.domain.exceptions import (
    DeviceLimitReachedError,
    DeviceNotFoundError,
    InvalidLicenseKeyError,
    LicenseExpiredError,
    LicenseInactiveError,
    LicenseNotFoundError,
)
from core.domain.value_objects import InvoiceStatus, LicenseStatus
from devices.application.commands.device_commands import ActivateDeviceCommand, HeartbeatCommand
from devices.application.handlers.device_handlers import ActivateDeviceHandler, HeartbeatHandler
from devices.domain.events import DeviceActivated
from devices.domain.services import ActivationPolicy
from licenses.domain.events import LicenseStatusChanged


@pytest.fixture
def activate_handler(
    license_repository, plan_repository, invoice_repository, device_repository, clock, event_bus
):
    return ActivateDeviceHandler(
        license_repository=license_repository,
        plan_repository=plan_repository,
        invoice_repository=invoice_repository,
        device_repository=device_repository,
        clock=clock,
        event_bus=event_bus,
    )


@pytest.fixture
def heartbeat_handler(license_repository, device_repository, clock, event_bus):
    return HeartbeatHandler(
        license_repository=license_repository,
        device_repository=device_repository,
        clock=clock,
        event_bus=event_bus,
    )


def _invoice(invoice_repository, company, now, status):
    invoice = Invoice.create(
        company_id=company.id, issue_date=now, due_date=now, now=now, status=status
    )
    invoice_repository.invoices[invoice.id] = invoice
    return invoice


def _activate(key, computer_id="PC-001"):
    return ActivateDeviceCommand(
        license_key=key, computer_id=computer_id, name="Front desk", os="Windows 11"
    )


@pytest.mark.asyncio
class TestActivateDeviceHandler:
    """Tests for ActivateDeviceHandler."""

    async def test_activate_active_license(
        self, activate_handler, make_license, event_bus, now
    ):
        """Test a first activation creates an active device."""
        license = make_license(status=LicenseStatus.ACTIVE, expires_at=now + timedelta(days=30))

        result = await activate_handler.handle(_activate(license.key))

        assert result.created
        assert result.device.computer_id == "PC-001"
        assert result.device.is_active
        assert result.license.status == "Active"
        (event,) = event_bus.of_type(DeviceActivated)
        assert event.license_id == license.id

    async def test_reactivation_refreshes_device(
        self, activate_handler, make_license, device_repository, clock, now
    ):
        """Test the same machine activating again is idempotent."""
        license = make_license(status=LicenseStatus.ACTIVE)
        first = await activate_handler.handle(_activate(license.key))

        clock.advance(timedelta(hours=2))
        second = await activate_handler.handle(_activate(license.key))

        assert not second.created
        assert second.device.id == first.device.id
        assert second.device.last_seen_at == now + timedelta(hours=2)
        assert len(device_repository.devices) == 1

    async def test_device_limit(self, activate_handler, make_license):
        """Test a third machine is refused on a two-device plan."""
        license = make_license(status=LicenseStatus.ACTIVE)
        await activate_handler.handle(_activate(license.key, "PC-001"))
        await activate_handler.handle(_activate(license.key, "PC-002"))

        with pytest.raises(DeviceLimitReachedError):
            await activate_handler.handle(_activate(license.key, "PC-003"))

    async def test_limit_ignores_deactivated_devices(
        self, activate_handler, make_license, device_repository
    ):
        """Test deactivated devices free their slot."""
        license = make_license(status=LicenseStatus.ACTIVE)
        first = await activate_handler.handle(_activate(license.key, "PC-001"))
        await activate_handler.handle(_activate(license.key, "PC-002"))
        stored = device_repository.devices[first.device.id]
        device_repository.devices[stored.id] = replace(stored, is_active=False)

        result = await activate_handler.handle(_activate(license.key, "PC-003"))

        assert result.created

    async def test_unknown_key(self, activate_handler):
        with pytest.raises(InvalidLicenseKeyError):
            await activate_handler.handle(_activate("NO-SUCH-KEY"))

    async def test_blank_key(self, activate_handler):
        with pytest.raises(InvalidLicenseKeyError):
            await activate_handler.handle(_activate("   "))

    async def test_expired_license(self, activate_handler, make_license, device_repository):
        with pytest.raises(LicenseExpiredError):
            await activate_handler.handle(
                _activate(make_license(status=LicenseStatus.EXPIRED).key)
            )
        assert device_repository.devices == {}

    async def test_overdue_active_license_is_expired_first(
        self, activate_handler, license_repository, make_license, now
    ):
        """Test the read-time expiry check runs before the activation decision."""
        license = make_license(status=LicenseStatus.ACTIVE, expires_at=now - timedelta(days=1))

        with pytest.raises(LicenseExpiredError):
            await activate_handler.handle(_activate(license.key))

        assert license_repository.licenses[license.id].status == LicenseStatus.EXPIRED

    async def test_overdue_inactive_license_is_refused(
        self, activate_handler, license_repository, make_license, now
    ):
        """Test an Inactive license past its expiry is never activated."""
        license = make_license(expires_at=now - timedelta(days=1))

        with pytest.raises(LicenseExpiredError):
            await activate_handler.handle(_activate(license.key))

        assert license_repository.licenses[license.id].status == LicenseStatus.INACTIVE

    async def test_unpaid_invoice_blocks_activation(
        self, activate_handler, invoice_repository, make_license, company, now
    ):
        invoice = _invoice(invoice_repository, company, now, InvoiceStatus.UNPAID)
        license = make_license(invoice_id=invoice.id)

        with pytest.raises(LicenseInactiveError):
            await activate_handler.handle(_activate(license.key))

    async def test_inactive_unfunded_license_becomes_active(
        self, activate_handler, license_repository, make_license, event_bus, now
    ):
        """Test activating an Inactive license without invoice moves it to Active."""
        license = make_license(expires_at=now + timedelta(days=10))

        result = await activate_handler.handle(_activate(license.key))

        assert result.license.status == "Active"
        assert license_repository.licenses[license.id].status == LicenseStatus.ACTIVE
        (event,) = event_bus.of_type(LicenseStatusChanged)
        assert event.reason == "device_activated"
        assert event.from_status == LicenseStatus.INACTIVE

    async def test_inactive_license_on_paid_invoice_becomes_active(
        self, activate_handler, invoice_repository, make_license, company, now
    ):
        invoice = _invoice(invoice_repository, company, now, InvoiceStatus.PAID)
        license = make_license(invoice_id=invoice.id)

        result = await activate_handler.handle(_activate(license.key))

        assert result.license.status == "Active"


@pytest.mark.asyncio
class TestHeartbeatHandler:
    """Tests for HeartbeatHandler."""

    async def test_heartbeat_reports_status(
        self, activate_handler, heartbeat_handler, make_license, clock, now
    ):
        """Test a heartbeat touches the device and reports the lowercase status."""
        license = make_license(status=LicenseStatus.ACTIVE, expires_at=now + timedelta(days=1))
        await activate_handler.handle(_activate(license.key))

        clock.advance(timedelta(minutes=15))
        result = await heartbeat_handler.handle(
            HeartbeatCommand(license_key=license.key, computer_id="PC-001")
        )

        assert result.status == "active"
        assert result.last_seen_at == now + timedelta(minutes=15)

    async def test_heartbeat_after_expiry(
        self, activate_handler, heartbeat_handler, make_license, clock, now
    ):
        """Test the heartbeat tells the client when its license ran out."""
        license = make_license(status=LicenseStatus.ACTIVE, expires_at=now + timedelta(days=1))
        await activate_handler.handle(_activate(license.key))

        clock.advance(timedelta(days=2))
        result = await heartbeat_handler.handle(
            HeartbeatCommand(license_key=license.key, computer_id="PC-001")
        )

        assert result.status == "expired"

    async def test_unknown_key(self, heartbeat_handler):
        with pytest.raises(LicenseNotFoundError):
            await heartbeat_handler.handle(HeartbeatCommand(license_key="NOPE", computer_id="PC"))

    async def test_unregistered_device(self, heartbeat_handler, make_license):
        license = make_license(status=LicenseStatus.ACTIVE)
        with pytest.raises(DeviceNotFoundError):
            await heartbeat_handler.handle(
                HeartbeatCommand(license_key=license.key, computer_id="PC-999")
            )


class TestActivationPolicy:
    """Tests for ActivationPolicy."""

    @pytest.mark.parametrize(
        "active,limit,expected",
        [(0, 1, True), (1, 1, False), (1, 2, True), (2, 2, False), (0, 0, True), (1, None, False)],
    )
    def test_has_free_slot(self, active, limit, expected):
        assert ActivationPolicy.has_free_slot(active, limit) is expected

    def test_ensure_usable_allows_overdue_invoice_when_active(self, make_license):
        """Test an Active license is usable whatever its invoice says."""
        license = make_license(status=LicenseStatus.ACTIVE)
        ActivationPolicy.ensure_usable(license, InvoiceStatus.OVERDUE)
