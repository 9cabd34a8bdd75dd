"""
Unit tests for the activity log event handler and the in-memory event bus.
"""

import uuid

import pytest

from accounts.ports.activity_log_repository import ActivityLogRepository
from billing.domain.events import InvoiceDeleted
from core.domain.events import EventHandler
from core.domain.value_objects import ActivityAction, EntityType, LicenseStatus
from core.infrastructure.event_handlers import ActivityLogEventHandler, activity_entry_for
from core.infrastructure.events import InMemoryEventBus
from devices.domain.events import DeviceActivated
from licenses.domain.events import LicenseCreated, LicenseStatusChanged


class RecordingActivityLog(ActivityLogRepository):
    def __init__(self):
        self.entries = []

    async def record(self, entry):
        self.entries.append(entry)


class FailingHandler(EventHandler):
    async def handle(self, event):
        raise RuntimeError("boom")


class TestActivityEntryFor:
    """Tests for activity_entry_for."""

    def test_license_created(self):
        actor_id = uuid.uuid4()
        entry = activity_entry_for(
            LicenseCreated(
                license_id=uuid.uuid4(),
                key="ABCD-1234",
                status=LicenseStatus.ACTIVE,
                actor_id=actor_id,
            )
        )

        assert entry.action == ActivityAction.CREATE
        assert entry.entity_type == EntityType.LICENSE
        assert entry.entity_name == "ABCD-1234"
        assert entry.actor_id == actor_id
        assert entry.details == {"status": "Active"}

    def test_system_status_change(self):
        """Test automatic expiry is logged without an actor."""
        entry = activity_entry_for(
            LicenseStatusChanged(
                license_id=uuid.uuid4(),
                key="ABCD-1234",
                from_status=LicenseStatus.ACTIVE,
                to_status=LicenseStatus.EXPIRED,
                reason="expired",
            )
        )

        assert entry.action == ActivityAction.UPDATE
        assert entry.actor_id is None
        assert entry.details == {
            "status": {"from": "Active", "to": "Expired"},
            "reason": "expired",
        }

    def test_invoice_deleted(self):
        entry = activity_entry_for(
            InvoiceDeleted(invoice_id=uuid.uuid4(), invoice_number="INV-1")
        )
        assert (entry.action, entry.entity_type, entry.entity_name) == (
            ActivityAction.DELETE,
            EntityType.INVOICE,
            "INV-1",
        )

    def test_device_without_name_uses_computer_id(self):
        entry = activity_entry_for(
            DeviceActivated(device_id=uuid.uuid4(), license_id=uuid.uuid4(), computer_id="PC-7")
        )
        assert entry.entity_name == "PC-7"


@pytest.mark.asyncio
class TestActivityLogEventHandler:
    async def test_records_entry(self):
        log = RecordingActivityLog()
        handler = ActivityLogEventHandler(repository=log)

        await handler.handle(
            LicenseCreated(license_id=uuid.uuid4(), key="K-1", status=LicenseStatus.INACTIVE)
        )

        assert [entry.entity_name for entry in log.entries] == ["K-1"]


@pytest.mark.asyncio
class TestInMemoryEventBus:
    """Tests for InMemoryEventBus."""

    async def test_failing_handler_does_not_reach_publisher(self):
        """Test one handler's error neither raises nor stops the others."""
        bus = InMemoryEventBus()
        log = RecordingActivityLog()
        bus.subscribe(LicenseCreated, FailingHandler())
        bus.subscribe(LicenseCreated, ActivityLogEventHandler(repository=log))

        await bus.publish(
            LicenseCreated(license_id=uuid.uuid4(), key="K-2", status=LicenseStatus.ACTIVE)
        )

        assert len(log.entries) == 1

    async def test_subscribe_is_idempotent(self):
        bus = InMemoryEventBus()
        log = RecordingActivityLog()
        handler = ActivityLogEventHandler(repository=log)
        bus.subscribe(LicenseCreated, handler)
        bus.subscribe(LicenseCreated, handler)

        await bus.publish(
            LicenseCreated(license_id=uuid.uuid4(), key="K-3", status=LicenseStatus.ACTIVE)
        )

        assert len(log.entries) == 1
