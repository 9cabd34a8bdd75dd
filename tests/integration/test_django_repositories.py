"""
Integration tests for the Django repository adapters.

Tests are synchronous; repository coroutines run through async_to_sync so
the ORM work happens on the test thread and inside the test transaction.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from asgiref.sync import async_to_sync
from django.utils import timezone

from billing.application.handlers.invoice_handlers import cascade_to
from billing.domain.invoice import Invoice, LineItem
from billing.infrastructure.models import Invoice as InvoiceModel
from billing.infrastructure.models import InvoiceLineItem as LineItemModel
from billing.infrastructure.repositories.django_invoice_repository import DjangoInvoiceRepository
from core.domain.exceptions import (
    DeviceLimitReachedError,
    DuplicateInvoiceNumberError,
    DuplicateLicenseKeyError,
    LicenseNotFoundError,
)
from core.domain.value_objects import InvoiceStatus, LicenseStatus
from devices.domain.device import Device
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import (
    DjangoLicenseRepository,
)

pytestmark = [pytest.mark.django_db, pytest.mark.integration]


def _license(db_product, db_plan, key, status=LicenseStatus.INACTIVE, expires_at=None):
    return License.create(
        key=key,
        product_id=db_product.id,
        plan_id=db_plan.id,
        status=status,
        now=timezone.now(),
        expires_at=expires_at,
    )


def _invoice(company, status=InvoiceStatus.UNPAID, plan=None, invoice_number=None):
    now = timezone.now()
    items = []
    if plan is not None:
        items = [LineItem.create(plan_id=plan.id, quantity=2, unit_price=Decimal("15.00"))]
    return Invoice.create(
        company_id=company.id,
        issue_date=now,
        due_date=now + timedelta(days=30),
        now=now,
        line_items=items,
        status=status,
        invoice_number=invoice_number,
    )


class TestDjangoLicenseRepository:
    """Tests for DjangoLicenseRepository."""

    def test_save_and_find(self, db_product, db_plan):
        repository = DjangoLicenseRepository()
        license = _license(db_product, db_plan, "ROUND-TRIP-1")

        async_to_sync(repository.save)(license)

        found = async_to_sync(repository.find_by_key)("ROUND-TRIP-1")
        assert found.id == license.id
        assert found.status == LicenseStatus.INACTIVE
        assert async_to_sync(repository.find_by_id)(license.id).key == "ROUND-TRIP-1"

    def test_duplicate_key(self, db_product, db_plan):
        repository = DjangoLicenseRepository()
        async_to_sync(repository.save)(_license(db_product, db_plan, "TAKEN"))

        with pytest.raises(DuplicateLicenseKeyError):
            async_to_sync(repository.save)(_license(db_product, db_plan, "TAKEN"))

    def test_update_status_is_conditional(self, db_license_factory):
        """Test the write only lands while the stored status is the expected one."""
        repository = DjangoLicenseRepository()
        row = db_license_factory(status="Active")
        now = timezone.now()

        stale = async_to_sync(repository.update_status)(
            row.id, LicenseStatus.INACTIVE, LicenseStatus.ACTIVE, now
        )
        applied = async_to_sync(repository.update_status)(
            row.id, LicenseStatus.ACTIVE, LicenseStatus.EXPIRED, now
        )

        assert not stale
        assert applied
        row.refresh_from_db()
        assert row.status == "Expired"

    def test_expire_overdue(self, db_license_factory):
        """Test only Active licenses at or past their expiry are expired."""
        repository = DjangoLicenseRepository()
        now = timezone.now()
        overdue = db_license_factory(status="Active", expires_at=now - timedelta(minutes=1))
        current = db_license_factory(status="Active", expires_at=now + timedelta(days=1))
        inactive = db_license_factory(status="Inactive", expires_at=now - timedelta(days=1))
        permanent = db_license_factory(status="Active", expires_at=None)

        changes = async_to_sync(repository.expire_overdue)(now)

        assert [(before.id, after.status) for before, after in changes] == [
            (overdue.id, LicenseStatus.EXPIRED)
        ]
        statuses = dict(
            LicenseModel.objects.filter(
                id__in=[overdue.id, current.id, inactive.id, permanent.id]
            ).values_list("id", "status")
        )
        assert statuses == {
            overdue.id: "Expired",
            current.id: "Active",
            inactive.id: "Inactive",
            permanent.id: "Active",
        }

    def test_update_merges_onto_stored_row(self, db_license_factory):
        """Test the merge sees the stored status and the linked invoice status."""
        repository = DjangoLicenseRepository()
        row = db_license_factory(status="Active", key="OLD-KEY")
        now = timezone.now()
        seen = []

        def rename(current, invoice_status):
            seen.append((current.status, invoice_status(uuid.uuid4())))
            return current.with_changes(now, key="NEW-KEY")

        before, after = async_to_sync(repository.update)(row.id, rename)

        assert seen == [(LicenseStatus.ACTIVE, None)]
        assert before.key == "OLD-KEY"
        assert after.key == "NEW-KEY"
        assert after.status == LicenseStatus.ACTIVE
        row.refresh_from_db()
        assert row.key == "NEW-KEY"

    def test_update_missing_license(self, db):
        repository = DjangoLicenseRepository()

        with pytest.raises(LicenseNotFoundError):
            async_to_sync(repository.update)(uuid.uuid4(), lambda current, lookup: current)

    def test_update_to_taken_key(self, db_license_factory):
        repository = DjangoLicenseRepository()
        db_license_factory(key="TAKEN")
        row = db_license_factory(key="FREE")
        now = timezone.now()

        with pytest.raises(DuplicateLicenseKeyError):
            async_to_sync(repository.update)(
                row.id, lambda current, lookup: current.with_changes(now, key="TAKEN")
            )
        row.refresh_from_db()
        assert row.key == "FREE"

    def test_find_all_filters(self, db_license_factory):
        repository = DjangoLicenseRepository()
        active = db_license_factory(status="Active")
        db_license_factory(status="Inactive")

        found = async_to_sync(repository.find_all)(status=LicenseStatus.ACTIVE)

        assert [license.id for license in found] == [active.id]


class TestDjangoInvoiceRepository:
    """Tests for DjangoInvoiceRepository."""

    def test_create_with_line_items(self, db_company, db_plan):
        repository = DjangoInvoiceRepository()
        invoice = _invoice(db_company, plan=db_plan)

        result = async_to_sync(repository.create)(invoice)

        assert result.invoice.total == Decimal("30.00")
        assert LineItemModel.objects.filter(invoice_id=invoice.id).count() == 1
        stored = async_to_sync(repository.find_by_id)(invoice.id)
        assert [item.quantity for item in stored.line_items] == [2]

    def test_duplicate_invoice_number(self, db_company):
        repository = DjangoInvoiceRepository()
        async_to_sync(repository.create)(_invoice(db_company, invoice_number="INV-DUP"))

        with pytest.raises(DuplicateInvoiceNumberError):
            async_to_sync(repository.create)(_invoice(db_company, invoice_number="INV-DUP"))

    def test_update_applies_cascade(self, db_company, db_license_factory):
        """Test a Paid update activates licenses in the same unit of work."""
        repository = DjangoInvoiceRepository()
        invoice = _invoice(db_company)
        async_to_sync(repository.create)(invoice)
        invoice_row = InvoiceModel.objects.get(id=invoice.id)
        funded = db_license_factory(invoice=invoice_row)
        expired = db_license_factory(status="Expired", invoice=invoice_row)

        now = timezone.now()

        def pay(current):
            return (
                current.with_changes(now, status=InvoiceStatus.PAID),
                cascade_to(LicenseStatus.ACTIVE, now),
            )

        result = async_to_sync(repository.update)(invoice.id, pay)

        assert result.previous.status == InvoiceStatus.UNPAID
        assert result.invoice.status == InvoiceStatus.PAID
        assert [(before.status, after.status) for before, after in result.status_changes] == [
            (LicenseStatus.INACTIVE, LicenseStatus.ACTIVE)
        ]
        funded.refresh_from_db()
        expired.refresh_from_db()
        assert funded.status == "Active"
        assert expired.status == "Expired"
        assert InvoiceModel.objects.get(id=invoice.id).status == "Paid"

    def test_failing_cascade_rolls_back_invoice_change(self, db_company, db_license_factory):
        """Test nothing is written when the cascade raises."""
        repository = DjangoInvoiceRepository()
        invoice = _invoice(db_company)
        async_to_sync(repository.create)(invoice)
        funded = db_license_factory(invoice=InvoiceModel.objects.get(id=invoice.id))

        def failing_cascade(licenses):
            raise RuntimeError("cascade failed")

        def pay(current):
            return current.with_changes(timezone.now(), status=InvoiceStatus.PAID), failing_cascade

        with pytest.raises(RuntimeError):
            async_to_sync(repository.update)(invoice.id, pay)

        assert InvoiceModel.objects.get(id=invoice.id).status == "Unpaid"
        funded.refresh_from_db()
        assert funded.status == "Inactive"

    def test_delete_unlinks_licenses(self, db_company, db_plan, db_license_factory):
        """Test licenses outlive their invoice as Inactive, unlinked rows."""
        repository = DjangoInvoiceRepository()
        invoice = _invoice(db_company, status=InvoiceStatus.PAID, plan=db_plan)
        async_to_sync(repository.create)(invoice)
        invoice_row = InvoiceModel.objects.get(id=invoice.id)
        funded = db_license_factory(status="Active", invoice=invoice_row)

        result = async_to_sync(repository.delete)(
            invoice.id, cascade=cascade_to(LicenseStatus.INACTIVE, timezone.now())
        )

        assert len(result.status_changes) == 1
        assert not InvoiceModel.objects.filter(id=invoice.id).exists()
        assert not LineItemModel.objects.filter(invoice_id=invoice.id).exists()
        funded.refresh_from_db()
        assert funded.status == "Inactive"
        assert funded.invoice_id is None


class TestDjangoDeviceRepository:
    """Tests for DjangoDeviceRepository."""

    def test_register_respects_limit(self, db_license_factory):
        """Test the two-device plan refuses a third machine but refreshes known ones."""
        repository = DjangoDeviceRepository()
        row = db_license_factory(status="Active")
        now = timezone.now()

        _, first_created = async_to_sync(repository.register)(
            Device.create(license_id=row.id, computer_id="PC-1", now=now), 2
        )
        async_to_sync(repository.register)(
            Device.create(license_id=row.id, computer_id="PC-2", now=now), 2
        )
        with pytest.raises(DeviceLimitReachedError):
            async_to_sync(repository.register)(
                Device.create(license_id=row.id, computer_id="PC-3", now=now), 2
            )
        later = now + timedelta(hours=1)
        refreshed, created_again = async_to_sync(repository.register)(
            Device.create(license_id=row.id, computer_id="PC-1", now=later), 2
        )

        assert first_created
        assert not created_again
        assert refreshed.last_seen_at == later
        assert len(async_to_sync(repository.find_by_license)(row.id)) == 2
