"""
Integration tests for updates that race an invoice payment.

Each test lets a second request pay the invoice right after the first
request has read its copy of the record, then lets the first request
finish. The first request must not write its stale copy back.
"""

from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.utils import timezone

from billing.application.commands.invoice_commands import UpdateInvoiceCommand
from billing.application.handlers.invoice_handlers import UpdateInvoiceHandler
from billing.infrastructure.models import Invoice as InvoiceModel
from billing.infrastructure.repositories.django_company_repository import (
    DjangoBankRepository,
    DjangoCompanyRepository,
)
from billing.infrastructure.repositories.django_invoice_repository import DjangoInvoiceRepository
from catalog.infrastructure.repositories.django_plan_repository import DjangoPlanRepository
from catalog.infrastructure.repositories.django_product_repository import (
    DjangoProductRepository,
)
from core.domain.value_objects import InvoiceStatus
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.handlers.license_command_handlers import UpdateLicenseHandler
from licenses.domain.events import LicenseStatusChanged
from licenses.infrastructure.repositories.django_license_repository import (
    DjangoLicenseRepository,
)

pytestmark = [pytest.mark.django_db, pytest.mark.integration]


@pytest.fixture
def unpaid_invoice(db_company):
    now = timezone.now()
    return InvoiceModel.objects.create(
        invoice_number="INV-RACE-1",
        company=db_company,
        issue_date=now,
        due_date=now + timedelta(days=30),
        total=0,
        status=InvoiceStatus.UNPAID.value,
        payment_method="Cash",
    )


def _invoice_handler(invoice_repository, license_repository, event_bus):
    return UpdateInvoiceHandler(
        invoice_repository=invoice_repository,
        license_repository=license_repository,
        company_repository=DjangoCompanyRepository(),
        bank_repository=DjangoBankRepository(),
        plan_repository=DjangoPlanRepository(),
        event_bus=event_bus,
    )


def _pay_after_read(monkeypatch, repository, invoice_id, event_bus):
    """Make ``repository.find_by_id`` pay the invoice once the caller has its copy."""
    read = repository.find_by_id
    payer = _invoice_handler(DjangoInvoiceRepository(), DjangoLicenseRepository(), event_bus)

    async def find_then_pay(record_id):
        found = await read(record_id)
        monkeypatch.setattr(repository, "find_by_id", read)
        await payer.handle(
            UpdateInvoiceCommand(invoice_id=invoice_id, changes={"status": InvoiceStatus.PAID})
        )
        return found

    monkeypatch.setattr(repository, "find_by_id", find_then_pay)


class TestInterleavedInvoiceUpdate:
    def test_plain_edit_keeps_concurrent_payment(
        self, monkeypatch, event_bus, unpaid_invoice, db_license_factory
    ):
        """Test a due date edit does not revert a payment committed after its read."""
        funded = db_license_factory(invoice=unpaid_invoice)
        invoice_repository = DjangoInvoiceRepository()
        _pay_after_read(monkeypatch, invoice_repository, unpaid_invoice.id, event_bus)
        handler = _invoice_handler(invoice_repository, DjangoLicenseRepository(), event_bus)
        new_due_date = timezone.now() + timedelta(days=60)

        result = async_to_sync(handler.handle)(
            UpdateInvoiceCommand(
                invoice_id=unpaid_invoice.id, changes={"due_date": new_due_date}
            )
        )

        assert result.status == "Paid"
        unpaid_invoice.refresh_from_db()
        funded.refresh_from_db()
        assert unpaid_invoice.status == "Paid"
        assert unpaid_invoice.due_date == new_due_date
        assert funded.status == "Active"

    def test_unpaying_after_concurrent_payment_cascades(
        self, monkeypatch, event_bus, unpaid_invoice, db_license_factory
    ):
        """Test the cascade is decided from the stored status, not the stale copy."""
        funded = db_license_factory(invoice=unpaid_invoice)
        invoice_repository = DjangoInvoiceRepository()
        _pay_after_read(monkeypatch, invoice_repository, unpaid_invoice.id, event_bus)
        handler = _invoice_handler(invoice_repository, DjangoLicenseRepository(), event_bus)

        async_to_sync(handler.handle)(
            UpdateInvoiceCommand(
                invoice_id=unpaid_invoice.id, changes={"status": InvoiceStatus.UNPAID}
            )
        )

        unpaid_invoice.refresh_from_db()
        funded.refresh_from_db()
        assert unpaid_invoice.status == "Unpaid"
        assert funded.status == "Inactive"
        reasons = [
            (event.to_status.value, event.reason)
            for event in event_bus.of_type(LicenseStatusChanged)
        ]
        assert reasons == [("Active", "invoice_updated"), ("Inactive", "invoice_updated")]


class TestInterleavedLicenseUpdate:
    def test_rename_keeps_concurrent_cascade(
        self, monkeypatch, event_bus, unpaid_invoice, db_license_factory
    ):
        """Test renaming a key does not revert a cascade committed after its read."""
        funded = db_license_factory(invoice=unpaid_invoice)
        license_repository = DjangoLicenseRepository()
        _pay_after_read(monkeypatch, license_repository, unpaid_invoice.id, event_bus)
        handler = UpdateLicenseHandler(
            license_repository=license_repository,
            product_repository=DjangoProductRepository(),
            plan_repository=DjangoPlanRepository(),
            invoice_repository=DjangoInvoiceRepository(),
            event_bus=event_bus,
        )

        result = async_to_sync(handler.handle)(
            UpdateLicenseCommand(license_id=funded.id, changes={"key": "RENAMED-KEY"})
        )

        assert result.key == "RENAMED-KEY"
        assert result.status == "Active"
        funded.refresh_from_db()
        assert funded.key == "RENAMED-KEY"
        assert funded.status == "Active"
        assert funded.invoice_id == unpaid_invoice.id
