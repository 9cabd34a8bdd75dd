"""
Django implementation of InvoiceRepository port.

Every mutation runs as one synchronous unit of work inside
``transaction.atomic()``; a failure anywhere rolls back the invoice
change together with every license change.
"""
import logging
import uuid
from typing import List, Optional, Sequence

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from billing.domain.invoice import Invoice, LineItem
from billing.infrastructure.models import Invoice as InvoiceModel
from billing.infrastructure.models import InvoiceLineItem as LineItemModel
from billing.ports.invoice_repository import (
    InvoiceChangeSet,
    InvoiceMerge,
    InvoiceRepository,
    LicenseCascade,
)
from core.domain.exceptions import DuplicateInvoiceNumberError, InvoiceNotFoundError
from core.domain.value_objects import InvoiceStatus, PaymentMethod
from core.infrastructure.database import run_atomic
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import (
    license_to_domain,
    license_to_model,
)

logger = logging.getLogger(__name__)


class DjangoInvoiceRepository(InvoiceRepository):
    """Django ORM implementation of InvoiceRepository."""

    def _to_domain(self, model: InvoiceModel) -> Invoice:
        """
        Convert Django model (and its line items) to domain entity.

        Args:
            model: Django Invoice model

        Returns:
            Invoice domain entity
        """
        line_items = [
            LineItem(
                id=item.id,
                plan_id=item.plan_id,
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total=item.total,
            )
            for item in model.line_items.all()
        ]
        return Invoice(
            id=model.id,
            invoice_number=model.invoice_number,
            company_id=model.company_id,
            issue_date=model.issue_date,
            due_date=model.due_date,
            total=model.total,
            status=InvoiceStatus(model.status),
            payment_method=PaymentMethod(model.payment_method),
            created_at=model.created_at,
            updated_at=model.updated_at,
            bank_id=model.bank_id,
            line_items=line_items,
        )

    def _copy_fields(self, invoice: Invoice, model: InvoiceModel) -> None:
        model.invoice_number = invoice.invoice_number
        model.company_id = invoice.company_id
        model.bank_id = invoice.bank_id
        model.payment_method = invoice.payment_method.value
        model.issue_date = invoice.issue_date
        model.due_date = invoice.due_date
        model.total = invoice.total
        model.status = invoice.status.value

    def _save_invoice_row(self, invoice: Invoice, model: InvoiceModel) -> None:
        try:
            with transaction.atomic():
                model.save()
        except IntegrityError as e:
            taken = (
                InvoiceModel.objects.filter(invoice_number=invoice.invoice_number)
                .exclude(id=invoice.id)
                .exists()
            )
            if taken:
                raise DuplicateInvoiceNumberError(
                    f"Invoice number {invoice.invoice_number} already exists"
                ) from e
            raise

    def _insert_line_items(self, invoice: Invoice) -> None:
        LineItemModel.objects.bulk_create(
            [
                LineItemModel(
                    id=item.id,
                    invoice_id=invoice.id,
                    plan_id=item.plan_id,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total=item.total,
                    position=position,
                )
                for position, item in enumerate(invoice.line_items)
            ]
        )

    def _apply_cascade(self, invoice_id: uuid.UUID, cascade: Optional[LicenseCascade]):
        """
        Lock the invoice's licenses and write the statuses ``cascade`` decides.

        Returns:
            List of (before, after) pairs for licenses whose status changed
        """
        if cascade is None:
            return []
        rows = LicenseModel.objects.select_for_update().filter(invoice_id=invoice_id)
        current = [license_to_domain(row) for row in rows]
        before = {license.id: license for license in current}

        changes = []
        for after in cascade(current):
            LicenseModel.objects.filter(id=after.id).update(
                status=after.status.value, updated_at=after.updated_at
            )
            changes.append((before[after.id], after))
        return changes

    def _load(self, invoice_id: uuid.UUID, lock: bool = False) -> InvoiceModel:
        queryset = InvoiceModel.objects.all()
        if lock:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=invoice_id)
        except InvoiceModel.DoesNotExist as e:
            raise InvoiceNotFoundError(f"Invoice {invoice_id} not found") from e

    @sync_to_async
    def find_by_id(self, invoice_id: uuid.UUID) -> Optional[Invoice]:
        """
        Find an invoice by ID, with its line items.

        Args:
            invoice_id: Invoice UUID

        Returns:
            Invoice entity or None if not found
        """
        try:
            model = InvoiceModel.objects.prefetch_related("line_items").get(id=invoice_id)
        except InvoiceModel.DoesNotExist:
            return None
        return self._to_domain(model)

    @sync_to_async
    def find_all(
        self,
        company_id: Optional[uuid.UUID] = None,
        status: Optional[InvoiceStatus] = None,
    ) -> List[Invoice]:
        """List invoices, newest issue date first."""
        queryset = InvoiceModel.objects.prefetch_related("line_items")
        if company_id is not None:
            queryset = queryset.filter(company_id=company_id)
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return [self._to_domain(model) for model in queryset]

    def _create_sync(
        self,
        invoice: Invoice,
        issued_licenses: Sequence[License],
        attach_license_ids: Sequence[uuid.UUID],
        cascade: Optional[LicenseCascade],
    ) -> InvoiceChangeSet:
        model = InvoiceModel(id=invoice.id)
        self._copy_fields(invoice, model)
        self._save_invoice_row(invoice, model)
        self._insert_line_items(invoice)

        for license in issued_licenses:
            license_to_model(license).save(force_insert=True)
        if attach_license_ids:
            LicenseModel.objects.filter(id__in=list(attach_license_ids)).update(
                invoice_id=invoice.id, updated_at=invoice.updated_at
            )

        changes = self._apply_cascade(invoice.id, cascade)
        created = InvoiceModel.objects.prefetch_related("line_items").get(id=invoice.id)
        issued = LicenseModel.objects.filter(id__in=[license.id for license in issued_licenses])
        return InvoiceChangeSet(
            invoice=self._to_domain(created),
            created_licenses=[license_to_domain(row) for row in issued],
            status_changes=changes,
        )

    async def create(
        self,
        invoice: Invoice,
        issued_licenses: Sequence[License] = (),
        attach_license_ids: Sequence[uuid.UUID] = (),
        cascade: Optional[LicenseCascade] = None,
    ) -> InvoiceChangeSet:
        """
        Insert an invoice with its line items, issued and attached
        licenses, then apply the cascade. One transaction.
        """
        result = await run_atomic(
            self._create_sync, invoice, list(issued_licenses), list(attach_license_ids), cascade
        )
        logger.info(
            "Created invoice %s (%d license(s) issued, %d status change(s))",
            invoice.invoice_number,
            len(result.created_licenses),
            len(result.status_changes),
        )
        return result

    def _update_sync(
        self, invoice_id: uuid.UUID, merge: InvoiceMerge, replace_line_items: bool
    ) -> InvoiceChangeSet:
        model = self._load(invoice_id, lock=True)
        previous = self._to_domain(model)
        invoice, cascade = merge(previous)

        self._copy_fields(invoice, model)
        self._save_invoice_row(invoice, model)
        if replace_line_items:
            LineItemModel.objects.filter(invoice_id=invoice_id).delete()
            self._insert_line_items(invoice)

        changes = self._apply_cascade(invoice_id, cascade)
        updated = InvoiceModel.objects.prefetch_related("line_items").get(id=invoice_id)
        return InvoiceChangeSet(
            invoice=self._to_domain(updated), status_changes=changes, previous=previous
        )

    async def update(
        self,
        invoice_id: uuid.UUID,
        merge: InvoiceMerge,
        replace_line_items: bool = False,
    ) -> InvoiceChangeSet:
        """Lock the invoice, merge the change and apply the cascade. One transaction."""
        result = await run_atomic(self._update_sync, invoice_id, merge, replace_line_items)
        logger.info(
            "Updated invoice %s (%d status change(s))",
            result.invoice.invoice_number,
            len(result.status_changes),
        )
        return result

    def _delete_sync(
        self, invoice_id: uuid.UUID, cascade: Optional[LicenseCascade]
    ) -> InvoiceChangeSet:
        model = self._load(invoice_id, lock=True)
        invoice = self._to_domain(model)

        changes = self._apply_cascade(invoice_id, cascade)
        LineItemModel.objects.filter(invoice_id=invoice_id).delete()
        model.delete()
        return InvoiceChangeSet(invoice=invoice, status_changes=changes)

    async def delete(
        self, invoice_id: uuid.UUID, cascade: Optional[LicenseCascade] = None
    ) -> InvoiceChangeSet:
        """Reset licenses, delete line items, delete the invoice. One transaction."""
        result = await run_atomic(self._delete_sync, invoice_id, cascade)
        logger.info(
            "Deleted invoice %s (%d status change(s))",
            result.invoice.invoice_number,
            len(result.status_changes),
        )
        return result
