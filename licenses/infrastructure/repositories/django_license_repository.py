"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from billing.infrastructure.models import Invoice as InvoiceModel
from core.domain.exceptions import DuplicateLicenseKeyError, LicenseNotFoundError
from core.domain.value_objects import InvoiceStatus, LicenseStatus
from core.infrastructure.database import run_atomic
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseMerge, LicenseRepository, StatusChange

logger = logging.getLogger(__name__)


def license_to_domain(model: LicenseModel) -> License:
    """
    Convert Django model to domain entity.

    Shared with the invoice adapter, which loads licenses inside its own transaction.

    Args:
        model: Django License model

    Returns:
        License domain entity
    """
    return License(
        id=model.id,
        key=model.key,
        product_id=model.product_id,
        plan_id=model.plan_id,
        status=LicenseStatus(model.status),
        expires_at=model.expires_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
        user_id=model.user_id,
        invoice_id=model.invoice_id,
    )


def license_to_model(license: License) -> LicenseModel:
    """
    Build an unsaved Django model carrying every field of the entity.

    Args:
        license: License domain entity

    Returns:
        Django License model
    """
    return LicenseModel(
        id=license.id,
        key=license.key,
        product_id=license.product_id,
        plan_id=license.plan_id,
        user_id=license.user_id,
        invoice_id=license.invoice_id,
        status=license.status.value,
        expires_at=license.expires_at,
        created_at=license.created_at,
        updated_at=license.updated_at,
    )


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    def _to_domain(self, model: LicenseModel) -> License:
        return license_to_domain(model)

    def _to_model(self, license: License) -> LicenseModel:
        model = license_to_model(license)
        model._state.adding = not LicenseModel.objects.filter(id=license.id).exists()
        return model

    @sync_to_async
    def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity

        Raises:
            DuplicateLicenseKeyError: If another license already uses the key
        """
        model = self._to_model(license)
        self._write(license, model)
        model.refresh_from_db()
        return self._to_domain(model)

    def _write(self, license: License, model: LicenseModel) -> None:
        try:
            with transaction.atomic():
                model.save()
        except IntegrityError as e:
            if LicenseModel.objects.filter(key=license.key).exclude(id=license.id).exists():
                raise DuplicateLicenseKeyError(
                    f"License key {license.key} already exists"
                ) from e
            raise

    @staticmethod
    def _locked_invoice_status(invoice_id: uuid.UUID) -> Optional[InvoiceStatus]:
        status = (
            InvoiceModel.objects.select_for_update()
            .filter(id=invoice_id)
            .values_list("status", flat=True)
            .first()
        )
        return InvoiceStatus(status) if status is not None else None

    def _update_sync(self, license_id: uuid.UUID, merge: LicenseMerge) -> StatusChange:
        try:
            model = LicenseModel.objects.select_for_update().get(id=license_id)
        except LicenseModel.DoesNotExist as e:
            raise LicenseNotFoundError(f"License {license_id} not found") from e

        before = self._to_domain(model)
        after = merge(before, self._locked_invoice_status)
        model = license_to_model(after)
        model._state.adding = False
        self._write(after, model)
        model.refresh_from_db()
        return before, self._to_domain(model)

    async def update(self, license_id: uuid.UUID, merge: LicenseMerge) -> StatusChange:
        """
        Lock the license row, merge the change and write it. One transaction.

        Raises:
            LicenseNotFoundError: If the license does not exist
            DuplicateLicenseKeyError: If the new key is taken
        """
        return await run_atomic(self._update_sync, license_id, merge)

    @sync_to_async
    def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        try:
            return self._to_domain(LicenseModel.objects.get(id=license_id))
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_key(self, key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            key: License key

        Returns:
            License entity or None if not found
        """
        try:
            return self._to_domain(LicenseModel.objects.get(key=key))
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def find_all(
        self,
        status: Optional[LicenseStatus] = None,
        product_id: Optional[uuid.UUID] = None,
        user_id: Optional[uuid.UUID] = None,
        invoice_id: Optional[uuid.UUID] = None,
    ) -> List[License]:
        """List licenses, newest first, optionally filtered."""
        queryset = LicenseModel.objects.all()
        if status is not None:
            queryset = queryset.filter(status=status.value)
        if product_id is not None:
            queryset = queryset.filter(product_id=product_id)
        if user_id is not None:
            queryset = queryset.filter(user_id=user_id)
        if invoice_id is not None:
            queryset = queryset.filter(invoice_id=invoice_id)
        return [self._to_domain(model) for model in queryset]

    @sync_to_async
    def find_by_invoice(self, invoice_id: uuid.UUID) -> List[License]:
        """List the licenses funded by an invoice."""
        models = LicenseModel.objects.filter(invoice_id=invoice_id)
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def update_status(
        self,
        license_id: uuid.UUID,
        expected: LicenseStatus,
        new: LicenseStatus,
        now: datetime,
    ) -> bool:
        """
        Change the status of one license if it still has ``expected``.

        Returns:
            True if a row was updated
        """
        updated = LicenseModel.objects.filter(id=license_id, status=expected.value).update(
            status=new.value, updated_at=now
        )
        return updated > 0

    def _expire_overdue_sync(self, now: datetime) -> List[StatusChange]:
        overdue = list(
            LicenseModel.objects.select_for_update().filter(
                status=LicenseStatus.ACTIVE.value,
                expires_at__isnull=False,
                expires_at__lte=now,
            )
        )
        if not overdue:
            return []
        LicenseModel.objects.filter(id__in=[row.id for row in overdue]).update(
            status=LicenseStatus.EXPIRED.value, updated_at=now
        )
        before = [self._to_domain(row) for row in overdue]
        return [(license, license.with_status(LicenseStatus.EXPIRED, now)) for license in before]

    async def expire_overdue(self, now: datetime) -> List[StatusChange]:
        """
        Mark every Active license with expires_at <= now as Expired.

        The overdue rows are locked, then updated in one statement.

        Returns:
            (before, after) pair for every license expired
        """
        changes = await run_atomic(self._expire_overdue_sync, now)
        if changes:
            logger.info("Expired %d overdue license(s)", len(changes))
        return changes

    @sync_to_async
    def delete(self, license_id: uuid.UUID) -> bool:
        """Delete a license."""
        deleted, _ = LicenseModel.objects.filter(id=license_id).delete()
        return deleted > 0
