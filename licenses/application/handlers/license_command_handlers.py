"""
License command handlers.

Handlers for create, update and delete license commands. Status is
always decided by LicenseLifecycleManager before anything is stored.
"""
import logging
from typing import Optional

from billing.ports.invoice_repository import InvoiceRepository
from catalog.ports.plan_repository import PlanRepository
from catalog.ports.product_repository import ProductRepository
from core.domain.events import EventBus, FieldDiff, diff_fields
from core.domain.exceptions import (
    InvoiceNotFoundError,
    LicenseNotFoundError,
    PlanNotFoundError,
    PlanProductMismatchError,
    ProductNotFoundError,
)
from core.domain.value_objects import InvoiceStatus
from core.infrastructure.clock import system_clock
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_created_total
from core.ports.clock import Clock
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO, license_to_dto
from licenses.application.services.lifecycle_service import (
    LICENSE_UPDATED,
    publish_status_changes,
)
from licenses.domain.events import LicenseCreated, LicenseDeleted, LicenseUpdated
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.domain.services import LicenseLifecycleManager
from licenses.ports.license_repository import InvoiceStatusLookup, LicenseRepository

logger = logging.getLogger(__name__)

LICENSE_FIELDS = ("key", "product_id", "plan_id", "status", "expires_at", "user_id", "invoice_id")


def diff_licenses(before: License, after: License) -> FieldDiff:
    """Describe the fields that differ between two versions of a license."""
    return diff_fields(before, after, LICENSE_FIELDS)


class _CatalogChecks:
    """Shared product and plan validation."""

    product_repository: ProductRepository
    plan_repository: PlanRepository
    invoice_repository: InvoiceRepository

    async def _check_catalog(self, product_id, plan_id):
        product = await self.product_repository.find_by_id(product_id)
        if not product:
            raise ProductNotFoundError(f"Product {product_id} not found")
        plan = await self.plan_repository.find_by_id(plan_id)
        if not plan:
            raise PlanNotFoundError(f"Plan {plan_id} not found")
        if plan.product_id != product.id:
            raise PlanProductMismatchError(
                f"Plan {plan_id} does not belong to product {product_id}"
            )
        return plan

    async def _invoice_status(self, invoice_id) -> Optional[InvoiceStatus]:
        if invoice_id is None:
            return None
        invoice = await self.invoice_repository.find_by_id(invoice_id)
        if not invoice:
            raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")
        return invoice.status


class CreateLicenseHandler(_CatalogChecks):
    """Handler for CreateLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
        plan_repository: PlanRepository,
        invoice_repository: InvoiceRepository,
        clock: Clock = system_clock,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.product_repository = product_repository
        self.plan_repository = plan_repository
        self.invoice_repository = invoice_repository
        self.clock = clock
        self.event_bus = event_bus

    async def handle(self, command: CreateLicenseCommand) -> LicenseDTO:
        """
        Handle create license command.

        Args:
            command: CreateLicenseCommand

        Returns:
            LicenseDTO of the stored license

        Raises:
            ProductNotFoundError: If product not found
            PlanNotFoundError: If plan not found
            PlanProductMismatchError: If the plan sells another product
            InvoiceNotFoundError: If the linked invoice does not exist
            DuplicateLicenseKeyError: If the key is taken
        """
        now = self.clock.now()
        plan = await self._check_catalog(command.product_id, command.plan_id)
        invoice_status = await self._invoice_status(command.invoice_id)

        expires_at = command.expires_at
        if expires_at is None and command.derive_expiry:
            expires_at = plan.expiry_from(now)

        status = LicenseLifecycleManager.initial_status(
            now,
            requested=command.status,
            invoice_status=invoice_status,
            expires_at=expires_at,
        )
        license = License.create(
            key=command.key or generate_license_key(),
            product_id=command.product_id,
            plan_id=command.plan_id,
            status=status,
            now=now,
            expires_at=expires_at,
            user_id=command.user_id,
            invoice_id=command.invoice_id,
        )
        saved = await self.license_repository.save(license)

        licenses_created_total.labels(status=saved.status.value, source="api").inc()
        logger.info("Created license %s with status %s", saved.id, saved.status.value)
        await self.event_bus.publish(
            LicenseCreated(
                license_id=saved.id,
                key=saved.key,
                status=saved.status,
                actor_id=command.actor_id,
            )
        )
        return license_to_dto(saved)


class UpdateLicenseHandler(_CatalogChecks):
    """Handler for UpdateLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
        plan_repository: PlanRepository,
        invoice_repository: InvoiceRepository,
        clock: Clock = system_clock,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.product_repository = product_repository
        self.plan_repository = plan_repository
        self.invoice_repository = invoice_repository
        self.clock = clock
        self.event_bus = event_bus

    async def handle(self, command: UpdateLicenseCommand) -> LicenseDTO:
        """
        Handle update license command.

        Supplied fields are merged onto the stored license under a row
        lock. Moving the license to another invoice without an explicit
        status re-derives the status from that invoice. The expiry check
        runs last.

        Raises:
            LicenseNotFoundError: If license not found
            InvoiceNotFoundError: If the new invoice does not exist
        """
        license = await self.license_repository.find_by_id(command.license_id)
        if not license:
            raise LicenseNotFoundError(f"License {command.license_id} not found")

        now = self.clock.now()
        changes = dict(command.changes)
        if changes.get("status") is None:
            changes.pop("status", None)
        if not changes.get("key"):
            changes.pop("key", None)

        if "product_id" in changes or "plan_id" in changes:
            await self._check_catalog(
                changes.get("product_id", license.product_id),
                changes.get("plan_id", license.plan_id),
            )

        if changes.get("invoice_id") is not None:
            await self._invoice_status(changes["invoice_id"])

        def merge(current: License, invoice_status: InvoiceStatusLookup) -> License:
            values = dict(changes)
            relinked = "invoice_id" in values and values["invoice_id"] != current.invoice_id
            if relinked and "status" not in values:
                new_invoice_status = None
                if values["invoice_id"] is not None:
                    new_invoice_status = invoice_status(values["invoice_id"])
                    if new_invoice_status is None:
                        raise InvoiceNotFoundError(f"Invoice {values['invoice_id']} not found")
                values["status"] = LicenseLifecycleManager.relink_status(
                    current.status, new_invoice_status
                )
            merged = current.with_changes(now, **values)
            return merged.with_status(
                LicenseLifecycleManager.apply_expiry(merged.status, merged.expires_at, now), now
            )

        before, saved = await self.license_repository.update(command.license_id, merge)

        if saved.status != before.status:
            await publish_status_changes(
                [(before, saved)], LICENSE_UPDATED, self.event_bus, command.actor_id
            )
        diff = diff_licenses(before, saved)
        logger.info("Updated license %s (%s)", saved.id, ", ".join(diff) or "no changes")
        await self.event_bus.publish(
            LicenseUpdated(
                license_id=saved.id,
                key=saved.key,
                changes=diff,
                actor_id=command.actor_id,
            )
        )
        return license_to_dto(saved)


class DeleteLicenseHandler:
    """Handler for DeleteLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.event_bus = event_bus

    async def handle(self, command: DeleteLicenseCommand) -> None:
        """
        Handle delete license command.

        Raises:
            LicenseNotFoundError: If license not found
        """
        license = await self.license_repository.find_by_id(command.license_id)
        if not license or not await self.license_repository.delete(command.license_id):
            raise LicenseNotFoundError(f"License {command.license_id} not found")

        logger.info("Deleted license %s", license.id)
        await self.event_bus.publish(
            LicenseDeleted(license_id=license.id, key=license.key, actor_id=command.actor_id)
        )
