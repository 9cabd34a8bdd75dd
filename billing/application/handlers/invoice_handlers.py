"""
Invoice handlers.

Every invoice mutation hands a LicenseLifecycleManager cascade to the
repository, which applies it in the same transaction as the invoice
change. Events and metrics are emitted only after the commit.
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from accounts.ports.user_repository import UserRepository
from billing.application.commands.invoice_commands import (
    CreateInvoiceCommand,
    DeleteInvoiceCommand,
    LineItemData,
    UpdateInvoiceCommand,
)
from billing.application.dto.invoice_dto import InvoiceDTO, invoice_to_dto
from billing.application.queries.invoice_queries import GetInvoiceQuery, ListInvoicesQuery
from billing.domain.events import InvoiceCreated, InvoiceDeleted, InvoiceUpdated
from billing.domain.invoice import Invoice, LineItem
from billing.ports.company_repository import BankRepository, CompanyRepository
from billing.ports.invoice_repository import InvoiceRepository, LicenseCascade
from catalog.ports.plan_repository import PlanRepository
from core.domain.events import EventBus, FieldDiff, diff_fields
from core.domain.exceptions import (
    BankNotFoundError,
    CompanyNotFoundError,
    InvoiceNotFoundError,
    LicenseNotFoundError,
    PlanNotFoundError,
)
from core.domain.value_objects import LicenseStatus
from core.infrastructure.clock import system_clock
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import invoice_operations_total, licenses_created_total
from core.ports.clock import Clock
from licenses.application.dto.license_dto import license_to_dto
from licenses.application.services.lifecycle_service import (
    INVOICE_CREATED,
    INVOICE_DELETED,
    INVOICE_UPDATED,
    LicenseObserver,
    publish_status_changes,
)
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.domain.services import LicenseLifecycleManager
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

# Fields that can never be stored as null.
REQUIRED_INVOICE_FIELDS = (
    "invoice_number",
    "company_id",
    "issue_date",
    "due_date",
    "status",
    "payment_method",
)


def cascade_to(target: LicenseStatus, now: datetime) -> LicenseCascade:
    """Build the repository callback that pushes ``target`` onto an invoice's licenses."""

    def cascade(licenses: List[License]) -> List[License]:
        return LicenseLifecycleManager.apply_cascade(licenses, target, now)

    return cascade


def diff_invoices(before: Invoice, after: Invoice) -> FieldDiff:
    """
    Describe the fields that differ between two versions of an invoice.

    Line items are summarised by their count.
    """
    fields = (
        "invoice_number",
        "company_id",
        "bank_id",
        "issue_date",
        "due_date",
        "total",
        "status",
        "payment_method",
    )
    diff = diff_fields(before, after, fields)
    if before.line_items != after.line_items:
        diff["line_items"] = {"from": len(before.line_items), "to": len(after.line_items)}
    return diff


class _InvoiceReferences:
    """Shared lookups for invoice commands."""

    company_repository: CompanyRepository
    bank_repository: BankRepository
    plan_repository: PlanRepository

    async def _check_company(self, company_id):
        company = await self.company_repository.find_by_id(company_id)
        if not company:
            raise CompanyNotFoundError(f"Company {company_id} not found")
        return company

    async def _check_bank(self, bank_id):
        if bank_id is None:
            return None
        bank = await self.bank_repository.find_by_id(bank_id)
        if not bank:
            raise BankNotFoundError(f"Bank {bank_id} not found")
        return bank

    async def _build_line_items(self, items: List[LineItemData]):
        """
        Validate plans and build line item entities.

        Returns:
            List of (LineItem, Plan) pairs in submission order
        """
        plans = {}
        built = []
        for data in items:
            if data.plan_id not in plans:
                plan = await self.plan_repository.find_by_id(data.plan_id)
                if not plan:
                    raise PlanNotFoundError(f"Plan {data.plan_id} not found")
                plans[data.plan_id] = plan
            item = LineItem.create(
                plan_id=data.plan_id,
                quantity=data.quantity,
                unit_price=data.unit_price,
                description=data.description,
                total=data.total,
            )
            built.append((item, plans[data.plan_id]))
        return built


class CreateInvoiceHandler(_InvoiceReferences):
    """Handler for CreateInvoiceCommand."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        license_repository: LicenseRepository,
        company_repository: CompanyRepository,
        bank_repository: BankRepository,
        plan_repository: PlanRepository,
        user_repository: UserRepository,
        clock: Clock = system_clock,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.invoice_repository = invoice_repository
        self.license_repository = license_repository
        self.company_repository = company_repository
        self.bank_repository = bank_repository
        self.plan_repository = plan_repository
        self.user_repository = user_repository
        self.clock = clock
        self.event_bus = event_bus

    async def _issue(self, invoice: Invoice, items, now: datetime) -> List[License]:
        owner = await self.user_repository.find_first_by_company(invoice.company_id)
        issued = []
        for item, plan in items:
            expires_at = plan.expiry_from(invoice.issue_date)
            status = LicenseLifecycleManager.initial_status(
                now, invoice_status=invoice.status, expires_at=expires_at
            )
            for _ in range(item.quantity):
                issued.append(
                    License.create(
                        key=generate_license_key(),
                        product_id=plan.product_id,
                        plan_id=plan.id,
                        status=status,
                        now=now,
                        expires_at=expires_at,
                        user_id=owner.id if owner else None,
                        invoice_id=invoice.id,
                    )
                )
        return issued

    async def handle(self, command: CreateInvoiceCommand) -> InvoiceDTO:
        """
        Handle create invoice command.

        Args:
            command: CreateInvoiceCommand

        Returns:
            InvoiceDTO including every license the invoice now funds

        Raises:
            CompanyNotFoundError: If company not found
            BankNotFoundError: If bank not found
            PlanNotFoundError: If a line item references an unknown plan
            LicenseNotFoundError: If a license to attach does not exist
            InvalidLineItemError: If a line item is invalid
            DuplicateInvoiceNumberError: If the invoice number is taken
        """
        now = self.clock.now()
        await self._check_company(command.company_id)
        await self._check_bank(command.bank_id)
        items = await self._build_line_items(command.line_items)

        for license_id in command.license_ids:
            if not await self.license_repository.find_by_id(license_id):
                raise LicenseNotFoundError(f"License {license_id} not found")

        invoice = Invoice.create(
            company_id=command.company_id,
            issue_date=command.issue_date,
            due_date=command.due_date,
            now=now,
            line_items=[item for item, _ in items],
            status=command.status,
            payment_method=command.payment_method,
            invoice_number=command.invoice_number,
            total=command.total,
            bank_id=command.bank_id,
        )
        issued = await self._issue(invoice, items, now) if command.issue_licenses else []
        cascade = None
        if invoice.is_paid:
            cascade = cascade_to(LicenseLifecycleManager.cascade_target(invoice.status), now)

        result = await self.invoice_repository.create(
            invoice,
            issued_licenses=issued,
            attach_license_ids=command.license_ids,
            cascade=cascade,
        )

        invoice_operations_total.labels(operation="create").inc()
        for license in result.created_licenses:
            licenses_created_total.labels(status=license.status.value, source="invoice").inc()
        await publish_status_changes(
            result.status_changes, INVOICE_CREATED, self.event_bus, command.actor_id
        )
        await self.event_bus.publish(
            InvoiceCreated(
                invoice_id=result.invoice.id,
                invoice_number=result.invoice.invoice_number,
                status=result.invoice.status,
                licenses_issued=len(result.created_licenses),
                actor_id=command.actor_id,
            )
        )

        licenses = await self.license_repository.find_by_invoice(result.invoice.id)
        return invoice_to_dto(result.invoice, [license_to_dto(lic) for lic in licenses])


class UpdateInvoiceHandler(_InvoiceReferences):
    """Handler for UpdateInvoiceCommand."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        license_repository: LicenseRepository,
        company_repository: CompanyRepository,
        bank_repository: BankRepository,
        plan_repository: PlanRepository,
        clock: Clock = system_clock,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.invoice_repository = invoice_repository
        self.license_repository = license_repository
        self.company_repository = company_repository
        self.bank_repository = bank_repository
        self.plan_repository = plan_repository
        self.clock = clock
        self.event_bus = event_bus

    async def handle(self, command: UpdateInvoiceCommand) -> InvoiceDTO:
        """
        Handle update invoice command.

        The license cascade runs only when the status actually changes:
        Paid activates, any other status deactivates, Expired licenses
        stay Expired.

        Raises:
            InvoiceNotFoundError: If invoice not found
            CompanyNotFoundError: If the new company does not exist
            BankNotFoundError: If the new bank does not exist
            PlanNotFoundError: If a new line item references an unknown plan
        """
        if not await self.invoice_repository.find_by_id(command.invoice_id):
            raise InvoiceNotFoundError(f"Invoice {command.invoice_id} not found")

        now = self.clock.now()
        changes = dict(command.changes)
        for name in REQUIRED_INVOICE_FIELDS:
            if name in changes and changes[name] is None:
                del changes[name]

        if "company_id" in changes:
            await self._check_company(changes["company_id"])
        if changes.get("bank_id") is not None:
            await self._check_bank(changes["bank_id"])
        replace_line_items = "line_items" in changes
        if replace_line_items:
            items = await self._build_line_items(changes["line_items"] or [])
            changes["line_items"] = tuple(item for item, _ in items)

        def merge(current: Invoice) -> Tuple[Invoice, Optional[LicenseCascade]]:
            updated = current.with_changes(now, **changes)
            if updated.status == current.status:
                return updated, None
            target = LicenseLifecycleManager.cascade_target(updated.status)
            return updated, cascade_to(target, now)

        result = await self.invoice_repository.update(
            command.invoice_id, merge, replace_line_items=replace_line_items
        )

        invoice_operations_total.labels(operation="update").inc()
        await publish_status_changes(
            result.status_changes, INVOICE_UPDATED, self.event_bus, command.actor_id
        )
        await self.event_bus.publish(
            InvoiceUpdated(
                invoice_id=result.invoice.id,
                invoice_number=result.invoice.invoice_number,
                changes=diff_invoices(result.previous, result.invoice),
                actor_id=command.actor_id,
            )
        )

        licenses = await self.license_repository.find_by_invoice(result.invoice.id)
        return invoice_to_dto(result.invoice, [license_to_dto(lic) for lic in licenses])


class DeleteInvoiceHandler:
    """Handler for DeleteInvoiceCommand."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        clock: Clock = system_clock,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.invoice_repository = invoice_repository
        self.clock = clock
        self.event_bus = event_bus

    async def handle(self, command: DeleteInvoiceCommand) -> None:
        """
        Handle delete invoice command.

        Licenses funded by the invoice become Inactive (Expired ones are
        kept) and are unlinked; then line items and the invoice go.

        Raises:
            InvoiceNotFoundError: If invoice not found
        """
        now = self.clock.now()
        result = await self.invoice_repository.delete(
            command.invoice_id,
            cascade=cascade_to(LicenseLifecycleManager.deletion_target(), now),
        )

        invoice_operations_total.labels(operation="delete").inc()
        await publish_status_changes(
            result.status_changes, INVOICE_DELETED, self.event_bus, command.actor_id
        )
        await self.event_bus.publish(
            InvoiceDeleted(
                invoice_id=result.invoice.id,
                invoice_number=result.invoice.invoice_number,
                actor_id=command.actor_id,
            )
        )


class GetInvoiceHandler:
    """Handler for GetInvoiceQuery."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        license_repository: LicenseRepository,
        clock: Clock = system_clock,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.invoice_repository = invoice_repository
        self.license_repository = license_repository
        self.clock = clock
        self.observer = LicenseObserver(license_repository, event_bus)

    async def handle(self, query: GetInvoiceQuery) -> InvoiceDTO:
        """
        Handle get invoice query.

        Raises:
            InvoiceNotFoundError: If invoice not found
        """
        invoice = await self.invoice_repository.find_by_id(query.invoice_id)
        if not invoice:
            raise InvoiceNotFoundError(f"Invoice {query.invoice_id} not found")

        licenses = await self.license_repository.find_by_invoice(invoice.id)
        observed = await self.observer.observe_all(licenses, self.clock.now())
        return invoice_to_dto(invoice, [license_to_dto(lic) for lic in observed])


class ListInvoicesHandler:
    """Handler for ListInvoicesQuery."""

    def __init__(self, invoice_repository: InvoiceRepository):
        """Initialize handler with repositories."""
        self.invoice_repository = invoice_repository

    async def handle(self, query: ListInvoicesQuery) -> List[InvoiceDTO]:
        invoices = await self.invoice_repository.find_all(
            company_id=query.company_id, status=query.status
        )
        return [invoice_to_dto(invoice) for invoice in invoices]
