"""
Invoice domain entity.

An invoice owns its line items and funds the licenses that reference it.
Its status drives the status of those licenses (see
licenses.domain.services.LicenseLifecycleManager).
"""
import secrets
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from core.domain.exceptions import InvalidLineItemError
from core.domain.value_objects import InvoiceStatus, PaymentMethod


def generate_invoice_number(now: datetime) -> str:
    """
    Generate an invoice number such as ``INV-20240131-142501-3FA2``.

    Args:
        now: Issue time

    Returns:
        Invoice number string
    """
    return f"INV-{now:%Y%m%d-%H%M%S}-{secrets.token_hex(2).upper()}"


@dataclass(frozen=True)
class LineItem:
    """One billed position of an invoice."""

    plan_id: uuid.UUID
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        """Validate line item."""
        if not self.plan_id:
            raise InvalidLineItemError("Line item plan is required")
        if self.quantity is None or self.quantity <= 0:
            raise InvalidLineItemError("Line item quantity must be greater than zero")
        if self.unit_price is None or self.unit_price < 0:
            raise InvalidLineItemError("Line item unit price cannot be negative")
        if self.total is None or self.total < 0:
            raise InvalidLineItemError("Line item total cannot be negative")

    @classmethod
    def create(
        cls,
        plan_id: uuid.UUID,
        quantity: int,
        unit_price: Decimal,
        description: str = "",
        total: Optional[Decimal] = None,
    ) -> "LineItem":
        """
        Create a line item; ``total`` defaults to quantity times unit price.
        """
        unit_price = Decimal(unit_price)
        if total is None and quantity is not None:
            total = unit_price * quantity
        return cls(
            plan_id=plan_id,
            description=description or "",
            quantity=quantity,
            unit_price=unit_price,
            total=Decimal(total) if total is not None else None,
        )


def sum_line_items(line_items: Iterable[LineItem]) -> Decimal:
    """Sum the totals of line items."""
    return sum((item.total for item in line_items), Decimal("0"))


@dataclass(frozen=True)
class Invoice:
    """
    Invoice domain entity.

    Immutable; changes return new instances.
    """

    id: uuid.UUID
    invoice_number: str
    company_id: uuid.UUID
    issue_date: datetime
    due_date: datetime
    total: Decimal
    status: InvoiceStatus
    payment_method: PaymentMethod
    created_at: datetime
    updated_at: datetime
    bank_id: Optional[uuid.UUID] = None
    line_items: Tuple[LineItem, ...] = ()

    def __post_init__(self):
        """Validate invoice entity."""
        if not self.invoice_number or len(self.invoice_number.strip()) == 0:
            raise ValueError("Invoice number cannot be empty")
        if not self.company_id:
            raise ValueError("Company ID is required")
        if not self.issue_date or not self.due_date:
            raise ValueError("Issue date and due date are required")
        if self.total < 0:
            raise ValueError("Invoice total cannot be negative")
        object.__setattr__(self, "line_items", tuple(self.line_items))

    @classmethod
    def create(
        cls,
        company_id: uuid.UUID,
        issue_date: datetime,
        due_date: datetime,
        now: datetime,
        line_items: Iterable[LineItem] = (),
        status: InvoiceStatus = InvoiceStatus.UNPAID,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        invoice_number: Optional[str] = None,
        total: Optional[Decimal] = None,
        bank_id: Optional[uuid.UUID] = None,
        invoice_id: Optional[uuid.UUID] = None,
    ) -> "Invoice":
        """
        Create a new Invoice entity.

        Args:
            company_id: Billed company UUID
            issue_date: Issue datetime
            due_date: Payment due datetime
            now: Creation timestamp
            line_items: Billed positions
            status: Initial status (Unpaid by default)
            payment_method: How the invoice is settled
            invoice_number: Business identifier (generated if not provided)
            total: Invoice total (sum of line items if not provided)
            bank_id: Optional receiving bank account
            invoice_id: Optional UUID (generated if not provided)

        Returns:
            Invoice entity instance
        """
        line_items = tuple(line_items)
        return cls(
            id=invoice_id or uuid.uuid4(),
            invoice_number=invoice_number or generate_invoice_number(now),
            company_id=company_id,
            issue_date=issue_date,
            due_date=due_date,
            total=Decimal(total) if total is not None else sum_line_items(line_items),
            status=status,
            payment_method=payment_method,
            created_at=now,
            updated_at=now,
            bank_id=bank_id,
            line_items=line_items,
        )

    @property
    def is_paid(self) -> bool:
        return self.status.is_paid

    def with_changes(self, now: datetime, **changes) -> "Invoice":
        """
        Create a new Invoice instance with merged field changes.

        When line items are replaced and no total is given, the total is
        recomputed from the new line items.
        """
        for immutable in ("id", "created_at"):
            if immutable in changes:
                raise ValueError(f"{immutable} cannot be changed")
        if "line_items" in changes and changes.get("total") is None:
            changes["total"] = sum_line_items(changes["line_items"])
        elif "total" in changes and changes["total"] is None:
            del changes["total"]
        return replace(self, updated_at=now, **changes)
