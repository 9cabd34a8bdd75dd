"""
Invoice commands.

Commands to create, update and delete invoices. Every one of them may
change the status of the licenses the invoice funds.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from core.domain.value_objects import InvoiceStatus, PaymentMethod


@dataclass
class LineItemData:
    """A line item as submitted by a client."""

    plan_id: uuid.UUID
    quantity: int
    unit_price: Decimal
    description: str = ""
    total: Optional[Decimal] = None


@dataclass
class CreateInvoiceCommand:
    """
    Command to create an invoice.

    With ``issue_licenses`` set, ``quantity`` licenses are issued for
    each line item. ``license_ids`` links existing licenses to the new
    invoice. Both happen before the Paid cascade runs.
    """

    company_id: uuid.UUID
    issue_date: datetime
    due_date: datetime
    line_items: List[LineItemData] = field(default_factory=list)
    status: InvoiceStatus = InvoiceStatus.UNPAID
    payment_method: PaymentMethod = PaymentMethod.CASH
    invoice_number: Optional[str] = None
    total: Optional[Decimal] = None
    bank_id: Optional[uuid.UUID] = None
    issue_licenses: bool = False
    license_ids: List[uuid.UUID] = field(default_factory=list)
    actor_id: Optional[uuid.UUID] = None


INVOICE_UPDATABLE_FIELDS = (
    "invoice_number",
    "company_id",
    "bank_id",
    "issue_date",
    "due_date",
    "total",
    "status",
    "payment_method",
    "line_items",
)


@dataclass
class UpdateInvoiceCommand:
    """
    Command to update an invoice.

    ``changes`` only holds supplied fields. ``line_items``, when present,
    replaces every existing line item.
    """

    invoice_id: uuid.UUID
    changes: Dict[str, Any] = field(default_factory=dict)
    actor_id: Optional[uuid.UUID] = None

    def __post_init__(self):
        unknown = set(self.changes) - set(INVOICE_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update invoice fields: {', '.join(sorted(unknown))}")


@dataclass
class DeleteInvoiceCommand:
    """Command to delete an invoice; its licenses become Inactive and unlinked."""

    invoice_id: uuid.UUID
    actor_id: Optional[uuid.UUID] = None
