"""
Invoice DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from billing.domain.invoice import Invoice, LineItem
from licenses.application.dto.license_dto import LicenseDTO


@dataclass
class LineItemDTO:
    """DTO for one invoice line item."""

    id: uuid.UUID
    plan_id: uuid.UUID
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal


@dataclass
class InvoiceDTO:
    """DTO for invoice information."""

    id: uuid.UUID
    invoice_number: str
    company_id: uuid.UUID
    bank_id: Optional[uuid.UUID]
    issue_date: datetime
    due_date: datetime
    total: Decimal
    status: str
    payment_method: str
    created_at: datetime
    updated_at: datetime
    line_items: List[LineItemDTO] = field(default_factory=list)
    licenses: List[LicenseDTO] = field(default_factory=list)


def line_item_to_dto(item: LineItem) -> LineItemDTO:
    return LineItemDTO(
        id=item.id,
        plan_id=item.plan_id,
        description=item.description,
        quantity=item.quantity,
        unit_price=item.unit_price,
        total=item.total,
    )


def invoice_to_dto(invoice: Invoice, licenses: Optional[List[LicenseDTO]] = None) -> InvoiceDTO:
    return InvoiceDTO(
        id=invoice.id,
        invoice_number=invoice.invoice_number,
        company_id=invoice.company_id,
        bank_id=invoice.bank_id,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        total=invoice.total,
        status=invoice.status.value,
        payment_method=invoice.payment_method.value,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
        line_items=[line_item_to_dto(item) for item in invoice.line_items],
        licenses=licenses or [],
    )
