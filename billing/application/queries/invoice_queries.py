"""
Invoice queries.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import InvoiceStatus


@dataclass
class GetInvoiceQuery:
    """Query one invoice with its line items and licenses."""

    invoice_id: uuid.UUID


@dataclass
class ListInvoicesQuery:
    """Query invoices, optionally filtered by company or status."""

    company_id: Optional[uuid.UUID] = None
    status: Optional[InvoiceStatus] = None
