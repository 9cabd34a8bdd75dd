"""
Billing domain events.
"""

import uuid
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent
from core.domain.value_objects import InvoiceStatus


class InvoiceCreated(DomainEvent):
    """Event raised when an invoice is created."""

    def __init__(
        self,
        invoice_id: uuid.UUID,
        invoice_number: str,
        status: InvoiceStatus,
        licenses_issued: int = 0,
        actor_id: Optional[uuid.UUID] = None,
    ):
        """
        Initialize InvoiceCreated event.

        Args:
            invoice_id: Invoice UUID
            invoice_number: Business identifier
            status: Status the invoice was created with
            licenses_issued: Number of licenses issued from line items
            actor_id: User who created the invoice
        """
        super().__init__(aggregate_id=str(invoice_id), actor_id=actor_id)
        self.invoice_id = invoice_id
        self.invoice_number = invoice_number
        self.status = status
        self.licenses_issued = licenses_issued


class InvoiceUpdated(DomainEvent):
    """Event raised when invoice fields are edited."""

    def __init__(
        self,
        invoice_id: uuid.UUID,
        invoice_number: str,
        changes: Dict[str, Dict[str, Any]],
        actor_id: Optional[uuid.UUID] = None,
    ):
        super().__init__(aggregate_id=str(invoice_id), actor_id=actor_id)
        self.invoice_id = invoice_id
        self.invoice_number = invoice_number
        self.changes = changes


class InvoiceDeleted(DomainEvent):
    """Event raised when an invoice is deleted."""

    def __init__(
        self,
        invoice_id: uuid.UUID,
        invoice_number: str,
        actor_id: Optional[uuid.UUID] = None,
    ):
        super().__init__(aggregate_id=str(invoice_id), actor_id=actor_id)
        self.invoice_id = invoice_id
        self.invoice_number = invoice_number
