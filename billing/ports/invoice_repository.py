"""
Invoice repository port (interface).

Invoice mutations and the resulting license status changes are one unit
of work: implementations must apply both in a single transaction, or
neither.
"""
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from billing.domain.invoice import Invoice
from core.domain.value_objects import InvoiceStatus
from licenses.domain.license import License

# Receives the licenses currently funded by the invoice, returns the ones
# whose status must change (as new instances).
LicenseCascade = Callable[[List[License]], List[License]]

# Receives the freshly locked invoice, returns its new version and the
# cascade to run on its licenses (None for no cascade).
InvoiceMerge = Callable[[Invoice], Tuple[Invoice, Optional[LicenseCascade]]]


@dataclass
class InvoiceChangeSet:
    """Outcome of an invoice mutation."""

    invoice: Invoice
    created_licenses: List[License] = field(default_factory=list)
    status_changes: List[Tuple[License, License]] = field(default_factory=list)
    previous: Optional[Invoice] = None


class InvoiceRepository(ABC):
    """
    Abstract repository for Invoice entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_by_id(self, invoice_id: uuid.UUID) -> Optional[Invoice]:
        """
        Find an invoice by ID, with its line items.

        Args:
            invoice_id: Invoice UUID

        Returns:
            Invoice entity or None if not found
        """
        pass

    @abstractmethod
    async def find_all(
        self,
        company_id: Optional[uuid.UUID] = None,
        status: Optional[InvoiceStatus] = None,
    ) -> List[Invoice]:
        """
        List invoices, newest issue date first.

        Returns:
            List of Invoice entities
        """
        pass

    @abstractmethod
    async def create(
        self,
        invoice: Invoice,
        issued_licenses: Sequence[License] = (),
        attach_license_ids: Sequence[uuid.UUID] = (),
        cascade: Optional[LicenseCascade] = None,
    ) -> InvoiceChangeSet:
        """
        Insert an invoice with its line items.

        In the same transaction: insert ``issued_licenses``, link the
        licenses in ``attach_license_ids`` to the invoice, then apply
        ``cascade`` to every license funded by the invoice.

        Raises:
            DuplicateInvoiceNumberError: If the invoice number is taken
        """
        pass

    @abstractmethod
    async def update(
        self,
        invoice_id: uuid.UUID,
        merge: InvoiceMerge,
        replace_line_items: bool = False,
    ) -> InvoiceChangeSet:
        """
        Update an invoice and apply the resulting cascade, in one transaction.

        The invoice is re-read under a row lock and handed to ``merge``,
        so the cascade is decided from the status actually stored, not
        from a copy read before a concurrent change committed.

        Args:
            invoice_id: Invoice UUID
            merge: Builds the new version and picks the cascade
            replace_line_items: Whether the new version carries new line items

        Returns:
            Change set whose ``previous`` is the locked version

        Raises:
            InvoiceNotFoundError: If the invoice does not exist
            DuplicateInvoiceNumberError: If the invoice number is taken
        """
        pass

    @abstractmethod
    async def delete(
        self, invoice_id: uuid.UUID, cascade: Optional[LicenseCascade] = None
    ) -> InvoiceChangeSet:
        """
        Delete an invoice.

        Order: apply ``cascade`` to its licenses, delete the line items,
        delete the invoice row (licenses keep existing, unlinked).

        Returns:
            Change set carrying the deleted invoice

        Raises:
            InvoiceNotFoundError: If the invoice does not exist
        """
        pass
