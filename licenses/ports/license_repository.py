"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from core.domain.value_objects import InvoiceStatus, LicenseStatus
from licenses.domain.license import License

# Reads the status of an invoice inside the running transaction; None if it is gone.
InvoiceStatusLookup = Callable[[uuid.UUID], Optional[InvoiceStatus]]

# Receives the freshly locked license and returns the version to store.
LicenseMerge = Callable[[License, InvoiceStatusLookup], License]

# (before, after) pair of a persisted status change.
StatusChange = Tuple[License, License]


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Insert a new license or overwrite every field of an existing one.

        Args:
            license: License entity to save

        Returns:
            Saved license entity

        Raises:
            DuplicateLicenseKeyError: If another license already uses the key
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_key(self, key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            key: License key

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_all(
        self,
        status: Optional[LicenseStatus] = None,
        product_id: Optional[uuid.UUID] = None,
        user_id: Optional[uuid.UUID] = None,
        invoice_id: Optional[uuid.UUID] = None,
    ) -> List[License]:
        """
        List licenses, newest first, optionally filtered.

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def find_by_invoice(self, invoice_id: uuid.UUID) -> List[License]:
        """
        List the licenses funded by an invoice.

        Args:
            invoice_id: Invoice UUID

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def update_status(
        self,
        license_id: uuid.UUID,
        expected: LicenseStatus,
        new: LicenseStatus,
        now: datetime,
    ) -> bool:
        """
        Change the status of one license if it still has ``expected``.

        Concurrent callers writing the same transition are harmless:
        only the first one matches.

        Args:
            license_id: License UUID
            expected: Status the stored row must have
            new: Status to write
            now: Modification timestamp

        Returns:
            True if a row was updated
        """
        pass

    @abstractmethod
    async def update(self, license_id: uuid.UUID, merge: LicenseMerge) -> StatusChange:
        """
        Read, change and write one license as a single unit of work.

        The stored license is re-read under a row lock and handed to
        ``merge`` together with an invoice status lookup; the returned
        version is written before the lock is released, so changes
        committed meanwhile (such as an invoice cascade) are never
        overwritten with stale values.

        Args:
            license_id: License UUID
            merge: Builds the new version from the locked one

        Returns:
            (before, after) pair

        Raises:
            LicenseNotFoundError: If the license does not exist
            DuplicateLicenseKeyError: If the new key is taken
        """
        pass

    @abstractmethod
    async def expire_overdue(self, now: datetime) -> List[StatusChange]:
        """
        Mark every Active license with expires_at <= now as Expired.

        Args:
            now: Current time

        Returns:
            (before, after) pair for every license expired
        """
        pass

    @abstractmethod
    async def delete(self, license_id: uuid.UUID) -> bool:
        """
        Delete a license.

        Args:
            license_id: License UUID

        Returns:
            True if a license was deleted
        """
        pass
