"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from datetime import datetime
from typing import Iterable, List, Optional

from core.domain.value_objects import InvoiceStatus, LicenseStatus
from licenses.domain.license import License


class LicenseLifecycleManager:
    """
    Decides license status. Pure: no I/O, the caller persists the result.

    Ordering rules:
    - Expired is sticky against invoice cascades.
    - The expiry check always runs after any other assignment.
    """

    @staticmethod
    def apply_expiry(
        status: LicenseStatus, expires_at: Optional[datetime], now: datetime
    ) -> LicenseStatus:
        """
        Demote an Active status whose expiry has been reached.

        Args:
            status: Status about to be stored or returned
            expires_at: Expiry of the license, None for non-expiring
            now: Current time

        Returns:
            EXPIRED if status is ACTIVE and expires_at <= now, else status
        """
        if status == LicenseStatus.ACTIVE and expires_at is not None and expires_at <= now:
            return LicenseStatus.EXPIRED
        return status

    @staticmethod
    def observe(license: License, now: datetime) -> License:
        """
        Derive the status a reader must see.

        Args:
            license: License as stored
            now: Current time

        Returns:
            The same instance, or an Expired copy that must be written back
        """
        status = LicenseLifecycleManager.apply_expiry(license.status, license.expires_at, now)
        return license.with_status(status, now)

    @staticmethod
    def cascade_target(invoice_status: InvoiceStatus) -> LicenseStatus:
        """
        Status an invoice status pushes onto its licenses.

        Args:
            invoice_status: Status of the funding invoice

        Returns:
            ACTIVE for a paid invoice, INACTIVE for anything else
        """
        return LicenseStatus.ACTIVE if invoice_status.is_paid else LicenseStatus.INACTIVE

    @staticmethod
    def deletion_target() -> LicenseStatus:
        """Status pushed onto licenses whose invoice is deleted."""
        return LicenseStatus.INACTIVE

    @staticmethod
    def initial_status(
        now: datetime,
        requested: Optional[LicenseStatus] = None,
        invoice_status: Optional[InvoiceStatus] = None,
        expires_at: Optional[datetime] = None,
    ) -> LicenseStatus:
        """
        Status of a license about to be created.

        An explicit status wins; otherwise a linked invoice decides;
        otherwise the license starts Inactive. The expiry check runs last.

        Args:
            now: Current time
            requested: Status supplied by the caller, if any
            invoice_status: Status of the linked invoice, if any
            expires_at: Expiry of the new license

        Returns:
            Status to insert
        """
        if requested is not None:
            status = requested
        elif invoice_status is not None:
            status = LicenseLifecycleManager.cascade_target(invoice_status)
        else:
            status = LicenseStatus.INACTIVE
        return LicenseLifecycleManager.apply_expiry(status, expires_at, now)

    @staticmethod
    def relink_status(
        current: LicenseStatus, invoice_status: Optional[InvoiceStatus]
    ) -> LicenseStatus:
        """
        Status after a license is moved to another invoice.

        Args:
            current: Status before the move
            invoice_status: Status of the new invoice, None when unlinked

        Returns:
            Status to store before the expiry check
        """
        if current == LicenseStatus.EXPIRED or invoice_status is None:
            return current
        return LicenseLifecycleManager.cascade_target(invoice_status)

    @staticmethod
    def apply_cascade(
        licenses: Iterable[License], target: LicenseStatus, now: datetime
    ) -> List[License]:
        """
        Push an invoice-driven status onto licenses.

        Expired licenses are left untouched. Every assigned status then
        goes through the expiry check.

        Args:
            licenses: Licenses referencing the invoice
            target: Status the invoice operation assigns
            now: Current time

        Returns:
            Only the licenses whose status changed, as new instances
        """
        changed = []
        for license in licenses:
            if license.status == LicenseStatus.EXPIRED:
                continue
            status = LicenseLifecycleManager.apply_expiry(target, license.expires_at, now)
            if status != license.status:
                changed.append(license.with_status(status, now))
        return changed
