"""
Device domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from typing import Optional

from core.domain.exceptions import LicenseExpiredError, LicenseInactiveError
from core.domain.value_objects import InvoiceStatus, LicenseStatus
from licenses.domain.license import License

DEFAULT_DEVICE_LIMIT = 1


class ActivationPolicy:
    """Domain service deciding whether a machine may activate a license."""

    @staticmethod
    def ensure_usable(license: License, invoice_status: Optional[InvoiceStatus]) -> None:
        """
        Refuse licenses that cannot be activated.

        ``license`` must already have gone through the read-time expiry check.

        Args:
            license: License as observed now
            invoice_status: Status of the funding invoice, None when unfunded

        Raises:
            LicenseExpiredError: If the license is Expired
            LicenseInactiveError: If the license is Inactive and its invoice is not Paid
        """
        if license.status == LicenseStatus.EXPIRED:
            raise LicenseExpiredError(f"License {license.key} has expired")
        if (
            license.status == LicenseStatus.INACTIVE
            and invoice_status is not None
            and not invoice_status.is_paid
        ):
            raise LicenseInactiveError(f"License {license.key} is awaiting payment")

    @staticmethod
    def has_free_slot(active_devices: int, device_limit: Optional[int]) -> bool:
        """
        Check if another device fits under the limit.

        Args:
            active_devices: Number of active devices already bound
            device_limit: Plan device limit (defaults to 1)

        Returns:
            True if a new device may be added
        """
        limit = device_limit if device_limit and device_limit > 0 else DEFAULT_DEVICE_LIMIT
        return active_devices < limit

    @staticmethod
    def status_after_activation(license: License) -> LicenseStatus:
        """
        Status a license takes once a device is bound.

        Returns:
            ACTIVE for a usable Inactive license, the current status otherwise
        """
        if license.status == LicenseStatus.INACTIVE:
            return LicenseStatus.ACTIVE
        return license.status
