"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from core.domain.value_objects import LicenseStatus
from licenses.domain.license_key import normalize_license_key


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Represents the right to use a product under a plan, optionally
    funded by an invoice. Instances are immutable; every change
    returns a new instance.
    """

    id: uuid.UUID
    key: str
    product_id: uuid.UUID
    plan_id: uuid.UUID
    status: LicenseStatus
    expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    user_id: Optional[uuid.UUID] = None
    invoice_id: Optional[uuid.UUID] = None

    def __post_init__(self):
        """Validate license entity."""
        if not self.product_id:
            raise ValueError("Product ID is required")
        if not self.plan_id:
            raise ValueError("Plan ID is required")
        if not isinstance(self.status, LicenseStatus):
            raise ValueError(f"Invalid license status: {self.status}")
        object.__setattr__(self, "key", normalize_license_key(self.key))

    @classmethod
    def create(
        cls,
        key: str,
        product_id: uuid.UUID,
        plan_id: uuid.UUID,
        status: LicenseStatus,
        now: datetime,
        expires_at: Optional[datetime] = None,
        user_id: Optional[uuid.UUID] = None,
        invoice_id: Optional[uuid.UUID] = None,
        license_id: Optional[uuid.UUID] = None,
    ) -> "License":
        """
        Create a new License entity.

        The caller decides the status (see LicenseLifecycleManager.initial_status).

        Args:
            key: Unique license key
            product_id: Product UUID
            plan_id: Plan UUID
            status: Initial status
            now: Creation timestamp
            expires_at: Optional expiration datetime, None for non-expiring
            user_id: Optional owner UUID
            invoice_id: Optional funding invoice UUID
            license_id: Optional UUID (generated if not provided)

        Returns:
            License entity instance
        """
        return cls(
            id=license_id or uuid.uuid4(),
            key=key,
            product_id=product_id,
            plan_id=plan_id,
            status=status,
            expires_at=expires_at,
            created_at=now,
            updated_at=now,
            user_id=user_id,
            invoice_id=invoice_id,
        )

    def is_past_expiry(self, now: datetime) -> bool:
        """
        Check whether the expiry instant has been reached.

        Args:
            now: Current time

        Returns:
            True if expires_at is set and not after now
        """
        return self.expires_at is not None and self.expires_at <= now

    def with_status(self, status: LicenseStatus, now: datetime) -> "License":
        """
        Create a new License instance with another status.

        Args:
            status: New status
            now: Modification timestamp

        Returns:
            New License instance (self if the status is unchanged)
        """
        if status == self.status:
            return self
        return replace(self, status=status, updated_at=now)

    def with_changes(self, now: datetime, **changes) -> "License":
        """
        Create a new License instance with merged field changes.

        ``id`` and ``created_at`` cannot be changed.

        Args:
            now: Modification timestamp
            **changes: Field values to overwrite

        Returns:
            New License instance
        """
        for immutable in ("id", "created_at"):
            if immutable in changes:
                raise ValueError(f"{immutable} cannot be changed")
        return replace(self, updated_at=now, **changes)
