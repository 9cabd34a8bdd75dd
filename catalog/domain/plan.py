"""
Plan domain entity.

A plan is a priced offering of a product: how many devices a license
may bind and how long it runs.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Plan:
    """
    Plan domain entity.

    ``duration_days == 0`` marks a permanent plan whose licenses never expire.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    name: str
    price: Decimal
    device_limit: int
    duration_days: int
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate plan entity."""
        if not self.product_id:
            raise ValueError("Product ID is required")
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Plan name cannot be empty")
        if self.price < 0:
            raise ValueError("Plan price cannot be negative")
        if self.device_limit < 1:
            raise ValueError("Device limit must be at least 1")
        if self.duration_days < 0:
            raise ValueError("Duration cannot be negative")

    @classmethod
    def create(
        cls,
        product_id: uuid.UUID,
        name: str,
        now: datetime,
        price: Decimal = Decimal("0"),
        device_limit: int = 1,
        duration_days: int = 0,
        plan_id: Optional[uuid.UUID] = None,
    ) -> "Plan":
        """
        Create a new Plan entity.

        Args:
            product_id: Product UUID this plan sells
            name: Plan display name
            now: Creation timestamp
            price: Unit price
            device_limit: Maximum number of active devices per license
            duration_days: License lifetime in days, 0 for permanent
            plan_id: Optional UUID (generated if not provided)

        Returns:
            Plan entity instance
        """
        return cls(
            id=plan_id or uuid.uuid4(),
            product_id=product_id,
            name=name.strip(),
            price=Decimal(price),
            device_limit=device_limit,
            duration_days=duration_days,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_permanent(self) -> bool:
        return self.duration_days == 0

    def expiry_from(self, start: datetime) -> Optional[datetime]:
        """
        Compute when a license starting at ``start`` ends.

        Returns:
            Expiry datetime, or None for permanent plans
        """
        if self.is_permanent:
            return None
        return start + timedelta(days=self.duration_days)
