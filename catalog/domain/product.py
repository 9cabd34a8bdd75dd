"""
Product domain entity.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Product:
    """
    Product domain entity.

    Represents a piece of software that can be licensed.
    """

    id: uuid.UUID
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate product entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Product name cannot be empty")
        if len(self.name) > 255:
            raise ValueError("Product name too long")

    @classmethod
    def create(
        cls,
        name: str,
        now: datetime,
        description: Optional[str] = None,
        product_id: Optional[uuid.UUID] = None,
    ) -> "Product":
        """
        Create a new Product entity.

        Args:
            name: Product display name
            now: Creation timestamp
            description: Optional free-text description
            product_id: Optional UUID (generated if not provided)

        Returns:
            Product entity instance
        """
        return cls(
            id=product_id or uuid.uuid4(),
            name=name.strip(),
            description=description,
            created_at=now,
            updated_at=now,
        )
