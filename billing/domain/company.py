"""
Company and Bank domain entities.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Company:
    """A customer organisation that is invoiced and owns users."""

    id: uuid.UUID
    name: str
    created_at: datetime
    updated_at: datetime
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None

    def __post_init__(self):
        """Validate company entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Company name cannot be empty")


@dataclass(frozen=True)
class Bank:
    """A bank account invoices can be paid into."""

    id: uuid.UUID
    name: str
    account_number: str
    owner_name: str

    def __post_init__(self):
        """Validate bank entity."""
        if not self.name or not self.account_number:
            raise ValueError("Bank name and account number are required")
