"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


class LicenseStatus(Enum):
    """License status value object."""

    INACTIVE = "Inactive"
    ACTIVE = "Active"
    EXPIRED = "Expired"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class InvoiceStatus(Enum):
    """Invoice status value object. Only PAID funds licenses."""

    UNPAID = "Unpaid"
    PAID = "Paid"
    OVERDUE = "Overdue"

    @property
    def is_paid(self) -> bool:
        return self is InvoiceStatus.PAID

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class PaymentMethod(Enum):
    """How an invoice is settled."""

    CASH = "Cash"
    BANK = "Bank"
    QRIS = "Qris"

    def __str__(self) -> str:
        return self.value


class ActivityAction(Enum):
    """Action recorded in the activity log."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    def __str__(self) -> str:
        return self.value


class EntityType(Enum):
    """Kind of record an activity log entry refers to."""

    PRODUCT = "Product"
    PLAN = "Plan"
    LICENSE = "License"
    USER = "User"
    COMPANY = "Company"
    INVOICE = "Invoice"
    DEVICE = "Device"
    BANK = "Bank"
    ROLE = "Role"
    MENU = "Menu"
    ROLE_PERMISSION = "RolePermission"

    def __str__(self) -> str:
        return self.value
