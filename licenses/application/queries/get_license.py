"""
License queries.

Every query returns licenses as observed now: an Active license
past its expiry is reported, and stored, as Expired.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import LicenseStatus


@dataclass
class GetLicenseQuery:
    """Query one license by ID."""

    license_id: uuid.UUID


@dataclass
class GetLicenseByKeyQuery:
    """Query one license by its key."""

    key: str


@dataclass
class ListLicensesQuery:
    """Query all licenses, optionally filtered."""

    status: Optional[LicenseStatus] = None
    product_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None
    invoice_id: Optional[uuid.UUID] = None
