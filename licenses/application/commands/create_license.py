"""
CreateLicenseCommand.

Command to create a single license from the dashboard.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import LicenseStatus


@dataclass
class CreateLicenseCommand:
    """
    Command to create a license.

    When ``status`` is omitted it is derived from the linked invoice.
    When ``expires_at`` is omitted and ``derive_expiry`` is set, the
    expiry is taken from the plan duration.
    """

    product_id: uuid.UUID
    plan_id: uuid.UUID
    key: Optional[str] = None
    status: Optional[LicenseStatus] = None
    expires_at: Optional[datetime] = None
    user_id: Optional[uuid.UUID] = None
    invoice_id: Optional[uuid.UUID] = None
    derive_expiry: bool = True
    actor_id: Optional[uuid.UUID] = None
