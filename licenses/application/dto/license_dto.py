"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from licenses.domain.license import License


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: uuid.UUID
    key: str
    product_id: uuid.UUID
    plan_id: uuid.UUID
    status: str
    expires_at: Optional[datetime]
    user_id: Optional[uuid.UUID]
    invoice_id: Optional[uuid.UUID]
    created_at: datetime
    updated_at: datetime


def license_to_dto(license: License) -> LicenseDTO:
    return LicenseDTO(
        id=license.id,
        key=license.key,
        product_id=license.product_id,
        plan_id=license.plan_id,
        status=license.status.value,
        expires_at=license.expires_at,
        user_id=license.user_id,
        invoice_id=license.invoice_id,
        created_at=license.created_at,
        updated_at=license.updated_at,
    )
