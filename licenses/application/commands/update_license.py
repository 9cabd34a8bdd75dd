"""
UpdateLicenseCommand.

Command to edit the fields of an existing license.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

UPDATABLE_FIELDS = (
    "key",
    "product_id",
    "plan_id",
    "status",
    "expires_at",
    "user_id",
    "invoice_id",
)


@dataclass
class UpdateLicenseCommand:
    """
    Command to update a license.

    ``changes`` only holds the fields the caller supplied, so an
    explicit ``None`` (for example to unlink an invoice) can be told
    apart from an omitted field.
    """

    license_id: uuid.UUID
    changes: Dict[str, Any] = field(default_factory=dict)
    actor_id: Optional[uuid.UUID] = None

    def __post_init__(self):
        unknown = set(self.changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update license fields: {', '.join(sorted(unknown))}")
