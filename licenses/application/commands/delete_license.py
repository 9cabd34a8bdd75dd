"""
DeleteLicenseCommand.
"""

import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class DeleteLicenseCommand:
    """Command to delete a license and its devices."""

    license_id: uuid.UUID
    actor_id: Optional[uuid.UUID] = None
