"""
Activity log entry.
"""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from core.domain.value_objects import ActivityAction, EntityType


@dataclass(frozen=True)
class ActivityEntry:
    """One recorded change made through the dashboard or by the system."""

    action: ActivityAction
    entity_type: EntityType
    entity_name: str
    actor_id: Optional[uuid.UUID] = None
    details: Optional[Dict[str, Any]] = field(default=None)
