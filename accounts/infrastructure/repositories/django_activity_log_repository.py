"""
Django implementation of ActivityLogRepository port.
"""
import logging

from asgiref.sync import sync_to_async

from accounts.domain.activity import ActivityEntry
from accounts.infrastructure.models import ActivityLog as ActivityLogModel
from accounts.infrastructure.models import User as UserModel
from accounts.ports.activity_log_repository import ActivityLogRepository

logger = logging.getLogger(__name__)


def record_activity(entry: ActivityEntry) -> ActivityLogModel:
    """
    Write one activity row synchronously.

    An actor that no longer exists is recorded as a system action.

    Args:
        entry: Entry to store

    Returns:
        Created ActivityLog model
    """
    actor_id = entry.actor_id
    if actor_id is not None and not UserModel.objects.filter(id=actor_id).exists():
        logger.warning("Activity actor %s not found, recording as system", actor_id)
        actor_id = None
    return ActivityLogModel.objects.create(
        user_id=actor_id,
        action=entry.action.value,
        entity_type=entry.entity_type.value,
        entity_name=entry.entity_name[:255],
        details=entry.details,
    )


class DjangoActivityLogRepository(ActivityLogRepository):
    """Django ORM implementation of ActivityLogRepository."""

    async def record(self, entry: ActivityEntry) -> None:
        """Append an entry to the activity log."""
        await sync_to_async(record_activity)(entry)
