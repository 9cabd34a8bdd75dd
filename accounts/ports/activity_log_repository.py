"""
Activity log repository port (interface).
"""
from abc import ABC, abstractmethod

from accounts.domain.activity import ActivityEntry


class ActivityLogRepository(ABC):
    """Abstract append-only store for activity entries."""

    @abstractmethod
    async def record(self, entry: ActivityEntry) -> None:
        """
        Append an entry to the activity log.

        Args:
            entry: Entry to store
        """
        pass
