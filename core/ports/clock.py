"""
Clock port (interface).

Lifecycle decisions compare expiry dates against "now"; handlers receive
a clock instead of reading the system time so tests can pin it.
"""
from abc import ABC, abstractmethod
from datetime import datetime


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """
        Return the current time.

        Returns:
            Timezone-aware datetime
        """
        pass
