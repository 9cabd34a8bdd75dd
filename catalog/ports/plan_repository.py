"""
Plan repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from catalog.domain.plan import Plan


class PlanRepository(ABC):
    """Abstract repository for Plan entities."""

    @abstractmethod
    async def save(self, plan: Plan) -> Plan:
        """
        Save a plan entity.

        Args:
            plan: Plan entity to save

        Returns:
            Saved plan entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, plan_id: uuid.UUID) -> Optional[Plan]:
        """
        Find a plan by ID.

        Args:
            plan_id: Plan UUID

        Returns:
            Plan entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_ids(self, plan_ids: List[uuid.UUID]) -> List[Plan]:
        """
        Find several plans at once.

        Args:
            plan_ids: Plan UUIDs

        Returns:
            Plans that exist, in no particular order
        """
        pass

    @abstractmethod
    async def find_by_product(self, product_id: uuid.UUID) -> List[Plan]:
        """
        List the plans offered for a product.

        Args:
            product_id: Product UUID

        Returns:
            List of Plan entities
        """
        pass
