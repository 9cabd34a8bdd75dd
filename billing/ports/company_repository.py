"""
Company and Bank repository ports (interfaces).
"""
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from billing.domain.company import Bank, Company


class CompanyRepository(ABC):
    """Abstract repository for Company entities."""

    @abstractmethod
    async def find_by_id(self, company_id: uuid.UUID) -> Optional[Company]:
        """
        Find a company by ID.

        Args:
            company_id: Company UUID

        Returns:
            Company entity or None if not found
        """
        pass


class BankRepository(ABC):
    """Abstract repository for Bank entities."""

    @abstractmethod
    async def find_by_id(self, bank_id: uuid.UUID) -> Optional[Bank]:
        """
        Find a bank account by ID.

        Args:
            bank_id: Bank UUID

        Returns:
            Bank entity or None if not found
        """
        pass
