"""
Django implementations of CompanyRepository and BankRepository ports.
"""
import uuid
from typing import Optional

from asgiref.sync import sync_to_async

from billing.domain.company import Bank, Company
from billing.infrastructure.models import Bank as BankModel
from billing.infrastructure.models import Company as CompanyModel
from billing.ports.company_repository import BankRepository, CompanyRepository


class DjangoCompanyRepository(CompanyRepository):
    """Django ORM implementation of CompanyRepository."""

    def _to_domain(self, model: CompanyModel) -> Company:
        return Company(
            id=model.id,
            name=model.name,
            created_at=model.created_at,
            updated_at=model.updated_at,
            address=model.address,
            phone=model.phone,
            email=model.email,
            website=model.website,
        )

    @sync_to_async
    def find_by_id(self, company_id: uuid.UUID) -> Optional[Company]:
        """
        Find a company by ID.

        Args:
            company_id: Company UUID

        Returns:
            Company entity or None if not found
        """
        try:
            return self._to_domain(CompanyModel.objects.get(id=company_id))
        except CompanyModel.DoesNotExist:
            return None


class DjangoBankRepository(BankRepository):
    """Django ORM implementation of BankRepository."""

    @sync_to_async
    def find_by_id(self, bank_id: uuid.UUID) -> Optional[Bank]:
        """Find a bank account by ID."""
        model = BankModel.objects.filter(id=bank_id).first()
        if model is None:
            return None
        return Bank(
            id=model.id,
            name=model.name,
            account_number=model.account_number,
            owner_name=model.owner_name,
        )
