"""
Django implementation of PlanRepository port.
"""

import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from catalog.domain.plan import Plan
from catalog.infrastructure.models import Plan as PlanModel
from catalog.ports.plan_repository import PlanRepository


class DjangoPlanRepository(PlanRepository):
    """Django ORM implementation of PlanRepository."""

    def _to_domain(self, model: PlanModel) -> Plan:
        return Plan(
            id=model.id,
            product_id=model.product_id,
            name=model.name,
            price=model.price,
            device_limit=model.device_limit,
            duration_days=model.duration_days,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, plan: Plan) -> PlanModel:
        model, created = PlanModel.objects.get_or_create(
            id=plan.id,
            defaults={
                "product_id": plan.product_id,
                "name": plan.name,
                "price": plan.price,
                "device_limit": plan.device_limit,
                "duration_days": plan.duration_days,
            },
        )
        if not created:
            model.product_id = plan.product_id
            model.name = plan.name
            model.price = plan.price
            model.device_limit = plan.device_limit
            model.duration_days = plan.duration_days
        return model

    @sync_to_async
    def save(self, plan: Plan) -> Plan:
        """
        Save a plan entity.

        Args:
            plan: Plan entity to save

        Returns:
            Saved plan entity
        """
        model = self._to_model(plan)
        model.save()
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, plan_id: uuid.UUID) -> Optional[Plan]:
        """
        Find a plan by ID.

        Args:
            plan_id: Plan UUID

        Returns:
            Plan entity or None if not found
        """
        try:
            return self._to_domain(PlanModel.objects.get(id=plan_id))
        except PlanModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_ids(self, plan_ids: List[uuid.UUID]) -> List[Plan]:
        """Find several plans at once."""
        return [self._to_domain(model) for model in PlanModel.objects.filter(id__in=plan_ids)]

    @sync_to_async
    def find_by_product(self, product_id: uuid.UUID) -> List[Plan]:
        """List the plans offered for a product."""
        return [
            self._to_domain(model) for model in PlanModel.objects.filter(product_id=product_id)
        ]
