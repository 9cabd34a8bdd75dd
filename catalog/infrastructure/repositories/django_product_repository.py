"""
Django implementation of ProductRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from catalog.domain.product import Product
from catalog.infrastructure.models import Product as ProductModel
from catalog.ports.product_repository import ProductRepository


class DjangoProductRepository(ProductRepository):
    """Django ORM implementation of ProductRepository."""

    def _to_domain(self, model: ProductModel) -> Product:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Product model

        Returns:
            Product domain entity
        """
        return Product(
            id=model.id,
            name=model.name,
            description=model.description,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, product: Product) -> ProductModel:
        """
        Convert domain entity to Django model.

        Args:
            product: Product domain entity

        Returns:
            Django Product model
        """
        model, created = ProductModel.objects.get_or_create(
            id=product.id,
            defaults={
                "name": product.name,
                "description": product.description,
            },
        )
        if not created:
            model.name = product.name
            model.description = product.description
        return model

    @sync_to_async
    def save(self, product: Product) -> Product:
        """
        Save a product entity.

        Args:
            product: Product entity to save

        Returns:
            Saved product entity
        """
        model = self._to_model(product)
        model.save()
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        """
        Find a product by ID.

        Args:
            product_id: Product UUID

        Returns:
            Product entity or None if not found
        """
        try:
            return self._to_domain(ProductModel.objects.get(id=product_id))
        except ProductModel.DoesNotExist:
            return None

    @sync_to_async
    def find_all(self) -> List[Product]:
        """List all products."""
        return [self._to_domain(model) for model in ProductModel.objects.all()]
