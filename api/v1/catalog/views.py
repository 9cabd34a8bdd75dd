"""
Product and plan API views.

Plain CRUD over the catalog; deleting a product or plan that licenses
still use answers 409.
"""

from rest_framework import generics

from api.mixins import ActivityLoggedMixin
from api.v1.catalog.serializers import PlanSerializer, ProductSerializer
from api.v1.params import uuid_param
from catalog.infrastructure.models import Plan, Product
from core.domain.value_objects import EntityType


class ProductListView(ActivityLoggedMixin, generics.ListCreateAPIView):
    """List and create products."""

    rbac_menu = "Products"
    activity_entity_type = EntityType.PRODUCT
    queryset = Product.objects.all()
    serializer_class = ProductSerializer


class ProductDetailView(ActivityLoggedMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update and delete one product."""

    rbac_menu = "Products"
    activity_entity_type = EntityType.PRODUCT
    queryset = Product.objects.all()
    serializer_class = ProductSerializer


class PlanListView(ActivityLoggedMixin, generics.ListCreateAPIView):
    """List plans, optionally filtered by ``?product_id=``, and create plans."""

    rbac_menu = "Plans"
    activity_entity_type = EntityType.PLAN
    serializer_class = PlanSerializer

    def get_queryset(self):
        queryset = Plan.objects.select_related("product")
        product_id = uuid_param(self.request, "product_id")
        if product_id:
            queryset = queryset.filter(product_id=product_id)
        return queryset

    def activity_name(self, instance) -> str:
        return f"{instance.product.name} - {instance.name}"


class PlanDetailView(ActivityLoggedMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update and delete one plan."""

    rbac_menu = "Plans"
    activity_entity_type = EntityType.PLAN
    queryset = Plan.objects.select_related("product")
    serializer_class = PlanSerializer

    def activity_name(self, instance) -> str:
        return f"{instance.product.name} - {instance.name}"
