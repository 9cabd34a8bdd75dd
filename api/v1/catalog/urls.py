"""
URL configuration for catalog endpoints.
"""

from django.urls import path

from api.v1.catalog import views

urlpatterns = [
    path("products/", views.ProductListView.as_view(), name="product-list"),
    path("products/<uuid:pk>/", views.ProductDetailView.as_view(), name="product-detail"),
    path("plans/", views.PlanListView.as_view(), name="plan-list"),
    path("plans/<uuid:pk>/", views.PlanDetailView.as_view(), name="plan-detail"),
]
