"""
URL configuration for billing endpoints.
"""

from django.urls import path

from api.v1.billing import views

urlpatterns = [
    path("companies/", views.CompanyListView.as_view(), name="company-list"),
    path("companies/<uuid:pk>/", views.CompanyDetailView.as_view(), name="company-detail"),
    path("banks/", views.BankListView.as_view(), name="bank-list"),
    path("banks/<uuid:pk>/", views.BankDetailView.as_view(), name="bank-detail"),
    path("invoices/", views.InvoiceListView.as_view(), name="invoice-list"),
    path(
        "invoices/<uuid:invoice_id>/",
        views.InvoiceDetailView.as_view(),
        name="invoice-detail",
    ),
]
