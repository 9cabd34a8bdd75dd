"""
URL configuration for license endpoints.
"""

from django.urls import path

from api.v1.licenses import views

urlpatterns = [
    path("", views.LicenseListView.as_view(), name="license-list"),
    path("activate/", views.ActivateLicenseView.as_view(), name="activate-license"),
    path("by-key/<str:key>/", views.LicenseByKeyView.as_view(), name="license-by-key"),
    path("<uuid:license_id>/", views.LicenseDetailView.as_view(), name="license-detail"),
]
