"""
URL configuration for API v1.
"""

from django.urls import include, path

urlpatterns = [
    path("auth/", include("api.v1.auth.urls")),
    path("", include("api.v1.catalog.urls")),
    path("", include("api.v1.billing.urls")),
    path("", include("api.v1.accounts.urls")),
    path("licenses/", include("api.v1.licenses.urls")),
    path("devices/", include("api.v1.devices.urls")),
]
