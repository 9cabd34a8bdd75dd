"""
URL configuration for device endpoints.
"""

from django.urls import path

from api.v1.devices import views

urlpatterns = [
    path("", views.DeviceListView.as_view(), name="device-list"),
    path("heartbeat/", views.HeartbeatView.as_view(), name="device-heartbeat"),
    path("<uuid:pk>/", views.DeviceDetailView.as_view(), name="device-detail"),
]
