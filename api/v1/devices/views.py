"""
Device API views.

The dashboard manages devices as plain records. The heartbeat endpoint
is called by activated client software with its license key.
"""

from asgiref.sync import async_to_sync
from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.mixins import ActivityLoggedMixin
from api.v1.devices.serializers import DeviceSerializer, HeartbeatRequestSerializer
from api.v1.params import uuid_param
from core.domain.value_objects import EntityType
from core.instrumentation import Status, StatusCode, get_tracer
from devices.application.commands.device_commands import HeartbeatCommand
from devices.application.handlers.device_handlers import HeartbeatHandler
from devices.infrastructure.models import Device
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

_license_repo = DjangoLicenseRepository()
_device_repo = DjangoDeviceRepository()

tracer = get_tracer(__name__)


class DeviceListView(ActivityLoggedMixin, generics.ListCreateAPIView):
    """List devices, optionally filtered by ``?license_id=``, and create devices."""

    rbac_menu = "Devices"
    activity_entity_type = EntityType.DEVICE
    serializer_class = DeviceSerializer

    def get_queryset(self):
        queryset = Device.objects.all()
        license_id = uuid_param(self.request, "license_id")
        if license_id:
            queryset = queryset.filter(license_id=license_id)
        return queryset


class DeviceDetailView(ActivityLoggedMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update and delete one device."""

    rbac_menu = "Devices"
    activity_entity_type = EntityType.DEVICE
    queryset = Device.objects.all()
    serializer_class = DeviceSerializer


class HeartbeatView(APIView):
    """Refresh a device's last-seen time and report its license status."""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_heartbeat)(request)

    async def _handle_heartbeat(self, request: Request) -> Response:
        with tracer.start_as_current_span("device_heartbeat") as span:
            serializer = HeartbeatRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response(
                    {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "License key and computer id are required",
                            "details": serializer.errors,
                        }
                    },
                    status=status.HTTP_400_BAD_REQUEST,
                )

            data = serializer.validated_data
            span.set_attribute("computer_id", data["computer_id"])

            handler = HeartbeatHandler(
                license_repository=_license_repo, device_repository=_device_repo
            )
            result = await handler.handle(
                HeartbeatCommand(license_key=data["license_key"], computer_id=data["computer_id"])
            )

            span.set_attribute("license.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "success": True,
                    "license_status": result.status,
                    "message": "Heartbeat received",
                }
            )
