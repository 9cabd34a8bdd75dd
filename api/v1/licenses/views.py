"""
License API views.

Dashboard endpoints manage licenses; every read returns the status as
observed now. The activation endpoint is called by installed client
software and authenticates with the license key instead of a token.
"""

from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.permissions import MenuPermission, get_actor_id
from api.v1.devices.serializers import DeviceDTOSerializer
from api.v1.licenses.serializers import (
    ActivateLicenseRequestSerializer,
    CreateLicenseRequestSerializer,
    LicenseDTOSerializer,
    UpdateLicenseRequestSerializer,
)
from api.v1.params import enum_param, uuid_param
from billing.infrastructure.repositories.django_invoice_repository import DjangoInvoiceRepository
from catalog.infrastructure.repositories.django_plan_repository import DjangoPlanRepository
from catalog.infrastructure.repositories.django_product_repository import DjangoProductRepository
from core.domain.value_objects import LicenseStatus
from core.instrumentation import Status, StatusCode, get_tracer
from devices.application.commands.device_commands import ActivateDeviceCommand
from devices.application.handlers.device_handlers import ActivateDeviceHandler
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.handlers.license_command_handlers import (
    CreateLicenseHandler,
    DeleteLicenseHandler,
    UpdateLicenseHandler,
)
from licenses.application.handlers.license_read_handlers import (
    GetLicenseByKeyHandler,
    GetLicenseHandler,
    ListLicensesHandler,
)
from licenses.application.queries.get_license import (
    GetLicenseByKeyQuery,
    GetLicenseQuery,
    ListLicensesQuery,
)
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_product_repo = DjangoProductRepository()
_plan_repo = DjangoPlanRepository()
_invoice_repo = DjangoInvoiceRepository()
_device_repo = DjangoDeviceRepository()

tracer = get_tracer(__name__)


def _status_or_none(value):
    return LicenseStatus(value) if value else None


class LicenseListView(APIView):
    """List licenses and create a license."""

    permission_classes = [MenuPermission]
    rbac_menu = "Licenses"

    def get(self, request: Request) -> Response:
        """List licenses, filtered by status, product, user or invoice."""
        return async_to_sync(self._handle_list_licenses)(request)

    def post(self, request: Request) -> Response:
        """Create a license."""
        return async_to_sync(self._handle_create_license)(request)

    async def _handle_list_licenses(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_licenses") as span:
            span.set_attribute("operation", "list_licenses")

            query = ListLicensesQuery(
                status=enum_param(request, "status", LicenseStatus),
                product_id=uuid_param(request, "product_id"),
                user_id=uuid_param(request, "user_id"),
                invoice_id=uuid_param(request, "invoice_id"),
            )
            handler = ListLicensesHandler(license_repository=_license_repo)
            result = await handler.handle(query)

            span.set_attribute("licenses.count", len(result))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseDTOSerializer(result, many=True).data)

    async def _handle_create_license(self, request: Request) -> Response:
        with tracer.start_as_current_span("create_license") as span:
            span.set_attribute("operation", "create_license")

            serializer = CreateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response(
                    {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Invalid license data",
                            "details": serializer.errors,
                        }
                    },
                    status=status.HTTP_400_BAD_REQUEST,
                )

            data = serializer.validated_data
            span.set_attribute("product_id", str(data["product_id"]))
            span.set_attribute("plan_id", str(data["plan_id"]))

            handler = CreateLicenseHandler(
                license_repository=_license_repo,
                product_repository=_product_repo,
                plan_repository=_plan_repo,
                invoice_repository=_invoice_repo,
            )
            command = CreateLicenseCommand(
                product_id=data["product_id"],
                plan_id=data["plan_id"],
                key=data.get("key") or None,
                status=_status_or_none(data.get("status")),
                expires_at=data.get("expires_at"),
                user_id=data.get("user_id"),
                invoice_id=data.get("invoice_id"),
                # An explicit null expiry means a permanent license.
                derive_expiry="expires_at" not in data,
                actor_id=get_actor_id(request),
            )
            result = await handler.handle(command)

            span.set_attribute("license.id", str(result.id))
            span.set_attribute("license.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseDTOSerializer(result).data, status=status.HTTP_201_CREATED)


class LicenseDetailView(APIView):
    """Retrieve, update and delete one license."""

    permission_classes = [MenuPermission]
    rbac_menu = "Licenses"

    def get(self, request: Request, license_id) -> Response:
        return async_to_sync(self._handle_get_license)(request, license_id)

    def put(self, request: Request, license_id) -> Response:
        return async_to_sync(self._handle_update_license)(request, license_id)

    def patch(self, request: Request, license_id) -> Response:
        return async_to_sync(self._handle_update_license)(request, license_id)

    def delete(self, request: Request, license_id) -> Response:
        return async_to_sync(self._handle_delete_license)(request, license_id)

    async def _handle_get_license(self, request: Request, license_id) -> Response:
        with tracer.start_as_current_span("get_license") as span:
            span.set_attribute("license.id", str(license_id))

            handler = GetLicenseHandler(license_repository=_license_repo)
            result = await handler.handle(GetLicenseQuery(license_id=license_id))

            span.set_attribute("license.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseDTOSerializer(result).data)

    async def _handle_update_license(self, request: Request, license_id) -> Response:
        with tracer.start_as_current_span("update_license") as span:
            span.set_attribute("license.id", str(license_id))

            serializer = UpdateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response(
                    {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Invalid license data",
                            "details": serializer.errors,
                        }
                    },
                    status=status.HTTP_400_BAD_REQUEST,
                )

            changes = dict(serializer.validated_data)
            if "status" in changes:
                changes["status"] = _status_or_none(changes["status"])

            handler = UpdateLicenseHandler(
                license_repository=_license_repo,
                product_repository=_product_repo,
                plan_repository=_plan_repo,
                invoice_repository=_invoice_repo,
            )
            result = await handler.handle(
                UpdateLicenseCommand(
                    license_id=license_id, changes=changes, actor_id=get_actor_id(request)
                )
            )

            span.set_attribute("license.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseDTOSerializer(result).data)

    async def _handle_delete_license(self, request: Request, license_id) -> Response:
        with tracer.start_as_current_span("delete_license") as span:
            span.set_attribute("license.id", str(license_id))

            handler = DeleteLicenseHandler(license_repository=_license_repo)
            await handler.handle(
                DeleteLicenseCommand(license_id=license_id, actor_id=get_actor_id(request))
            )

            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)


class LicenseByKeyView(APIView):
    """Retrieve one license by its key."""

    permission_classes = [MenuPermission]
    rbac_menu = "Licenses"

    def get(self, request: Request, key: str) -> Response:
        return async_to_sync(self._handle_get_license_by_key)(request, key)

    async def _handle_get_license_by_key(self, request: Request, key: str) -> Response:
        with tracer.start_as_current_span("get_license_by_key") as span:
            handler = GetLicenseByKeyHandler(license_repository=_license_repo)
            result = await handler.handle(GetLicenseByKeyQuery(key=key))

            span.set_attribute("license.id", str(result.id))
            span.set_attribute("license.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseDTOSerializer(result).data)


class ActivateLicenseView(APIView):
    """
    Bind a machine to a license.

    Public: the license key in the body is the credential.
    """

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_activate_license)(request)

    async def _handle_activate_license(self, request: Request) -> Response:
        with tracer.start_as_current_span("activate_license") as span:
            span.set_attribute("operation", "activate_license")

            serializer = ActivateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response(
                    {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "License key and device information are required",
                            "details": serializer.errors,
                        }
                    },
                    status=status.HTTP_400_BAD_REQUEST,
                )

            data = serializer.validated_data
            device = data["device"]
            span.set_attribute("computer_id", device["computer_id"])
            if data.get("product_name"):
                span.set_attribute("product_name", data["product_name"])

            handler = ActivateDeviceHandler(
                license_repository=_license_repo,
                plan_repository=_plan_repo,
                invoice_repository=_invoice_repo,
                device_repository=_device_repo,
            )
            result = await handler.handle(
                ActivateDeviceCommand(
                    license_key=data["license_key"],
                    computer_id=device["computer_id"],
                    name=device.get("name") or None,
                    processor=device.get("processor") or None,
                    os=device.get("os") or None,
                    ram=device.get("ram") or None,
                )
            )

            span.set_attribute("license.id", str(result.license.id))
            span.set_attribute("device.id", str(result.device.id))
            span.set_attribute("device.created", result.created)
            span.set_status(Status(StatusCode.OK))

            body = {
                "success": True,
                "message": (
                    "License activated successfully"
                    if result.created
                    else "Device already activated"
                ),
                "license": {
                    "key": result.license.key,
                    "status": result.license.status,
                    "is_active": result.license.status == LicenseStatus.ACTIVE.value,
                    "expires_at": LicenseDTOSerializer(result.license).data["expires_at"],
                },
                "device": DeviceDTOSerializer(result.device).data,
            }
            return Response(
                body, status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
            )
