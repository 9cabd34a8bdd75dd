"""
Billing API views.

Companies and banks are plain records. Invoice writes go through the
invoice handlers because they change the status of funded licenses.
"""

from asgiref.sync import async_to_sync
from rest_framework import generics, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.infrastructure.repositories.django_user_repository import DjangoUserRepository
from api.mixins import ActivityLoggedMixin
from api.permissions import MenuPermission, get_actor_id
from api.v1.billing.serializers import (
    BankSerializer,
    CompanySerializer,
    CreateInvoiceRequestSerializer,
    InvoiceDTOSerializer,
    UpdateInvoiceRequestSerializer,
)
from api.v1.params import enum_param, uuid_param
from billing.application.commands.invoice_commands import (
    CreateInvoiceCommand,
    DeleteInvoiceCommand,
    LineItemData,
    UpdateInvoiceCommand,
)
from billing.application.handlers.invoice_handlers import (
    CreateInvoiceHandler,
    DeleteInvoiceHandler,
    GetInvoiceHandler,
    ListInvoicesHandler,
    UpdateInvoiceHandler,
)
from billing.application.queries.invoice_queries import GetInvoiceQuery, ListInvoicesQuery
from billing.infrastructure.models import Bank, Company
from billing.infrastructure.repositories.django_company_repository import (
    DjangoBankRepository,
    DjangoCompanyRepository,
)
from billing.infrastructure.repositories.django_invoice_repository import DjangoInvoiceRepository
from catalog.infrastructure.repositories.django_plan_repository import DjangoPlanRepository
from core.domain.value_objects import EntityType, InvoiceStatus, PaymentMethod
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

# Initialize repositories (in production, use DI container)
_invoice_repo = DjangoInvoiceRepository()
_license_repo = DjangoLicenseRepository()
_company_repo = DjangoCompanyRepository()
_bank_repo = DjangoBankRepository()
_plan_repo = DjangoPlanRepository()
_user_repo = DjangoUserRepository()

tracer = get_tracer(__name__)


def _line_items(raw_items):
    return [
        LineItemData(
            plan_id=item["plan_id"],
            quantity=item["quantity"],
            unit_price=item["unit_price"],
            description=item.get("description", ""),
            total=item.get("total"),
        )
        for item in raw_items
    ]


def _validation_error(serializer) -> Response:
    return Response(
        {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid invoice data",
                "details": serializer.errors,
            }
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


class CompanyListView(ActivityLoggedMixin, generics.ListCreateAPIView):
    """List and create companies."""

    rbac_menu = "Companies"
    activity_entity_type = EntityType.COMPANY
    queryset = Company.objects.all()
    serializer_class = CompanySerializer


class CompanyDetailView(ActivityLoggedMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update and delete one company."""

    rbac_menu = "Companies"
    activity_entity_type = EntityType.COMPANY
    queryset = Company.objects.all()
    serializer_class = CompanySerializer


class BankListView(ActivityLoggedMixin, generics.ListCreateAPIView):
    """List and create bank accounts."""

    rbac_menu = "Banks"
    activity_entity_type = EntityType.BANK
    queryset = Bank.objects.all()
    serializer_class = BankSerializer


class BankDetailView(ActivityLoggedMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update and delete one bank account."""

    rbac_menu = "Banks"
    activity_entity_type = EntityType.BANK
    queryset = Bank.objects.all()
    serializer_class = BankSerializer


class InvoiceListView(APIView):
    """List invoices and create an invoice."""

    permission_classes = [MenuPermission]
    rbac_menu = "Invoices"

    def get(self, request: Request) -> Response:
        """List invoices, filtered by company or status."""
        return async_to_sync(self._handle_list_invoices)(request)

    def post(self, request: Request) -> Response:
        """Create an invoice, optionally issuing licenses for its line items."""
        return async_to_sync(self._handle_create_invoice)(request)

    async def _handle_list_invoices(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_invoices") as span:
            query = ListInvoicesQuery(
                company_id=uuid_param(request, "company_id"),
                status=enum_param(request, "status", InvoiceStatus),
            )
            handler = ListInvoicesHandler(invoice_repository=_invoice_repo)
            result = await handler.handle(query)

            span.set_attribute("invoices.count", len(result))
            span.set_status(Status(StatusCode.OK))
            return Response(InvoiceDTOSerializer(result, many=True).data)

    async def _handle_create_invoice(self, request: Request) -> Response:
        with tracer.start_as_current_span("create_invoice") as span:
            span.set_attribute("operation", "create_invoice")

            serializer = CreateInvoiceRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return _validation_error(serializer)

            data = serializer.validated_data
            span.set_attribute("company_id", str(data["company_id"]))
            span.set_attribute("issue_licenses", data["issue_licenses"])

            handler = CreateInvoiceHandler(
                invoice_repository=_invoice_repo,
                license_repository=_license_repo,
                company_repository=_company_repo,
                bank_repository=_bank_repo,
                plan_repository=_plan_repo,
                user_repository=_user_repo,
            )
            command = CreateInvoiceCommand(
                company_id=data["company_id"],
                issue_date=data["issue_date"],
                due_date=data["due_date"],
                line_items=_line_items(data.get("line_items", [])),
                status=InvoiceStatus(data.get("status", InvoiceStatus.UNPAID.value)),
                payment_method=PaymentMethod(
                    data.get("payment_method", PaymentMethod.CASH.value)
                ),
                invoice_number=data.get("invoice_number") or None,
                total=data.get("total"),
                bank_id=data.get("bank_id"),
                issue_licenses=data["issue_licenses"],
                license_ids=data.get("license_ids", []),
                actor_id=get_actor_id(request),
            )
            result = await handler.handle(command)

            span.set_attribute("invoice.id", str(result.id))
            span.set_attribute("invoice.status", result.status)
            span.set_attribute("licenses.count", len(result.licenses))
            span.set_status(Status(StatusCode.OK))
            return Response(InvoiceDTOSerializer(result).data, status=status.HTTP_201_CREATED)


class InvoiceDetailView(APIView):
    """Retrieve, update and delete one invoice."""

    permission_classes = [MenuPermission]
    rbac_menu = "Invoices"

    def get(self, request: Request, invoice_id) -> Response:
        return async_to_sync(self._handle_get_invoice)(request, invoice_id)

    def put(self, request: Request, invoice_id) -> Response:
        return async_to_sync(self._handle_update_invoice)(request, invoice_id)

    def patch(self, request: Request, invoice_id) -> Response:
        return async_to_sync(self._handle_update_invoice)(request, invoice_id)

    def delete(self, request: Request, invoice_id) -> Response:
        return async_to_sync(self._handle_delete_invoice)(request, invoice_id)

    async def _handle_get_invoice(self, request: Request, invoice_id) -> Response:
        with tracer.start_as_current_span("get_invoice") as span:
            span.set_attribute("invoice.id", str(invoice_id))

            handler = GetInvoiceHandler(
                invoice_repository=_invoice_repo, license_repository=_license_repo
            )
            result = await handler.handle(GetInvoiceQuery(invoice_id=invoice_id))

            span.set_status(Status(StatusCode.OK))
            return Response(InvoiceDTOSerializer(result).data)

    async def _handle_update_invoice(self, request: Request, invoice_id) -> Response:
        with tracer.start_as_current_span("update_invoice") as span:
            span.set_attribute("invoice.id", str(invoice_id))

            serializer = UpdateInvoiceRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return _validation_error(serializer)

            changes = dict(serializer.validated_data)
            if "status" in changes:
                changes["status"] = InvoiceStatus(changes["status"])
                span.set_attribute("invoice.new_status", changes["status"].value)
            if "payment_method" in changes:
                changes["payment_method"] = PaymentMethod(changes["payment_method"])
            if "line_items" in changes:
                changes["line_items"] = _line_items(changes["line_items"])

            handler = UpdateInvoiceHandler(
                invoice_repository=_invoice_repo,
                license_repository=_license_repo,
                company_repository=_company_repo,
                bank_repository=_bank_repo,
                plan_repository=_plan_repo,
            )
            result = await handler.handle(
                UpdateInvoiceCommand(
                    invoice_id=invoice_id, changes=changes, actor_id=get_actor_id(request)
                )
            )

            span.set_attribute("invoice.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return Response(InvoiceDTOSerializer(result).data)

    async def _handle_delete_invoice(self, request: Request, invoice_id) -> Response:
        with tracer.start_as_current_span("delete_invoice") as span:
            span.set_attribute("invoice.id", str(invoice_id))

            handler = DeleteInvoiceHandler(invoice_repository=_invoice_repo)
            await handler.handle(
                DeleteInvoiceCommand(invoice_id=invoice_id, actor_id=get_actor_id(request))
            )

            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)
