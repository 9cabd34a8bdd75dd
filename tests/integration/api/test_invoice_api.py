"""
Integration tests for the invoice endpoints and their license cascade.
"""

import uuid
from datetime import timedelta
from types import SimpleNamespace

import pytest
from django.utils import timezone

from billing.infrastructure.models import Invoice as InvoiceModel
from licenses.infrastructure.models import License as LicenseModel

pytestmark = [pytest.mark.django_db, pytest.mark.integration]

INVOICES_URL = "/api/v1/invoices/"


def _invoice_payload(company, plan, **overrides):
    now = timezone.now()
    payload = {
        "company_id": str(company.id),
        "issue_date": now.isoformat(),
        "due_date": (now + timedelta(days=30)).isoformat(),
        "line_items": [{"plan_id": str(plan.id), "quantity": 2, "unit_price": "2999.00"}],
    }
    payload.update(overrides)
    return payload


class TestInvoiceApi:
    """Invoice lifecycle through the API."""

    def test_pay_then_delete(self, admin_client, db_company, db_plan):
        """Test issue Unpaid, pay, then delete: licenses go Inactive, Active, Inactive."""
        created = admin_client.post(
            INVOICES_URL,
            _invoice_payload(db_company, db_plan, issue_licenses=True),
            format="json",
        )
        assert created.status_code == 201
        invoice = created.json()
        assert invoice["status"] == "Unpaid"
        assert float(invoice["total"]) == 5998.0
        assert [lic["status"] for lic in invoice["licenses"]] == ["Inactive", "Inactive"]
        license_ids = [lic["id"] for lic in invoice["licenses"]]

        paid = admin_client.patch(
            f"{INVOICES_URL}{invoice['id']}/", {"status": "Paid"}, format="json"
        )
        assert paid.status_code == 200
        assert {lic["status"] for lic in paid.json()["licenses"]} == {"Active"}

        deleted = admin_client.delete(f"{INVOICES_URL}{invoice['id']}/")
        assert deleted.status_code == 204
        rows = LicenseModel.objects.filter(id__in=license_ids)
        assert {row.status for row in rows} == {"Inactive"}
        assert {row.invoice_id for row in rows} == {None}

    def test_issued_licenses_belong_to_company_user(
        self, admin_client, db_admin, db_company, db_plan
    ):
        response = admin_client.post(
            INVOICES_URL,
            _invoice_payload(db_company, db_plan, status="Paid", issue_licenses=True),
            format="json",
        )

        assert response.status_code == 201
        assert {lic["user_id"] for lic in response.json()["licenses"]} == {str(db_admin.id)}
        assert {lic["status"] for lic in response.json()["licenses"]} == {"Active"}

    def test_expired_license_survives_payment(
        self, admin_client, db_company, db_plan, db_license_factory
    ):
        created = admin_client.post(
            INVOICES_URL, _invoice_payload(db_company, db_plan), format="json"
        ).json()
        invoice_row = InvoiceModel.objects.get(id=created["id"])
        expired = db_license_factory(status="Expired", invoice=invoice_row)

        admin_client.put(f"{INVOICES_URL}{created['id']}/", {"status": "Paid"}, format="json")

        expired.refresh_from_db()
        assert expired.status == "Expired"

    def test_due_date_before_issue_date(self, admin_client, db_company, db_plan):
        now = timezone.now()
        response = admin_client.post(
            INVOICES_URL,
            _invoice_payload(
                db_company,
                db_plan,
                issue_date=now.isoformat(),
                due_date=(now - timedelta(days=1)).isoformat(),
            ),
            format="json",
        )

        assert response.status_code == 400

    def test_unknown_company(self, admin_client, db_plan):
        missing = SimpleNamespace(id=uuid.uuid4())

        response = admin_client.post(
            INVOICES_URL, _invoice_payload(missing, db_plan), format="json"
        )

        assert response.status_code == 404

    def test_manager_without_invoice_grant(self, manager_client):
        assert manager_client.get(INVOICES_URL).status_code == 403
