"""
Integration tests for products, plans and the activity trail they leave.
"""

import pytest

from accounts.infrastructure.models import ActivityLog
from catalog.infrastructure.models import Plan

pytestmark = [pytest.mark.django_db, pytest.mark.integration]


class TestCatalogApi:
    def test_create_product_and_plan(self, admin_client, db_admin):
        product = admin_client.post(
            "/api/v1/products/", {"name": "  Point of Sale  "}, format="json"
        )
        assert product.status_code == 201
        assert product.json()["name"] == "Point of Sale"

        plan = admin_client.post(
            "/api/v1/plans/",
            {
                "product_id": product.json()["id"],
                "name": "Monthly",
                "price": "99.00",
                "device_limit": 3,
                "duration_days": 30,
            },
            format="json",
        )

        assert plan.status_code == 201
        assert Plan.objects.get(id=plan.json()["id"]).device_limit == 3
        logged = ActivityLog.objects.filter(user_id=db_admin.id, action="create")
        assert {entry.entity_type for entry in logged} == {"Product", "Plan"}

    def test_plans_filtered_by_product(self, admin_client, db_plan, db_product):
        response = admin_client.get("/api/v1/plans/", {"product_id": str(db_product.id)})

        assert response.status_code == 200
        assert [plan["id"] for plan in response.json()] == [str(db_plan.id)]

    def test_device_limit_must_be_positive(self, admin_client, db_product):
        response = admin_client.post(
            "/api/v1/plans/",
            {
                "product_id": str(db_product.id),
                "name": "Broken",
                "price": "1.00",
                "device_limit": 0,
                "duration_days": 30,
            },
            format="json",
        )

        assert response.status_code == 400

    def test_product_in_use_cannot_be_deleted(self, admin_client, db_license_factory, db_product):
        db_license_factory()

        response = admin_client.delete(f"/api/v1/products/{db_product.id}/")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "IN_USE"

    def test_manager_has_no_catalog_grant(self, manager_client):
        assert manager_client.get("/api/v1/products/").status_code == 403
