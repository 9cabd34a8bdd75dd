"""
Integration tests for the public activation and heartbeat endpoints.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from devices.infrastructure.models import Device as DeviceModel

pytestmark = [pytest.mark.django_db, pytest.mark.integration]

ACTIVATE_URL = "/api/v1/licenses/activate/"
HEARTBEAT_URL = "/api/v1/devices/heartbeat/"


def _activation(key, computer_id="PC-001"):
    return {
        "license_key": key,
        "device": {"computer_id": computer_id, "name": "Front desk", "os": "Windows 11"},
    }


class TestActivationApi:
    """Tests for license activation by installed clients."""

    def test_activate_then_heartbeat(self, api_client, db_license_factory):
        """Test activation needs no token and the heartbeat reports the status."""
        row = db_license_factory(status="Active", expires_at=timezone.now() + timedelta(days=30))

        first = api_client.post(ACTIVATE_URL, _activation(row.key), format="json")
        again = api_client.post(ACTIVATE_URL, _activation(row.key), format="json")
        heartbeat = api_client.post(
            HEARTBEAT_URL, {"license_key": row.key, "computer_id": "PC-001"}, format="json"
        )

        assert first.status_code == 201
        assert first.json()["success"] is True
        assert first.json()["license"]["is_active"] is True
        assert again.status_code == 200
        assert again.json()["message"] == "Device already activated"
        assert DeviceModel.objects.filter(license_id=row.id).count() == 1
        assert heartbeat.status_code == 200
        assert heartbeat.json()["license_status"] == "active"

    def test_inactive_license_is_activated(self, api_client, db_license_factory):
        row = db_license_factory(status="Inactive")

        response = api_client.post(ACTIVATE_URL, _activation(row.key), format="json")

        assert response.status_code == 201
        row.refresh_from_db()
        assert row.status == "Active"

    def test_device_limit(self, api_client, db_license_factory):
        row = db_license_factory(status="Active")
        api_client.post(ACTIVATE_URL, _activation(row.key, "PC-001"), format="json")
        api_client.post(ACTIVATE_URL, _activation(row.key, "PC-002"), format="json")

        response = api_client.post(ACTIVATE_URL, _activation(row.key, "PC-003"), format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DEVICE_LIMIT_REACHED"

    def test_expired_license(self, api_client, db_license_factory):
        row = db_license_factory(status="Active", expires_at=timezone.now() - timedelta(days=1))

        response = api_client.post(ACTIVATE_URL, _activation(row.key), format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "EXPIRED_LICENSE"
        row.refresh_from_db()
        assert row.status == "Expired"

    def test_unknown_key(self, api_client, db):
        response = api_client.post(ACTIVATE_URL, _activation("UNKNOWN-KEY"), format="json")

        assert response.status_code == 404

    def test_missing_device(self, api_client, db):
        response = api_client.post(ACTIVATE_URL, {"license_key": "ANY"}, format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_heartbeat_unknown_device(self, api_client, db_license_factory):
        row = db_license_factory(status="Active")

        response = api_client.post(
            HEARTBEAT_URL, {"license_key": row.key, "computer_id": "PC-404"}, format="json"
        )

        assert response.status_code == 404
