"""
Unit tests for metric label normalization.
"""

import pytest

from core.middleware.metrics import normalize_endpoint


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/api/v1/licenses/", "/api/v1/licenses/"),
        (
            "/api/v1/licenses/0b7c9d3e-1f2a-4b5c-8d9e-0f1a2b3c4d5e/",
            "/api/v1/licenses/{id}/",
        ),
        ("/api/v1/licenses/by-key/ABCD-EFGH-1234/", "/api/v1/licenses/by-key/{key}/"),
        ("/api/v1/invoices/?status=Paid", "/api/v1/invoices/"),
        ("/admin/app/model/42/change/", "/admin/app/model/{id}/change/"),
    ],
)
def test_normalize_endpoint(path, expected):
    assert normalize_endpoint(path) == expected
