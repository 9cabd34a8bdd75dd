"""
Unit tests for value objects.
"""

import pytest

from core.domain.value_objects import Email, InvoiceStatus, LicenseStatus, PaymentMethod


class TestEmail:
    def test_valid(self):
        assert str(Email("ops@acme.test")) == "ops@acme.test"

    @pytest.mark.parametrize("value", ["", "no-at-sign"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            Email(value)

    def test_equality_by_value(self):
        assert Email("a@b.test") == Email("a@b.test")
        assert len({Email("a@b.test"), Email("a@b.test")}) == 1


class TestStatuses:
    def test_only_paid_funds_licenses(self):
        assert InvoiceStatus.PAID.is_paid
        assert not InvoiceStatus.UNPAID.is_paid
        assert not InvoiceStatus.OVERDUE.is_paid

    def test_stored_values(self):
        """Test the strings stored in the database and returned by the API."""
        assert [s.value for s in LicenseStatus] == ["Inactive", "Active", "Expired"]
        assert [s.value for s in InvoiceStatus] == ["Unpaid", "Paid", "Overdue"]
        assert [m.value for m in PaymentMethod] == ["Cash", "Bank", "Qris"]

    def test_str(self):
        assert str(LicenseStatus.ACTIVE) == "Active"
