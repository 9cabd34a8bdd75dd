"""
Unit tests for the field diff shared by license and invoice updates.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.domain.events import diff_fields, plain_value
from core.domain.value_objects import LicenseStatus


@dataclass(frozen=True)
class Record:
    status: LicenseStatus
    total: Decimal
    note: str = ""


@pytest.mark.parametrize(
    "value,expected",
    [
        (LicenseStatus.ACTIVE, "Active"),
        (datetime(2026, 1, 2, 3, 4, tzinfo=timezone.utc), "2026-01-02T03:04:00+00:00"),
        (Decimal("2999.00"), "2999.00"),
        (None, None),
        (3, 3),
        (True, True),
        (uuid.UUID("12345678-1234-5678-1234-567812345678"), "12345678-1234-5678-1234-567812345678"),
    ],
)
def test_plain_value(value, expected):
    assert plain_value(value) == expected


def test_diff_lists_only_changed_fields():
    before = Record(status=LicenseStatus.INACTIVE, total=Decimal("10.00"), note="a")
    after = Record(status=LicenseStatus.ACTIVE, total=Decimal("10.00"), note="b")

    diff = diff_fields(before, after, ("status", "total", "note"))

    assert diff == {
        "status": {"from": "Inactive", "to": "Active"},
        "note": {"from": "a", "to": "b"},
    }


def test_diff_ignores_fields_not_asked_for():
    before = Record(status=LicenseStatus.INACTIVE, total=Decimal("10.00"))
    after = Record(status=LicenseStatus.ACTIVE, total=Decimal("12.50"))

    assert diff_fields(before, after, ("total",)) == {
        "total": {"from": "10.00", "to": "12.50"}
    }


def test_identical_versions_have_no_diff():
    record = Record(status=LicenseStatus.EXPIRED, total=Decimal("1"))

    assert diff_fields(record, record, ("status", "total", "note")) == {}
