"""
Integration tests for the create_test_data management command.
"""

from io import StringIO

import pytest
from django.core.management import call_command

from accounts.infrastructure.models import Menu, RolePermission, User

pytestmark = [pytest.mark.django_db, pytest.mark.integration]


def _seed():
    call_command("create_test_data", admin_password="seeded-admin", stdout=StringIO())


def test_seeds_admin_and_menus():
    _seed()

    admin = User.objects.get(email="admin@example.com")
    assert admin.role.name == "Admin"
    assert admin.check_password("seeded-admin")
    assert Menu.objects.filter(name="Roles").exists()


def test_only_admin_may_manage_roles():
    _seed()

    holders = RolePermission.objects.filter(menu__name="Roles").values_list(
        "role__name", flat=True
    )
    assert list(holders) == ["Admin"]
    assert RolePermission.objects.filter(role__name="Manager", menu__name="Licenses").exists()


def test_running_twice_keeps_existing_rows():
    _seed()
    grants = RolePermission.objects.count()

    _seed()

    assert RolePermission.objects.count() == grants
    assert User.objects.filter(email="admin@example.com").count() == 1
