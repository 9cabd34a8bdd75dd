"""
Django management command to create test data for development and testing.

Creates:
- Roles (Admin, Manager, User) and the dashboard menus
- Role permissions (Manager may view, create and edit; User may view)
- An admin user
- A company and a bank account
- A product with a yearly plan
"""

import logging
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from accounts.domain.permissions import ADMIN_ROLE
from accounts.infrastructure.models import Menu, Role, RolePermission, User
from billing.infrastructure.models import Bank, Company
from catalog.infrastructure.models import Plan, Product

logger = logging.getLogger(__name__)

MENUS = (
    ("Dashboard", "/dashboard"),
    ("Products", "/products"),
    ("Plans", "/plans"),
    ("Companies", "/companies"),
    ("Users", "/users"),
    ("Licenses", "/licenses"),
    ("Invoices", "/invoices"),
    ("Devices", "/devices"),
    ("Banks", "/banks"),
    ("Activity", "/activity"),
    ("Roles", "/roles"),
    ("Settings", "/settings"),
)

# Seeded for the Admin role only.
ADMIN_ONLY_MENUS = ("Roles",)

ROLE_GRANTS = {
    ADMIN_ROLE: dict(can_view=True, can_create=True, can_edit=True, can_delete=True),
    "Manager": dict(can_view=True, can_create=True, can_edit=True, can_delete=False),
    "User": dict(can_view=True, can_create=False, can_edit=False, can_delete=False),
}


class Command(BaseCommand):
    """Command to create test data."""

    help = "Create test data (roles, menus, permissions, admin user, company, product, plan)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--admin-email",
            type=str,
            default="admin@example.com",
            help="Admin email (default: admin@example.com)",
        )
        parser.add_argument(
            "--admin-password",
            type=str,
            default="admin",
            help="Admin password (default: admin)",
        )
        parser.add_argument(
            "--company-name",
            type=str,
            default="Test Company",
            help="Company name (default: Test Company)",
        )
        parser.add_argument(
            "--product-name",
            type=str,
            default="Test Product",
            help="Product name (default: Test Product)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        with transaction.atomic():
            roles = self.create_roles_and_menus()
            company = self.create_company(options["company_name"])
            admin = self.create_admin(
                roles[ADMIN_ROLE], company, options["admin_email"], options["admin_password"]
            )
            bank = self.create_bank()
            product, plan = self.create_catalog(options["product_name"])

        self.print_summary(admin, options["admin_password"], company, bank, product, plan)

    def create_roles_and_menus(self):
        """Create roles, menus and the grant matrix. Existing rows are kept."""
        menus = []
        for order, (name, path) in enumerate(MENUS):
            menu, _ = Menu.objects.get_or_create(name=name, defaults={"path": path, "order": order})
            menus.append(menu)

        roles = {}
        for role_name, grant in ROLE_GRANTS.items():
            role, created = Role.objects.get_or_create(name=role_name)
            roles[role_name] = role
            for menu in menus:
                if menu.name in ADMIN_ONLY_MENUS and role_name != ADMIN_ROLE:
                    continue
                RolePermission.objects.get_or_create(role=role, menu=menu, defaults=grant)
            if created:
                # pylint: disable=no-member
                self.stdout.write(self.style.SUCCESS(f"Created role: {role_name}"))
        return roles

    def create_company(self, name: str) -> Company:
        company, created = Company.objects.get_or_create(
            name=name, defaults={"email": "billing@example.com"}
        )
        if not created:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING(f"Company '{name}' already exists"))
        return company

    def create_admin(self, role: Role, company: Company, email: str, password: str) -> User:
        """Create the admin user if it doesn't exist."""
        existing = User.objects.filter(email=email).first()
        if existing:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING(f"User '{email}' already exists"))
            return existing

        user = User(name="Administrator", email=email, role=role, company=company)
        user.set_password(password)
        user.save()
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Created admin user: {email}"))
        return user

    def create_bank(self) -> Bank:
        bank, _ = Bank.objects.get_or_create(
            name="Test Bank",
            account_number="1234567890",
            defaults={"owner_name": "Test Company"},
        )
        return bank

    def create_catalog(self, product_name: str):
        """Create a product and a yearly plan for it."""
        product = Product.objects.filter(name=product_name).first()
        if product is None:
            product = Product.objects.create(name=product_name, description="Seeded product")
            # pylint: disable=no-member
            self.stdout.write(self.style.SUCCESS(f"Created product: {product_name}"))

        plan, _ = Plan.objects.get_or_create(
            product=product,
            name="Yearly",
            defaults={"price": Decimal("2999.00"), "device_limit": 2, "duration_days": 365},
        )
        return product, plan

    def print_summary(self, admin, password, company, bank, product, plan):
        """Print summary of created test data."""
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS("\n" + "=" * 60))
        self.stdout.write(self.style.SUCCESS("Test Data Summary"))
        self.stdout.write(self.style.SUCCESS("=" * 60))

        self.stdout.write("\nAdmin user:")
        self.stdout.write(f"   Email: {admin.email}")
        self.stdout.write(f"   Password: {password}")

        self.stdout.write("\nCompany:")
        self.stdout.write(f"   Name: {company.name}")
        self.stdout.write(f"   ID: {company.id}")
        self.stdout.write(f"   Bank: {bank.name} ({bank.account_number})")

        self.stdout.write("\nCatalog:")
        self.stdout.write(f"   Product: {product.name} ({product.id})")
        self.stdout.write(f"   Plan: {plan.name} ({plan.id}), {plan.duration_days} days")

        self.stdout.write("\nExample API Request:")
        self.stdout.write("   curl -X POST http://localhost:8000/api/v1/auth/login/ \\")
        self.stdout.write('     -H "Content-Type: application/json" \\')
        self.stdout.write(f'     -d \'{{"email": "{admin.email}", "password": "{password}"}}\'')

        self.stdout.write(self.style.SUCCESS("\n" + "=" * 60 + "\n"))
