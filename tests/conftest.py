"""
Pytest configuration and shared fixtures.

Unit tests run handlers against the in-memory repositories below with a
frozen clock. Integration tests use the Django repositories and the
``db_*`` fixtures.
"""

import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

import pytest

from accounts.domain.permissions import MenuGrant
from accounts.domain.user import User
from accounts.ports.permission_repository import PermissionRepository
from accounts.ports.user_repository import UserRepository
from billing.domain.company import Bank, Company
from billing.ports.company_repository import BankRepository, CompanyRepository
from billing.ports.invoice_repository import InvoiceChangeSet, InvoiceRepository
from catalog.domain.plan import Plan
from catalog.domain.product import Product
from catalog.ports.plan_repository import PlanRepository
from catalog.ports.product_repository import ProductRepository
from core.domain.events import EventBus
from core.domain.exceptions import (
    DeviceLimitReachedError,
    DuplicateInvoiceNumberError,
    DuplicateLicenseKeyError,
    InvoiceNotFoundError,
    LicenseNotFoundError,
)
from core.domain.value_objects import Email, LicenseStatus
from core.infrastructure.clock import FixedClock
from devices.domain.services import ActivationPolicy
from devices.ports.device_repository import DeviceRepository
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.ports.license_repository import LicenseRepository

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class RecordingEventBus(EventBus):
    """Event bus that keeps every published event."""

    def __init__(self):
        self.events = []
        self.subscriptions = []

    async def publish(self, event):
        self.events.append(event)

    def subscribe(self, event_type, handler):
        self.subscriptions.append((event_type, handler))

    def of_type(self, event_type):
        return [event for event in self.events if isinstance(event, event_type)]


class InMemoryLicenseRepository(LicenseRepository):
    """Dict-backed LicenseRepository."""

    def __init__(self):
        self.licenses = {}
        # Shared with InMemoryInvoiceRepository for invoice status lookups.
        self.invoices = {}

    def add(self, license: License) -> License:
        self.licenses[license.id] = license
        return license

    async def save(self, license):
        for other in self.licenses.values():
            if other.key == license.key and other.id != license.id:
                raise DuplicateLicenseKeyError()
        self.licenses[license.id] = license
        return license

    async def find_by_id(self, license_id):
        return self.licenses.get(license_id)

    async def find_by_key(self, key):
        return next((lic for lic in self.licenses.values() if lic.key == key), None)

    async def find_all(self, status=None, product_id=None, user_id=None, invoice_id=None):
        found = [
            lic
            for lic in self.licenses.values()
            if (status is None or lic.status == status)
            and (product_id is None or lic.product_id == product_id)
            and (user_id is None or lic.user_id == user_id)
            and (invoice_id is None or lic.invoice_id == invoice_id)
        ]
        return sorted(found, key=lambda lic: lic.created_at, reverse=True)

    async def find_by_invoice(self, invoice_id):
        return [lic for lic in self.licenses.values() if lic.invoice_id == invoice_id]

    async def update_status(self, license_id, expected, new, now):
        license = self.licenses.get(license_id)
        if license is None or license.status != expected:
            return False
        self.licenses[license_id] = license.with_status(new, now)
        return True

    def _invoice_status(self, invoice_id):
        invoice = self.invoices.get(invoice_id)
        return invoice.status if invoice else None

    async def update(self, license_id, merge):
        before = self.licenses.get(license_id)
        if before is None:
            raise LicenseNotFoundError()
        after = merge(before, self._invoice_status)
        await self.save(after)
        return before, after

    async def expire_overdue(self, now):
        changes = []
        for license in list(self.licenses.values()):
            if license.status == LicenseStatus.ACTIVE and license.is_past_expiry(now):
                expired = license.with_status(LicenseStatus.EXPIRED, now)
                self.licenses[license.id] = expired
                changes.append((license, expired))
        return changes

    async def delete(self, license_id):
        return self.licenses.pop(license_id, None) is not None


class InMemoryInvoiceRepository(InvoiceRepository):
    """Dict-backed InvoiceRepository sharing the license store."""

    def __init__(self, license_repository: InMemoryLicenseRepository):
        self.invoices = license_repository.invoices
        self.license_repository = license_repository

    def _apply_cascade(self, invoice_id, cascade):
        if cascade is None:
            return []
        store = self.license_repository.licenses
        current = [lic for lic in store.values() if lic.invoice_id == invoice_id]
        changes = []
        for after in cascade(current):
            changes.append((store[after.id], after))
            store[after.id] = after
        return changes

    def _check_number(self, invoice):
        for other in self.invoices.values():
            if other.invoice_number == invoice.invoice_number and other.id != invoice.id:
                raise DuplicateInvoiceNumberError()

    async def find_by_id(self, invoice_id):
        return self.invoices.get(invoice_id)

    async def find_all(self, company_id=None, status=None):
        found = [
            invoice
            for invoice in self.invoices.values()
            if (company_id is None or invoice.company_id == company_id)
            and (status is None or invoice.status == status)
        ]
        return sorted(found, key=lambda invoice: invoice.issue_date, reverse=True)

    async def create(self, invoice, issued_licenses=(), attach_license_ids=(), cascade=None):
        self._check_number(invoice)
        self.invoices[invoice.id] = invoice
        store = self.license_repository.licenses
        for license in issued_licenses:
            store[license.id] = license
        for license_id in attach_license_ids:
            store[license_id] = replace(store[license_id], invoice_id=invoice.id)
        changes = self._apply_cascade(invoice.id, cascade)
        return InvoiceChangeSet(
            invoice=invoice,
            created_licenses=[store[license.id] for license in issued_licenses],
            status_changes=changes,
        )

    async def update(self, invoice_id, merge, replace_line_items=False):
        previous = self.invoices.get(invoice_id)
        if previous is None:
            raise InvoiceNotFoundError()
        invoice, cascade = merge(previous)
        self._check_number(invoice)
        self.invoices[invoice_id] = invoice
        return InvoiceChangeSet(
            invoice=invoice,
            status_changes=self._apply_cascade(invoice_id, cascade),
            previous=previous,
        )

    async def delete(self, invoice_id, cascade=None):
        invoice = self.invoices.get(invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError()
        changes = self._apply_cascade(invoice_id, cascade)
        store = self.license_repository.licenses
        for license in list(store.values()):
            if license.invoice_id == invoice_id:
                store[license.id] = replace(license, invoice_id=None)
        del self.invoices[invoice_id]
        return InvoiceChangeSet(invoice=invoice, status_changes=changes)


class InMemoryProductRepository(ProductRepository):
    def __init__(self):
        self.products = {}

    async def save(self, product):
        self.products[product.id] = product
        return product

    async def find_by_id(self, product_id):
        return self.products.get(product_id)

    async def find_all(self):
        return sorted(self.products.values(), key=lambda product: product.name)


class InMemoryPlanRepository(PlanRepository):
    def __init__(self):
        self.plans = {}

    async def save(self, plan):
        self.plans[plan.id] = plan
        return plan

    async def find_by_id(self, plan_id):
        return self.plans.get(plan_id)

    async def find_by_ids(self, plan_ids):
        return [self.plans[plan_id] for plan_id in plan_ids if plan_id in self.plans]

    async def find_by_product(self, product_id):
        return [plan for plan in self.plans.values() if plan.product_id == product_id]


class InMemoryCompanyRepository(CompanyRepository):
    def __init__(self, companies=()):
        self.companies = {company.id: company for company in companies}

    async def find_by_id(self, company_id):
        return self.companies.get(company_id)


class InMemoryBankRepository(BankRepository):
    def __init__(self, banks=()):
        self.banks = {bank.id: bank for bank in banks}

    async def find_by_id(self, bank_id):
        return self.banks.get(bank_id)


class InMemoryUserRepository(UserRepository):
    def __init__(self, users=()):
        self.users = list(users)

    async def find_by_id(self, user_id):
        return next((user for user in self.users if user.id == user_id), None)

    async def find_by_email(self, email):
        wanted = email.strip().lower()
        return next((user for user in self.users if str(user.email).lower() == wanted), None)

    async def find_first_by_company(self, company_id) -> Optional[User]:
        members = [user for user in self.users if user.company_id == company_id]
        return min(members, key=lambda user: user.created_at) if members else None

    async def set_password_hash(self, user_id, password_hash):
        user = await self.find_by_id(user_id)
        if not user:
            return False
        self.users = [
            replace(u, password_hash=password_hash) if u.id == user_id else u for u in self.users
        ]
        return True


class InMemoryPermissionRepository(PermissionRepository):
    def __init__(self, grants=None):
        self.grants = grants or {}

    async def find_grant(self, role_id, menu):
        return next((g for g in self.grants.get(role_id, []) if g.menu == menu), None)

    async def find_grants_for_role(self, role_id) -> List[MenuGrant]:
        return list(self.grants.get(role_id, []))


class InMemoryDeviceRepository(DeviceRepository):
    def __init__(self):
        self.devices = {}

    def _active_count(self, license_id):
        return sum(1 for d in self.devices.values() if d.license_id == license_id and d.is_active)

    async def register(self, device, device_limit):
        existing = await self.find_by_license_and_computer(device.license_id, device.computer_id)
        if existing is not None:
            if not existing.is_active:
                if not ActivationPolicy.has_free_slot(
                    self._active_count(device.license_id), device_limit
                ):
                    raise DeviceLimitReachedError()
                existing = replace(existing, is_active=True)
            refreshed = existing.touch(device.last_seen_at)
            self.devices[refreshed.id] = refreshed
            return refreshed, False
        if not ActivationPolicy.has_free_slot(self._active_count(device.license_id), device_limit):
            raise DeviceLimitReachedError()
        self.devices[device.id] = device
        return device, True

    async def save(self, device):
        self.devices[device.id] = device
        return device

    async def find_by_license_and_computer(self, license_id, computer_id):
        return next(
            (
                d
                for d in self.devices.values()
                if d.license_id == license_id and d.computer_id == computer_id
            ),
            None,
        )

    async def find_by_license(self, license_id):
        return [d for d in self.devices.values() if d.license_id == license_id]


@pytest.fixture
def now():
    """Frozen current time used by unit tests."""
    return NOW


@pytest.fixture
def clock(now):
    return FixedClock(now)


@pytest.fixture
def event_bus():
    return RecordingEventBus()


@pytest.fixture
def license_repository():
    return InMemoryLicenseRepository()


@pytest.fixture
def invoice_repository(license_repository):
    return InMemoryInvoiceRepository(license_repository)


@pytest.fixture
def product(now):
    return Product.create(name="Accounting Suite", now=now)


@pytest.fixture
def plan(product, now):
    """Yearly plan, two devices."""
    return Plan.create(
        product_id=product.id,
        name="Yearly",
        now=now,
        price=Decimal("2999.00"),
        device_limit=2,
        duration_days=365,
    )


@pytest.fixture
def permanent_plan(product, now):
    return Plan.create(
        product_id=product.id,
        name="Lifetime",
        now=now,
        price=Decimal("9999.00"),
        device_limit=1,
        duration_days=0,
    )


@pytest.fixture
def product_repository(product):
    repository = InMemoryProductRepository()
    repository.products[product.id] = product
    return repository


@pytest.fixture
def plan_repository(plan, permanent_plan):
    repository = InMemoryPlanRepository()
    repository.plans[plan.id] = plan
    repository.plans[permanent_plan.id] = permanent_plan
    return repository


@pytest.fixture
def company(now):
    return Company(id=uuid.uuid4(), name="Acme Corp", created_at=now, updated_at=now)


@pytest.fixture
def bank():
    return Bank(id=uuid.uuid4(), name="Test Bank", account_number="1234567890", owner_name="Acme")


@pytest.fixture
def company_repository(company):
    return InMemoryCompanyRepository([company])


@pytest.fixture
def bank_repository(bank):
    return InMemoryBankRepository([bank])


@pytest.fixture
def company_user(company, now):
    return User(
        id=uuid.uuid4(),
        name="Jane Buyer",
        email=Email("jane@acme.test"),
        password_hash="unused",
        role_id=uuid.uuid4(),
        created_at=now - timedelta(days=30),
        updated_at=now,
        role_name="User",
        company_id=company.id,
    )


@pytest.fixture
def user_repository(company_user):
    return InMemoryUserRepository([company_user])


@pytest.fixture
def permission_repository():
    return InMemoryPermissionRepository()


@pytest.fixture
def device_repository():
    return InMemoryDeviceRepository()


@pytest.fixture
def make_license(license_repository, product, plan, now):
    """Factory storing a license in the in-memory repository."""

    def factory(
        status=LicenseStatus.INACTIVE,
        expires_at=None,
        invoice_id=None,
        user_id=None,
        key=None,
        plan_id=None,
        created_at=None,
    ):
        return license_repository.add(
            License.create(
                key=key or generate_license_key(),
                product_id=product.id,
                plan_id=plan_id or plan.id,
                status=status,
                now=created_at or now - timedelta(days=10),
                expires_at=expires_at,
                user_id=user_id,
                invoice_id=invoice_id,
            )
        )

    return factory


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def roles(db):
    """Admin, Manager and User roles with menus; Manager may only view licenses."""
    from accounts.infrastructure.models import Menu, Role, RolePermission

    licenses_menu = Menu.objects.create(name="Licenses", path="/licenses", order=1)
    Menu.objects.create(name="Invoices", path="/invoices", order=2)
    admin = Role.objects.create(name="Admin")
    manager = Role.objects.create(name="Manager")
    user = Role.objects.create(name="User")
    RolePermission.objects.create(role=manager, menu=licenses_menu, can_view=True)
    return {"Admin": admin, "Manager": manager, "User": user}


@pytest.fixture
def db_company(db):
    from billing.infrastructure.models import Company as CompanyModel

    return CompanyModel.objects.create(name="Acme Corp", email="billing@acme.test")


@pytest.fixture
def db_bank(db):
    from billing.infrastructure.models import Bank as BankModel

    return BankModel.objects.create(
        name="Test Bank", account_number="1234567890", owner_name="Acme Corp"
    )


@pytest.fixture
def db_admin(roles, db_company):
    from accounts.infrastructure.models import User as UserModel

    user = UserModel(
        name="Administrator", email="admin@acme.test", role=roles["Admin"], company=db_company
    )
    user.set_password("admin123")
    user.save()
    return user


@pytest.fixture
def db_manager(roles):
    from accounts.infrastructure.models import User as UserModel

    user = UserModel(name="Morgan Manager", email="manager@acme.test", role=roles["Manager"])
    user.set_password("manager123")
    user.save()
    return user


@pytest.fixture
def db_product(db):
    from catalog.infrastructure.models import Product as ProductModel

    return ProductModel.objects.create(name="Accounting Suite")


@pytest.fixture
def db_plan(db_product):
    from catalog.infrastructure.models import Plan as PlanModel

    return PlanModel.objects.create(
        product=db_product,
        name="Basic",
        price=Decimal("2999.00"),
        device_limit=2,
        duration_days=365,
    )


@pytest.fixture
def db_license_factory(db_product, db_plan):
    """Factory inserting License rows directly."""
    from licenses.infrastructure.models import License as LicenseModel

    def factory(status="Inactive", expires_at=None, invoice=None, key=None):
        return LicenseModel.objects.create(
            key=key or generate_license_key(),
            product=db_product,
            plan=db_plan,
            status=status,
            expires_at=expires_at,
            invoice=invoice,
        )

    return factory


def _bearer_client(user):
    from rest_framework.test import APIClient

    from core.infrastructure.tokens import TokenService

    client = APIClient()
    token = TokenService().create_access_token(str(user.id), user.email, user.role.name)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def admin_client(db_admin):
    """API client authenticated as the Admin user."""
    return _bearer_client(db_admin)


@pytest.fixture
def manager_client(db_manager):
    """API client authenticated as a Manager who may only view licenses."""
    return _bearer_client(db_manager)
