"""
License read handlers.

Reads never return an Active license past its expiry: the expiry
check runs on every record, and corrections are written back.
"""
from typing import List

from core.domain.events import EventBus
from core.domain.exceptions import LicenseNotFoundError
from core.infrastructure.clock import system_clock
from core.infrastructure.events import event_bus as default_event_bus
from core.ports.clock import Clock
from licenses.application.dto.license_dto import LicenseDTO, license_to_dto
from licenses.application.queries.get_license import (
    GetLicenseByKeyQuery,
    GetLicenseQuery,
    ListLicensesQuery,
)
from licenses.application.services.lifecycle_service import LicenseObserver
from licenses.ports.license_repository import LicenseRepository


class GetLicenseHandler:
    """Handler for GetLicenseQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        clock: Clock = system_clock,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.clock = clock
        self.observer = LicenseObserver(license_repository, event_bus)

    async def handle(self, query: GetLicenseQuery) -> LicenseDTO:
        """
        Handle get license query.

        Args:
            query: GetLicenseQuery

        Returns:
            LicenseDTO with the observed status

        Raises:
            LicenseNotFoundError: If license not found
        """
        license = await self.license_repository.find_by_id(query.license_id)
        if not license:
            raise LicenseNotFoundError(f"License {query.license_id} not found")
        return license_to_dto(await self.observer.observe(license, self.clock.now()))


class GetLicenseByKeyHandler:
    """Handler for GetLicenseByKeyQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        clock: Clock = system_clock,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.clock = clock
        self.observer = LicenseObserver(license_repository, event_bus)

    async def handle(self, query: GetLicenseByKeyQuery) -> LicenseDTO:
        """
        Handle get license by key query.

        Raises:
            LicenseNotFoundError: If no license has the key
        """
        key = (query.key or "").strip()
        license = await self.license_repository.find_by_key(key) if key else None
        if not license:
            raise LicenseNotFoundError(f"License with key {key} not found")
        return license_to_dto(await self.observer.observe(license, self.clock.now()))


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        clock: Clock = system_clock,
        event_bus: EventBus = default_event_bus,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.clock = clock
        self.observer = LicenseObserver(license_repository, event_bus)

    async def handle(self, query: ListLicensesQuery) -> List[LicenseDTO]:
        """
        Handle list licenses query.

        The sweep runs before the filter, so ``status=Active`` never
        returns an overdue license.
        """
        now = self.clock.now()
        await self.observer.sweep(now, trigger="list")
        licenses = await self.license_repository.find_all(
            status=query.status,
            product_id=query.product_id,
            user_id=query.user_id,
            invoice_id=query.invoice_id,
        )
        observed = await self.observer.observe_all(licenses, now)
        return [license_to_dto(license) for license in observed]
