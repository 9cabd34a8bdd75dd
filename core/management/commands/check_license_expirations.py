"""
Django management command to check and mark expired licenses.

Runs the same bulk sweep that precedes every license listing. No
scheduler is shipped; run it from cron or a scheduled task.
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from core.domain.value_objects import LicenseStatus
from core.infrastructure.clock import system_clock
from core.infrastructure.events import event_bus
from licenses.application.services.lifecycle_service import LicenseObserver
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to check and mark expired licenses."""

    help = "Mark every Active license whose expiry has passed as Expired"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - don't actually update licenses",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        now = system_clock.now()

        if options["dry_run"]:
            overdue = LicenseModel.objects.filter(
                status=LicenseStatus.ACTIVE.value, expires_at__lte=now
            )
            self.stdout.write(f"Found {overdue.count()} expired license(s)")
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            for license in overdue[:10]:
                self.stdout.write(f"  - License {license.key} expired at {license.expires_at}")
            return

        observer = LicenseObserver(DjangoLicenseRepository(), event_bus)
        updated = async_to_sync(observer.sweep)(now, trigger="command")

        self.stdout.write(
            # pylint: disable=no-member
            self.style.SUCCESS(f"Successfully marked {updated} license(s) as expired")
        )
