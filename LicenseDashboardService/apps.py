"""
App configuration for License Dashboard Service.
"""

import logging
import os
import sys

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)

# Management commands that never serve traffic
NON_SERVING_COMMANDS = (
    "migrate",
    "makemigrations",
    "collectstatic",
    "shell",
    "check",
    "createsuperuser",
)


class LicenseDashboardServiceConfig(AppConfig):
    """App configuration for LicenseDashboardService."""

    name = "LicenseDashboardService"
    verbose_name = "License Dashboard Service"

    def ready(self):
        """Called when Django starts."""
        from core.infrastructure.event_handlers import register_event_handlers

        # Activity logging must work for every entry point, including tests
        # and management commands.
        register_event_handlers()

        if not settings.OTEL_ENABLED:
            return
        if len(sys.argv) > 1 and sys.argv[1] in NON_SERVING_COMMANDS:
            return
        # Django's autoreloader runs the project twice; only the child serves.
        if os.environ.get("RUN_MAIN") == "false":
            return
        if getattr(self, "_observability_ready", False):
            return

        from core.instrumentation import setup_opentelemetry

        logger.info("Setting up observability...")
        setup_opentelemetry()
        self._observability_ready = True
        logger.info("Observability setup complete")
