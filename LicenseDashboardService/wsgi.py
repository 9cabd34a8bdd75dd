"""
WSGI config for LicenseDashboardService project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseDashboardService.settings.prod")

application = get_wsgi_application()
