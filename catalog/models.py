"""
Model registry for the catalog app.
"""
from catalog.infrastructure.models import Plan, Product  # noqa: F401
