"""
Model registry for the devices app.
"""
from devices.infrastructure.models import Device  # noqa: F401
