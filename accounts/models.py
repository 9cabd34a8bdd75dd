"""
Model registry for the accounts app.
"""
from accounts.infrastructure.models import (  # noqa: F401
    ActivityLog,
    Menu,
    Role,
    RolePermission,
    User,
)
