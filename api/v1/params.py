"""
Query parameter parsing shared by API views.
"""

import uuid
from enum import Enum
from typing import Optional, Type

from rest_framework.exceptions import ValidationError


def uuid_param(request, name: str) -> Optional[uuid.UUID]:
    """
    Read an optional UUID query parameter.

    Raises:
        ValidationError: If the value is not a UUID
    """
    raw = request.query_params.get(name)
    if not raw:
        return None
    try:
        return uuid.UUID(raw)
    except ValueError as e:
        raise ValidationError({name: ["Must be a valid UUID."]}) from e


def enum_param(request, name: str, enum_type: Type[Enum]):
    """
    Read an optional enum query parameter, matching values case-insensitively.

    Raises:
        ValidationError: If the value is not one of the enum values
    """
    raw = request.query_params.get(name)
    if not raw:
        return None
    for member in enum_type:
        if member.value.lower() == raw.lower():
            return member
    choices = ", ".join(member.value for member in enum_type)
    raise ValidationError({name: [f"Must be one of: {choices}."]})
