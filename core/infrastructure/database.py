"""
Database utilities and transaction management.
"""

from typing import Any, Callable, TypeVar

from asgiref.sync import sync_to_async
from django.db import transaction

T = TypeVar("T")


def atomic_call(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Run ``func`` inside a single database transaction.

    Any exception raised by ``func`` rolls the whole transaction back
    and is re-raised unchanged.
    """
    with transaction.atomic():
        return func(*args, **kwargs)


async def run_atomic(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Async entry point for a transactional unit of work.

    The ORM is synchronous, so the whole unit of work runs in one
    ``sync_to_async`` call: one thread, one connection, one transaction.

    Usage:
        result = await run_atomic(self._delete_sync, invoice_id, cascade)
    """
    return await sync_to_async(atomic_call)(func, *args, **kwargs)
