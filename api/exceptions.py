"""
API exception handlers.

This module maps domain exceptions to REST API responses. Every error
body has the shape ``{"error": {"code": ..., "message": ...}}``.
"""

import logging
from typing import Any, Dict, Optional

from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainException,
    NotFoundError,
)
from core.middleware.observability import current_trace_ids

logger = logging.getLogger(__name__)


def error_response(code: str, message: str, status_code: int, **extra) -> Response:
    body = {"code": code, "message": message}
    body.update(extra)
    return Response({"error": body}, status=status_code)


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
    elif isinstance(exc, ValidationError):
        response = error_response(
            "VALIDATION_ERROR",
            "Request validation failed",
            status.HTTP_400_BAD_REQUEST,
            details=exc.detail,
        )
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.get_codes() if isinstance(exc.get_codes(), str) else exc.default_code
        response.data = {
            "error": {
                "code": str(code).upper().replace("-", "_"),
                "message": str(exc.detail),
            }
        }
    elif isinstance(exc, Http404):
        response = error_response("NOT_FOUND", "Resource not found", status.HTTP_404_NOT_FOUND)
    elif isinstance(exc, ProtectedError):
        logger.info("Delete refused, record still referenced: %s", exc)
        response = error_response(
            "IN_USE",
            "The record is still referenced by other records",
            status.HTTP_409_CONFLICT,
        )
    else:
        response = _handle_unexpected_exception(exc, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from the active span, else the request correlation ID."""
    trace_id, _ = current_trace_ids()
    if trace_id:
        return trace_id
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "correlation_id", None)


def _status_for(exc: DomainException) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    return status.HTTP_400_BAD_REQUEST


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    logger.warning("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    return error_response(exc.code, exc.message, _status_for(exc))


def _handle_unexpected_exception(exc: Exception, trace_id: Optional[str]) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    return error_response(
        "INTERNAL_ERROR", "An internal error occurred", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
