"""
Observability middleware.

Gives every request a correlation ID and writes one structured log
line when it starts and one when it ends. Log records carry the
OpenTelemetry trace context, the acting dashboard user and whether the
call came from the dashboard or from installed client software.
"""

import logging
import time
import uuid
from typing import Any, Callable, Dict, Optional, Tuple

from django.http import HttpRequest, HttpResponse
from opentelemetry import trace
from opentelemetry.trace import format_span_id, format_trace_id

logger = logging.getLogger(__name__)

# Endpoints called by installed software with a license key.
CLIENT_PATHS = ("/api/v1/licenses/activate/", "/api/v1/devices/heartbeat/")


def current_trace_ids() -> Tuple[Optional[str], Optional[str]]:
    """
    Read the trace and span IDs of the active span.

    Returns:
        (trace_id, span_id) as hex strings, or (None, None) without a valid span
    """
    context = trace.get_current_span().get_span_context()
    if not context.is_valid:
        return None, None
    return format_trace_id(context.trace_id), format_span_id(context.span_id)


def request_surface(path: str) -> str:
    """Classify a path as "client", "dashboard" or "system" traffic."""
    if path.startswith(CLIENT_PATHS):
        return "client"
    if path.startswith("/api/"):
        return "dashboard"
    return "system"


def outcome_for(status_code: int) -> str:
    if status_code >= 500:
        return "server_error"
    if status_code >= 400:
        return "client_error"
    return "success"


class ObservabilityMiddleware:
    """
    Middleware for request observability.

    Sets ``request.correlation_id`` (taken from ``X-Correlation-ID`` when
    the caller sends one) and echoes it, the outcome and the duration in
    response headers.
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.correlation_id = correlation_id  # type: ignore

        context = self._context(request, correlation_id)
        logger.info("Request started", extra=context)

        started = time.perf_counter()
        try:
            response = self.get_response(request)
        except Exception as e:
            context.update(
                request_status="exception",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            logger.error("Request failed", extra=context, exc_info=True)
            raise

        duration = time.perf_counter() - started
        outcome = outcome_for(response.status_code)
        self._log_completion(request, response, context, outcome, duration)

        response["X-Correlation-ID"] = correlation_id
        response["X-Request-Status"] = outcome
        response["X-Request-Duration"] = f"{duration:.3f}"
        trace_id = context.get("trace_id")
        if trace_id and not response.has_header("X-Trace-ID"):
            response["X-Trace-ID"] = trace_id
        return response

    def _context(self, request: HttpRequest, correlation_id: str) -> Dict[str, Any]:
        context = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.path,
            "surface": request_surface(request.path),
            "remote_addr": request.META.get("REMOTE_ADDR"),
            "user_agent": request.META.get("HTTP_USER_AGENT", ""),
        }
        trace_id, span_id = current_trace_ids()
        if trace_id:
            context["trace_id"] = trace_id
            context["span_id"] = span_id
        return context

    def _log_completion(self, request, response, context, outcome, duration):
        extra = dict(
            context,
            request_status=outcome,
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
            response_size=len(response.content) if hasattr(response, "content") else 0,
        )
        # Set by the bearer token middleware, which runs after this one.
        principal = getattr(request, "principal", None)
        if principal:
            extra["user_id"] = str(principal.user_id)
            extra["role"] = principal.role_name

        if outcome == "server_error":
            logger.error("Request completed with server error", extra=extra)
        elif outcome == "client_error":
            logger.warning("Request completed with client error", extra=extra)
        else:
            logger.info("Request completed successfully", extra=extra)
