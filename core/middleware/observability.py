"""
Observability middleware.

Every request gets a correlation id, one structured log line when it
finishes and the matching response headers. Prompt text, webhook bodies
and license keys travel in request bodies, which are never logged.
"""

import logging
import time
import uuid
from typing import Callable, Dict

from django.http import HttpRequest, HttpResponse
from opentelemetry import trace
from opentelemetry.trace import format_span_id, format_trace_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "HTTP_X_CORRELATION_ID"


def current_trace_context() -> Dict[str, str]:
    """Return trace and span ids of the active span, or an empty dict."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return {}
    return {
        "trace_id": format_trace_id(span_context.trace_id),
        "span_id": format_span_id(span_context.span_id),
    }


def request_status(status_code: int) -> str:
    if status_code >= 500:
        return "server_error"
    if status_code >= 400:
        return "client_error"
    return "success"


class ObservabilityMiddleware:
    """
    Middleware for request observability.

    Response headers set:
        X-Correlation-ID: propagated from the caller or generated
        X-Request-Status: success, client_error or server_error
        X-Request-Duration: seconds spent handling the request
        X-Trace-ID: only when a span is active
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.META.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.correlation_id = correlation_id  # type: ignore
        trace_context = current_trace_context()
        if trace_context:
            request.trace_id = trace_context["trace_id"]  # type: ignore

        log_extra = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.path,
            **trace_context,
        }
        start_time = time.time()

        try:
            response = self.get_response(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    **log_extra,
                    "request_status": "exception",
                    "error_type": type(e).__name__,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                },
                exc_info=True,
            )
            raise

        duration = time.time() - start_time
        status = request_status(response.status_code)
        log_extra.update(
            {
                "request_status": status,
                "status_code": response.status_code,
                "duration_ms": round(duration * 1000, 2),
                "remote_addr": request.META.get("REMOTE_ADDR"),
            }
        )
        if status == "server_error":
            logger.error("Request completed with server error", extra=log_extra)
        elif status == "client_error":
            logger.warning("Request completed with client error", extra=log_extra)
        else:
            logger.info("Request completed", extra=log_extra)

        response["X-Correlation-ID"] = correlation_id
        response["X-Request-Status"] = status
        response["X-Request-Duration"] = f"{duration:.3f}"
        if trace_context:
            response["X-Trace-ID"] = trace_context["trace_id"]
        return response
