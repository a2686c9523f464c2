"""
API exception handlers.

This module provides custom exception handling for REST API responses.
Every failure is rendered as::

    {"error": {"code": "...", "message": "...", "retryable": false}}

with a ``debug`` entry added only when ``DEBUG`` is on.
"""

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    DomainException,
    InvalidLicenseKeyError,
    InvalidPromptError,
    InvalidPurchaseError,
    LicenseIssuanceError,
    LicenseNotFoundError,
    UnknownProductError,
    UpstreamError,
    UpstreamRateLimitedError,
    UpstreamResponseError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
    WebhookSignatureError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

# Most specific classes first
DOMAIN_STATUS_CODES = (
    (InvalidPromptError, status.HTTP_400_BAD_REQUEST),
    (InvalidPurchaseError, status.HTTP_400_BAD_REQUEST),
    (InvalidLicenseKeyError, status.HTTP_400_BAD_REQUEST),
    (WebhookSignatureError, status.HTTP_401_UNAUTHORIZED),
    (UnknownProductError, status.HTTP_403_FORBIDDEN),
    (LicenseNotFoundError, status.HTTP_404_NOT_FOUND),
    (UpstreamRateLimitedError, status.HTTP_429_TOO_MANY_REQUESTS),
    (UpstreamUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (UpstreamTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
    (UpstreamResponseError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (LicenseIssuanceError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


class APIError(APIException):
    """Base API exception with error code."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "An error occurred"
    default_code = "api_error"

    def __init__(self, detail=None, code=None, status_code=None):
        """
        Initialize API error.

        Args:
            detail: Error message
            code: Error code
            status_code: HTTP status code
        """
        if status_code:
            self.status_code = status_code
        if code:
            self.default_code = code
        super().__init__(detail)


def error_body(code: str, message: str, retryable: bool = False, debug: Any = None) -> dict:
    """Build the error envelope returned by every endpoint."""
    body = {"error": {"code": code, "message": message, "retryable": retryable}}
    if debug is not None and settings.DEBUG:
        body["error"]["debug"] = debug
    return body


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)
    endpoint = _get_endpoint(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
    elif isinstance(exc, ValidationError):
        response = Response(
            error_body("INVALID_REQUEST", _first_validation_message(exc.detail), debug=exc.detail),
            status=status.HTTP_400_BAD_REQUEST,
        )
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = (
            exc.default_code.upper().replace("-", "_")
            if hasattr(exc, "default_code")
            else "API_ERROR"
        )
        detail = response.data.get("detail", exc.default_detail) if response else exc.default_detail
        response = Response(
            error_body(code, str(detail)), status=exc.status_code, headers=_headers(response)
        )
    elif isinstance(exc, Http404):
        response = Response(
            error_body("NOT_FOUND", "Resource not found"),
            status=status.HTTP_404_NOT_FOUND,
        )
    elif isinstance(exc, DatabaseError):
        logger.error("Storage error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
        response = Response(
            error_body("STORAGE_ERROR", "Internal server error. Please try again.", debug=str(exc)),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    elif isinstance(exc, ImproperlyConfigured):
        logger.error("Configuration error: %s", exc, extra={"trace_id": trace_id})
        response = Response(
            error_body("CONFIGURATION_ERROR", "Server configuration error", debug=str(exc)),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    else:
        response = _handle_unexpected_exception(exc, trace_id)

    if response.status_code >= 500:
        errors_total.labels(error_type=type(exc).__name__, endpoint=endpoint).inc()
    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _headers(response: Optional[Response]) -> Optional[dict]:
    if response is None:
        return None
    return {
        name: value
        for name, value in response.items()
        if name in ("WWW-Authenticate", "Retry-After")
    }


def _first_validation_message(detail) -> str:
    """Flatten DRF validation detail into a single readable message."""
    if isinstance(detail, dict):
        for field, errors in detail.items():
            message = _first_validation_message(errors)
            if field == "non_field_errors":
                return message
            return f"{field}: {message}"
    if isinstance(detail, list) and detail:
        return _first_validation_message(detail[0])
    return str(detail) or "Invalid request"


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _get_endpoint(context: Dict[str, Any]) -> str:
    request = context.get("request")
    return request.path if request is not None else "unknown"


def _status_for(exc: DomainException) -> int:
    for exc_class, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = _status_for(exc)
    debug = exc.detail if isinstance(exc, UpstreamError) else None

    if status_code >= 500:
        logger.error(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
    else:
        logger.warning(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
    return Response(
        error_body(exc.code, exc.message, retryable=exc.retryable, debug=debug),
        status=status_code,
    )


def _handle_unexpected_exception(exc: Exception, trace_id: Optional[str]) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    return Response(
        error_body(
            "INTERNAL_ERROR",
            "Internal server error. Please try again.",
            debug=f"{type(exc).__name__}: {exc}",
        ),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
