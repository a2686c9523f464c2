"""
License API views.

These endpoints are used by:
- the payment provider, to issue a key for each purchase
- the client application, to redeem a key
- purchasers, to retrieve a key by email
"""

import logging

from asgiref.sync import async_to_sync, sync_to_async
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import APIError
from api.v1.license.serializers import (
    IssueLicenseRequestSerializer,
    IssueLicenseResponseSerializer,
    LookupLicenseResponseSerializer,
    LookupLicenseSentResponseSerializer,
    ValidateLicenseRequestSerializer,
    ValidateLicenseResponseSerializer,
)
from core.domain.exceptions import (
    InvalidLicenseKeyError,
    InvalidPurchaseError,
    LicenseNotFoundError,
    UnknownProductError,
    WebhookSignatureError,
)
from core.infrastructure.webhooks import WebhookSignatureVerifier
from core.instrumentation import Status, StatusCode, get_tracer
from core.tasks import send_license_key_email_task
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.redeem_license import RedeemLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.lookup_license_by_email_handler import (
    LookupLicenseByEmailHandler,
)
from licenses.application.handlers.redeem_license_handler import RedeemLicenseHandler
from licenses.application.queries.lookup_license_by_email import LookupLicenseByEmailQuery
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)

logger = logging.getLogger(__name__)

# Initialize repositories (in production, use DI container)
_license_key_repo = DjangoLicenseKeyRepository()

tracer = get_tracer(__name__)


def _send_key_email(email: str, license_key: str) -> None:
    """Queue the license key email, logging dispatch failures."""
    try:
        send_license_key_email_task.delay(email, license_key)
    except Exception:  # pylint: disable=broad-exception-caught
        logger.error("Could not dispatch license key email for lookup", exc_info=True)


class IssueLicenseView(APIView):
    """View for issuing a license key from a purchase webhook."""

    @extend_schema(
        operation_id="issue_license",
        summary="Issue License",
        description=(
            "Called by the payment provider when a purchase completes. "
            "The raw body must be signed with HMAC-SHA256 using the shared webhook secret. "
            "Repeated deliveries for the same sale return the key issued the first time."
        ),
        tags=["License API"],
        parameters=[
            OpenApiParameter(
                name=settings.LICENSE_WEBHOOK_SIGNATURE_HEADER,
                type=str,
                location=OpenApiParameter.HEADER,
                required=True,
                description="Hex HMAC-SHA256 of the raw request body",
            ),
        ],
        request=IssueLicenseRequestSerializer,
        responses={
            200: IssueLicenseResponseSerializer,
            400: {"description": "Invalid purchase payload"},
            401: {"description": "Missing or invalid signature"},
            403: {"description": "Purchase is for another product"},
            503: {"description": "Could not generate a unique key, retry"},
        },
    )
    def post(self, request: Request) -> Response:
        """Issue a license key for a purchase."""
        return async_to_sync(self._handle_issue_license)(request)

    async def _handle_issue_license(self, request: Request) -> Response:
        """Async handler for issue license."""
        with tracer.start_as_current_span("issue_license") as span:
            span.set_attribute("operation", "issue_license")

            raw_body = request.body
            signature = request.headers.get(settings.LICENSE_WEBHOOK_SIGNATURE_HEADER)
            try:
                WebhookSignatureVerifier().verify(raw_body, signature)
            except (WebhookSignatureError, ImproperlyConfigured):
                span.set_attribute("error", "signature_rejected")
                span.set_status(Status(StatusCode.ERROR, "Signature rejected"))
                raise

            serializer = IssueLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                logger.warning("Purchase webhook with invalid payload: %s", serializer.errors)
                raise InvalidPurchaseError("Missing email or purchase ID")

            purchase = serializer.validated_data["purchase"]
            expected_product = settings.LICENSE_WEBHOOK_PRODUCT_ID
            if expected_product and purchase.get("product_id") != expected_product:
                span.set_attribute("error", "unknown_product")
                span.set_status(Status(StatusCode.ERROR, "Unknown product"))
                raise UnknownProductError()

            span.set_attribute("sale_id", purchase["id"])

            handler = IssueLicenseHandler(license_key_repository=_license_key_repo)
            result = await handler.handle(
                IssueLicenseCommand(email=purchase["email"], sale_id=purchase["id"])
            )

            span.set_attribute("created", result.created)
            span.set_status(Status(StatusCode.OK))

            response_serializer = IssueLicenseResponseSerializer({"success": True})
            return Response(response_serializer.data, status=status.HTTP_200_OK)


class ValidateLicenseView(APIView):
    """View for redeeming a license key."""

    @extend_schema(
        operation_id="validate_license",
        summary="Redeem License",
        description=(
            "Redeem a license key. A key is valid exactly once; unknown, "
            "malformed and already redeemed keys are all reported as invalid."
        ),
        tags=["License API"],
        request=ValidateLicenseRequestSerializer,
        responses={
            200: ValidateLicenseResponseSerializer,
            400: ValidateLicenseResponseSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Redeem a license key."""
        return async_to_sync(self._handle_validate_license)(request)

    async def _handle_validate_license(self, request: Request) -> Response:
        """Async handler for validate license."""
        with tracer.start_as_current_span("validate_license") as span:
            span.set_attribute("operation", "validate_license")

            serializer = ValidateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response({"valid": False}, status=status.HTTP_400_BAD_REQUEST)

            handler = RedeemLicenseHandler(license_key_repository=_license_key_repo)
            try:
                await handler.handle(
                    RedeemLicenseCommand(license_key=serializer.validated_data["licenseKey"])
                )
            except InvalidLicenseKeyError:
                span.set_attribute("error", "invalid_license_key")
                span.set_status(Status(StatusCode.ERROR, "Invalid license key"))
                return Response({"valid": False}, status=status.HTTP_400_BAD_REQUEST)

            span.set_status(Status(StatusCode.OK))
            return Response({"valid": True}, status=status.HTTP_200_OK)


class LookupLicenseView(APIView):
    """View for retrieving a license key by purchaser email."""

    @extend_schema(
        operation_id="lookup_license",
        summary="Look Up License",
        description=(
            "Return the most recently issued license key for an email. "
            "When the service is configured for email delivery the key is sent "
            "to the address instead and the response is always 202."
        ),
        tags=["License API"],
        parameters=[
            OpenApiParameter(
                name="email",
                type=str,
                location=OpenApiParameter.QUERY,
                required=True,
                description="Purchaser email address",
            ),
        ],
        responses={
            200: LookupLicenseResponseSerializer,
            202: LookupLicenseSentResponseSerializer,
            400: {"description": "Missing email"},
            404: {"description": "No license for this email"},
        },
    )
    def get(self, request: Request) -> Response:
        """Look up a license key by email."""
        return async_to_sync(self._handle_lookup_license)(request)

    async def _handle_lookup_license(self, request: Request) -> Response:
        """Async handler for lookup license."""
        with tracer.start_as_current_span("lookup_license") as span:
            span.set_attribute("operation", "lookup_license")

            email = (request.query_params.get("email") or "").strip()
            if not email:
                span.set_attribute("error", "missing_email")
                span.set_status(Status(StatusCode.ERROR, "Missing email"))
                raise APIError("Email is required", code="missing_email")

            span.set_attribute("delivery", settings.LICENSE_LOOKUP_DELIVERY)
            handler = LookupLicenseByEmailHandler(license_key_repository=_license_key_repo)
            query = LookupLicenseByEmailQuery(email=email)

            if settings.LICENSE_LOOKUP_DELIVERY == "email":
                try:
                    result = await handler.handle(query)
                except LicenseNotFoundError:
                    logger.info("Lookup by email found nothing to send")
                else:
                    await sync_to_async(_send_key_email, thread_sensitive=False)(
                        result.email, result.key
                    )
                span.set_status(Status(StatusCode.OK))
                response_serializer = LookupLicenseSentResponseSerializer({"sent": True})
                return Response(response_serializer.data, status=status.HTTP_202_ACCEPTED)

            result = await handler.handle(query)

            span.set_status(Status(StatusCode.OK))
            response_serializer = LookupLicenseResponseSerializer({"licenseKey": result.key})
            return Response(response_serializer.data, status=status.HTTP_200_OK)
