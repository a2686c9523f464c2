"""
Prompt API views.

The client application sends prompts here; they are relayed to the
LLM and the cleaned text is returned.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.prompt.serializers import (
    CleanPromptRequestSerializer,
    CleanPromptResponseSerializer,
)
from core.domain.exceptions import InvalidPromptError, UpstreamError
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)
from prompts.application.commands.clean_prompt import CleanPromptCommand
from prompts.application.handlers.clean_prompt_handler import CleanPromptHandler
from prompts.infrastructure.openai_client import OpenAIChatClient

_license_key_repo = DjangoLicenseKeyRepository()

tracer = get_tracer(__name__)


def get_llm_client():
    """Return the LLM client used by the prompt endpoints."""
    return OpenAIChatClient()


class CleanPromptView(APIView):
    """View for cleaning a prompt."""

    @extend_schema(
        operation_id="clean_prompt",
        summary="Clean Prompt",
        description=(
            "Relay a prompt to the LLM and return the cleaned version. "
            "Pro users are served by the larger model."
        ),
        tags=["Prompt API"],
        request=CleanPromptRequestSerializer,
        responses={
            200: CleanPromptResponseSerializer,
            400: {"description": "Missing or too long prompt"},
            429: {"description": "LLM API rate limited, retry later"},
            500: {"description": "LLM API error or unusable response"},
            503: {"description": "LLM API unavailable"},
            504: {"description": "LLM API timed out"},
        },
    )
    def post(self, request: Request) -> Response:
        """Clean a prompt."""
        return async_to_sync(self._handle_clean_prompt)(request)

    async def _handle_clean_prompt(self, request: Request) -> Response:
        """Async handler for clean prompt."""
        with tracer.start_as_current_span("clean_prompt") as span:
            span.set_attribute("operation", "clean_prompt")

            serializer = CleanPromptRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                raise InvalidPromptError()

            data = serializer.validated_data
            span.set_attribute("prompt_length", len(data["prompt"]))
            span.set_attribute("is_pro_user", data["isProUser"])

            handler = CleanPromptHandler(
                llm_client=get_llm_client(),
                license_key_repository=_license_key_repo,
            )
            try:
                result = await handler.handle(
                    CleanPromptCommand(
                        prompt=data["prompt"],
                        is_pro_user=data["isProUser"],
                        license_key=data.get("licenseKey") or None,
                    )
                )
            except UpstreamError as e:
                span.set_attribute("error", e.code)
                span.set_status(Status(StatusCode.ERROR, e.message))
                raise

            span.set_attribute("model", result.model)
            span.set_attribute("tokens_used", result.tokens_used)
            span.set_status(Status(StatusCode.OK))

            response_serializer = CleanPromptResponseSerializer(result)
            return Response(response_serializer.data, status=status.HTTP_200_OK)
