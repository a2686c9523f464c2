"""
Integration tests for Prompt API endpoints.
"""

from unittest import mock

import pytest
from django.urls import reverse

from core.domain.exceptions import (
    UpstreamRateLimitedError,
    UpstreamResponseError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)


@pytest.fixture
def llm_client(fake_llm_client):
    """Fixture installing the fake LLM client behind the prompt endpoint."""
    with mock.patch("api.v1.prompt.views.get_llm_client", return_value=fake_llm_client):
        yield fake_llm_client


@pytest.mark.django_db
@pytest.mark.integration
class TestCleanPromptAPI:
    """Integration tests for prompt cleaning."""

    def _post(self, api_client, payload):
        return api_client.post(reverse("prompt:clean-prompt"), payload, format="json")

    def test_clean_free(self, api_client, llm_client, settings):
        """Test a free request is served by the free model with trimmed output."""
        response = self._post(api_client, {"prompt": "um so like fix my code"})

        assert response.status_code == 200
        assert response.json() == {
            "output": "Cleaned prompt.",
            "model": settings.PROMPT_FREE_MODEL,
            "tokensUsed": 42,
        }
        kwargs = llm_client.complete.call_args.kwargs
        assert kwargs["max_tokens"] == 500
        assert "um so like fix my code" in kwargs["messages"][-1]["content"]

    def test_clean_pro(self, api_client, llm_client, settings):
        response = self._post(api_client, {"prompt": "fix my code", "isProUser": True})

        assert response.status_code == 200
        assert response.json()["model"] == settings.PROMPT_PRO_MODEL
        assert llm_client.complete.call_args.kwargs["max_tokens"] == 1000

    @pytest.mark.parametrize("payload", [{}, {"prompt": ""}, {"prompt": "   \n"}])
    def test_missing_prompt(self, api_client, llm_client, payload):
        response = self._post(api_client, payload)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PROMPT"
        llm_client.complete.assert_not_called()

    @pytest.mark.parametrize("prompt", [12345, ["fix my code"], {"text": "fix"}, True])
    def test_prompt_not_a_string(self, api_client, llm_client, prompt):
        """Test a prompt of another JSON type is rejected before the LLM call."""
        response = self._post(api_client, {"prompt": prompt, "isProUser": False})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PROMPT"
        assert response.json()["error"]["message"] == "Invalid prompt provided"
        llm_client.complete.assert_not_called()

    def test_prompt_too_long(self, api_client, llm_client, settings):
        response = self._post(api_client, {"prompt": "x" * (settings.PROMPT_MAX_LENGTH + 1)})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Prompt too long. Maximum 10,000 characters."
        llm_client.complete.assert_not_called()

    @pytest.mark.parametrize(
        "error, status_code, code, retryable",
        [
            (UpstreamRateLimitedError(detail="HTTP 429"), 429, "UPSTREAM_RATE_LIMITED", True),
            (UpstreamUnavailableError(detail="insufficient_quota"), 503, "UPSTREAM_UNAVAILABLE", True),
            (UpstreamTimeoutError(), 504, "UPSTREAM_TIMEOUT", True),
            (UpstreamResponseError(detail="HTTP 500: server_error"), 500, "UPSTREAM_ERROR", False),
        ],
    )
    def test_upstream_failures(self, api_client, llm_client, error, status_code, code, retryable):
        """Test each upstream failure maps to its status and error envelope."""
        llm_client.complete.side_effect = error

        response = self._post(api_client, {"prompt": "fix my code"})

        assert response.status_code == status_code
        body = response.json()["error"]
        assert body["code"] == code
        assert body["retryable"] is retryable
        assert body["message"] == error.message
        assert "debug" not in body

    def test_debug_detail_in_debug_mode(self, api_client, llm_client, settings):
        settings.DEBUG = True
        llm_client.complete.side_effect = UpstreamResponseError(detail="HTTP 500: server_error")

        response = self._post(api_client, {"prompt": "fix my code"})

        assert response.json()["error"]["debug"] == "HTTP 500: server_error"

    def test_pro_requires_redeemed_key(self, api_client, llm_client, settings, db_license_key):
        """Test an unredeemed key is served at the free tier when pro is verified."""
        settings.PROMPT_REQUIRE_LICENSE_FOR_PRO = True

        response = self._post(
            api_client,
            {"prompt": "fix my code", "isProUser": True, "licenseKey": db_license_key.key},
        )

        assert response.status_code == 200
        assert response.json()["model"] == settings.PROMPT_FREE_MODEL

    def test_pro_with_redeemed_key(
        self, api_client, llm_client, settings, db_redeemed_license_key
    ):
        settings.PROMPT_REQUIRE_LICENSE_FOR_PRO = True

        response = self._post(
            api_client,
            {
                "prompt": "fix my code",
                "isProUser": True,
                "licenseKey": db_redeemed_license_key.key,
            },
        )

        assert response.status_code == 200
        assert response.json()["model"] == settings.PROMPT_PRO_MODEL

    def test_missing_api_key(self, api_client, settings):
        """Test an unconfigured LLM key is reported as a server configuration error."""
        settings.OPENAI_API_KEY = ""

        response = self._post(api_client, {"prompt": "fix my code"})

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "CONFIGURATION_ERROR"
