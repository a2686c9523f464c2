"""
OpenAI implementation of the LLMClient port.

Calls the chat completions endpoint over HTTP with ``requests`` and
translates every failure into an upstream domain exception.
"""
import logging
import time
from typing import Dict, List, Optional

import requests
from django.conf import settings

from core.config import get_required_setting
from core.domain.exceptions import (
    UpstreamError,
    UpstreamRateLimitedError,
    UpstreamResponseError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from core.metrics import upstream_errors_total, upstream_request_duration_seconds
from prompts.domain.cleaning import Completion
from prompts.ports.llm_client import LLMClient

logger = logging.getLogger(__name__)


class OpenAIChatClient(LLMClient):
    """
    LLMClient backed by the OpenAI chat completions API.

    No automatic retry: failures are classified and surfaced to the caller.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: API key (defaults to OPENAI_API_KEY, resolved on first call)
            api_base: API base URL (defaults to OPENAI_API_BASE)
            timeout: Request timeout in seconds (defaults to OPENAI_TIMEOUT_SECONDS)
            session: Optional requests session
        """
        self._api_key = api_key
        self.api_base = (api_base or settings.OPENAI_API_BASE).rstrip("/")
        self.timeout = timeout or settings.OPENAI_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    @property
    def api_key(self) -> str:
        return self._api_key or get_required_setting("OPENAI_API_KEY")

    def complete(
        self,
        model: str,
        messages: List[Dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> Completion:
        """Request a chat completion, see LLMClient.complete."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        start_time = time.time()
        try:
            return self._request(headers, payload)
        except UpstreamError as e:
            upstream_errors_total.labels(error_code=e.code).inc()
            logger.warning(
                "LLM API call failed: %s",
                e.code,
                extra={"model": model, "detail": e.detail},
            )
            raise
        finally:
            upstream_request_duration_seconds.labels(model=model).observe(
                time.time() - start_time
            )

    def _request(self, headers: dict, payload: dict) -> Completion:
        try:
            response = self.session.post(
                f"{self.api_base}/chat/completions",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise UpstreamTimeoutError(detail=str(e)) from e
        except requests.exceptions.ConnectionError as e:
            raise UpstreamUnavailableError(
                "Unable to connect to AI service. Please try again.", detail=str(e)
            ) from e
        except requests.exceptions.RequestException as e:
            raise UpstreamUnavailableError(detail=str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamResponseError(
                "Unable to process AI response. Please try again.",
                detail=f"HTTP {response.status_code}: unparseable body",
            ) from e

        if not response.ok:
            self._raise_for_error(response.status_code, data)

        content = self._extract_content(data)
        if not content or not content.strip():
            raise UpstreamResponseError(
                "Unable to generate cleaned prompt. Please try again.",
                detail="Empty completion",
            )

        usage = data.get("usage") if isinstance(data, dict) else None
        total_tokens = 0
        if isinstance(usage, dict) and isinstance(usage.get("total_tokens"), int):
            total_tokens = usage["total_tokens"]

        return Completion(content=content, total_tokens=total_tokens)

    @staticmethod
    def _raise_for_error(status_code: int, data) -> None:
        error = data.get("error") if isinstance(data, dict) else None
        error_code = error.get("code") if isinstance(error, dict) else None
        detail = f"HTTP {status_code}: {error_code or 'unknown'}"

        if error_code == "insufficient_quota":
            raise UpstreamUnavailableError(detail=detail)
        if error_code == "rate_limit_exceeded" or status_code == 429:
            raise UpstreamRateLimitedError(detail=detail)
        raise UpstreamResponseError(detail=detail)

    @staticmethod
    def _extract_content(data) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            return None
        content = message.get("content")
        return content if isinstance(content, str) else None
