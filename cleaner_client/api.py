"""
HTTP client for the Prompt Cleaner service.
"""
import logging
import os
from typing import Optional

import requests

from cleaner_client.exceptions import InvalidLicenseKey, ServiceError

logger = logging.getLogger(__name__)

SERVER = os.environ.get("PROMPT_CLEANER_SERVER", "http://localhost:8000").rstrip("/")
TIMEOUT = (5, 60)  # (connect, read); the LLM relay can be slow


class PromptCleanerAPI:
    """Thin wrapper around the service's HTTP endpoints."""

    def __init__(
        self,
        base_url: str = SERVER,
        session: Optional[requests.Session] = None,
        timeout=TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def clean_prompt(self, prompt: str, is_pro_user: bool, license_key: Optional[str] = None) -> dict:
        """
        Clean a prompt.

        Returns:
            Dict with ``output``, ``model`` and ``tokensUsed``

        Raises:
            ServiceError: If the service fails or cannot be reached
        """
        payload = {"prompt": prompt, "isProUser": is_pro_user}
        if license_key:
            payload["licenseKey"] = license_key
        response = self._request("post", "/prompt/clean", json=payload)
        data = self._json(response)
        if not response.ok:
            raise self._service_error(response, data)
        return data

    def redeem_license(self, license_key: str) -> bool:
        """
        Redeem a license key.

        Returns:
            True when the key was redeemed

        Raises:
            InvalidLicenseKey: If the key is unknown, malformed or already used
            ServiceError: If the service fails or cannot be reached
        """
        response = self._request("post", "/license/validate", json={"licenseKey": license_key})
        data = self._json(response)
        if response.ok and data.get("valid") is True:
            return True
        if response.status_code == 400 and data.get("valid") is False:
            raise InvalidLicenseKey()
        raise self._service_error(response, data)

    def lookup_license(self, email: str) -> Optional[str]:
        """
        Retrieve the license key bought with an email.

        Returns:
            The key, or None when the service emails it instead

        Raises:
            ServiceError: If no key exists or the service fails
        """
        response = self._request("get", "/license/lookup", params={"email": email})
        data = self._json(response)
        if response.status_code == 202:
            return None
        if not response.ok:
            raise self._service_error(response, data)
        return data.get("licenseKey")

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise ServiceError("The service took too long to respond", retryable=True) from e
        except requests.exceptions.RequestException as e:
            raise ServiceError(f"Could not reach the service: {e}", retryable=True) from e

    @staticmethod
    def _json(response: requests.Response) -> dict:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _service_error(response: requests.Response, data: dict) -> ServiceError:
        error = data.get("error") if isinstance(data.get("error"), dict) else {}
        message = error.get("message") or f"Service error (HTTP {response.status_code})"
        logger.warning("Service call failed: HTTP %s %s", response.status_code, error.get("code", ""))
        return ServiceError(
            message,
            status_code=response.status_code,
            code=error.get("code", ""),
            retryable=error.get("retryable") is True,
        )
