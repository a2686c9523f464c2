"""
Client application flow.

Ties the usage gate, the local state and the HTTP client together the way
the user interface drives them.
"""
import logging
from typing import Optional

from cleaner_client.api import PromptCleanerAPI
from cleaner_client.state import StateStore
from cleaner_client.usage_gate import UsageGate

logger = logging.getLogger(__name__)


class PromptCleanerApp:
    """Cleans prompts and redeems license keys on behalf of one user."""

    def __init__(
        self,
        api: Optional[PromptCleanerAPI] = None,
        store: Optional[StateStore] = None,
        gate: Optional[UsageGate] = None,
    ):
        self.api = api or PromptCleanerAPI()
        self.store = store or StateStore()
        self.gate = gate or UsageGate(self.store)

    @property
    def is_pro(self) -> bool:
        return self.store.load().is_pro

    def clean(self, prompt: str) -> dict:
        """
        Clean a prompt, subject to the daily limit for free users.

        Raises:
            UsageLimitReached: Before any request, when the free limit is used up
            ServiceError: If the service call fails (the use is not counted)
        """
        state = self.gate.check()
        result = self.api.clean_prompt(
            prompt, is_pro_user=state.is_pro, license_key=state.license_key
        )
        self.gate.record_use()
        return result

    def redeem(self, license_key: str) -> None:
        """
        Redeem a license key and unlock the pro tier locally.

        Raises:
            InvalidLicenseKey: If the service refuses the key
            ServiceError: If the service call fails
        """
        key = license_key.strip()
        self.api.redeem_license(key)

        state = self.store.load()
        state.is_pro = True
        state.license_key = key
        self.store.save(state)
        logger.info("Pro tier unlocked")

    def uses_left_today(self) -> int:
        """Calls left today; -1 means unlimited."""
        return self.gate.remaining()
