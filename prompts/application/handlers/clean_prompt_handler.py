"""
CleanPromptHandler.

Handles the clean prompt command by relaying it to the LLM.
"""

import logging
from typing import Optional

from asgiref.sync import sync_to_async
from django.conf import settings

from core.domain.exceptions import InvalidPromptError
from core.domain.value_objects import Tier
from core.metrics import prompt_clean_requests_total
from licenses.domain.services import LicenseKeyFormat
from licenses.ports.license_key_repository import LicenseKeyRepository
from prompts.application.commands.clean_prompt import CleanPromptCommand
from prompts.application.dto.prompt_dto import CleanedPromptDTO
from prompts.domain.cleaning import profile_for
from prompts.ports.llm_client import LLMClient

logger = logging.getLogger(__name__)


class CleanPromptHandler:
    """Handler for CleanPromptCommand."""

    def __init__(
        self,
        llm_client: LLMClient,
        license_key_repository: Optional[LicenseKeyRepository] = None,
        require_license_for_pro: Optional[bool] = None,
    ):
        """
        Initialize handler.

        Args:
            llm_client: Client for the chat completion API
            license_key_repository: Needed when pro access is verified server side
            require_license_for_pro: Defaults to PROMPT_REQUIRE_LICENSE_FOR_PRO
        """
        self.llm_client = llm_client
        self.license_key_repository = license_key_repository
        self.require_license_for_pro = (
            settings.PROMPT_REQUIRE_LICENSE_FOR_PRO
            if require_license_for_pro is None
            else require_license_for_pro
        )

    async def handle(self, command: CleanPromptCommand) -> CleanedPromptDTO:
        """
        Handle clean prompt command.

        Args:
            command: CleanPromptCommand

        Returns:
            CleanedPromptDTO with the trimmed output

        Raises:
            InvalidPromptError: If the prompt is missing or too long
            UpstreamError: If the LLM call fails
        """
        self._validate(command.prompt)

        tier = await self._resolve_tier(command)
        profile = profile_for(tier, settings.PROMPT_FREE_MODEL, settings.PROMPT_PRO_MODEL)

        logger.info(
            "Cleaning prompt",
            extra={"prompt_length": len(command.prompt), "tier": str(tier)},
        )
        prompt_clean_requests_total.labels(tier=str(tier), model=profile.model).inc()

        completion = await sync_to_async(self.llm_client.complete, thread_sensitive=False)(
            model=profile.model,
            messages=profile.build_messages(command.prompt),
            max_tokens=profile.max_tokens,
            temperature=profile.temperature,
        )

        output = completion.content.strip()
        logger.info("Prompt cleaned", extra={"output_length": len(output), "tier": str(tier)})

        return CleanedPromptDTO(
            output=output,
            model=profile.model,
            tokens_used=completion.total_tokens,
            tier=str(tier),
        )

    @staticmethod
    def _validate(prompt) -> None:
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidPromptError()
        if len(prompt) > settings.PROMPT_MAX_LENGTH:
            raise InvalidPromptError(
                f"Prompt too long. Maximum {settings.PROMPT_MAX_LENGTH:,} characters."
            )

    async def _resolve_tier(self, command: CleanPromptCommand) -> Tier:
        if not command.is_pro_user:
            return Tier.FREE
        if not self.require_license_for_pro:
            return Tier.PRO

        if self.license_key_repository is None or not command.license_key:
            logger.info("Pro tier requested without a license key, serving free tier")
            return Tier.FREE

        well_formed, key = LicenseKeyFormat.validate(
            command.license_key, settings.LICENSE_KEY_PREFIX
        )
        if not well_formed:
            return Tier.FREE

        license_key = await self.license_key_repository.find_by_key(key)
        if license_key is None or not license_key.is_used:
            logger.info("Pro tier requested with an unredeemed license key, serving free tier")
            return Tier.FREE
        return Tier.PRO
