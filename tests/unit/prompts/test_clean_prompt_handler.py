"""
Unit tests for CleanPromptHandler.
"""
import pytest
from asgiref.sync import async_to_sync

from core.domain.exceptions import InvalidPromptError, UpstreamRateLimitedError
from prompts.application.commands.clean_prompt import CleanPromptCommand
from prompts.application.handlers.clean_prompt_handler import CleanPromptHandler
from prompts.domain.cleaning import FREE_SYSTEM_PROMPT, PRO_SYSTEM_PROMPT


class TestCleanPromptHandler:
    """Tests for CleanPromptHandler."""

    def test_free_tier(self, fake_llm_client):
        """Test free users get the small model and the simplifier prompt."""
        handler = CleanPromptHandler(fake_llm_client, require_license_for_pro=False)

        result = async_to_sync(handler.handle)(CleanPromptCommand(prompt="make me a poem"))

        assert result.output == "Cleaned prompt."
        assert result.model == "gpt-3.5-turbo"
        assert result.tokens_used == 42
        assert result.tier == "free"

        kwargs = fake_llm_client.complete.call_args.kwargs
        assert kwargs["model"] == "gpt-3.5-turbo"
        assert kwargs["max_tokens"] == 500
        assert kwargs["temperature"] == 0.3
        assert kwargs["messages"][0] == {"role": "system", "content": FREE_SYSTEM_PROMPT}
        assert kwargs["messages"][1] == {
            "role": "user",
            "content": "Please clean and optimize this prompt:\n\nmake me a poem",
        }

    def test_pro_tier(self, fake_llm_client):
        """Test pro users get the large model."""
        handler = CleanPromptHandler(fake_llm_client, require_license_for_pro=False)

        result = async_to_sync(handler.handle)(
            CleanPromptCommand(prompt="make me a poem", is_pro_user=True)
        )

        assert result.model == "gpt-4"
        kwargs = fake_llm_client.complete.call_args.kwargs
        assert kwargs["max_tokens"] == 1000
        assert kwargs["messages"][0]["content"] == PRO_SYSTEM_PROMPT

    @pytest.mark.parametrize("prompt", ["", "   ", None, 42])
    def test_invalid_prompt(self, fake_llm_client, prompt):
        """Test empty or non-text prompts never reach the LLM."""
        handler = CleanPromptHandler(fake_llm_client, require_license_for_pro=False)
        with pytest.raises(InvalidPromptError):
            async_to_sync(handler.handle)(CleanPromptCommand(prompt=prompt))
        fake_llm_client.complete.assert_not_called()

    def test_prompt_length_limit(self, fake_llm_client):
        """Test the length limit is inclusive."""
        handler = CleanPromptHandler(fake_llm_client, require_license_for_pro=False)

        async_to_sync(handler.handle)(CleanPromptCommand(prompt="x" * 10000))

        with pytest.raises(InvalidPromptError, match="Maximum 10,000"):
            async_to_sync(handler.handle)(CleanPromptCommand(prompt="x" * 10001))

    def test_upstream_error_propagates(self, fake_llm_client):
        fake_llm_client.complete.side_effect = UpstreamRateLimitedError()
        handler = CleanPromptHandler(fake_llm_client, require_license_for_pro=False)
        with pytest.raises(UpstreamRateLimitedError):
            async_to_sync(handler.handle)(CleanPromptCommand(prompt="hello"))


class TestServerSideProCheck:
    """Tests for pro tier verification against the license store."""

    def _handler(self, fake_llm_client, repository):
        return CleanPromptHandler(
            fake_llm_client,
            license_key_repository=repository,
            require_license_for_pro=True,
        )

    def test_claim_without_key_is_free(self, fake_llm_client, memory_license_key_repository):
        handler = self._handler(fake_llm_client, memory_license_key_repository)
        result = async_to_sync(handler.handle)(
            CleanPromptCommand(prompt="hello", is_pro_user=True)
        )
        assert result.tier == "free"

    def test_unredeemed_key_is_free(
        self, fake_llm_client, memory_license_key_repository, sample_license_key
    ):
        memory_license_key_repository.keys[sample_license_key.key] = sample_license_key
        handler = self._handler(fake_llm_client, memory_license_key_repository)
        result = async_to_sync(handler.handle)(
            CleanPromptCommand(
                prompt="hello", is_pro_user=True, license_key=sample_license_key.key
            )
        )
        assert result.tier == "free"

    def test_redeemed_key_is_pro(
        self, fake_llm_client, memory_license_key_repository, sample_license_key
    ):
        redeemed = sample_license_key.redeem()
        memory_license_key_repository.keys[redeemed.key] = redeemed
        handler = self._handler(fake_llm_client, memory_license_key_repository)
        result = async_to_sync(handler.handle)(
            CleanPromptCommand(prompt="hello", is_pro_user=True, license_key=redeemed.key)
        )
        assert result.tier == "pro"
        assert result.model == "gpt-4"
