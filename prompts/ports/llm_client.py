"""
LLM client port (interface).

This defines the contract for calling a chat completion API.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Dict, List

from prompts.domain.cleaning import Completion


class LLMClient(ABC):
    """Abstract client for a chat completion API."""

    @abstractmethod
    def complete(
        self,
        model: str,
        messages: List[Dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> Completion:
        """
        Request a chat completion.

        Args:
            model: Model name
            messages: Chat messages
            max_tokens: Upper bound on generated tokens
            temperature: Sampling temperature

        Returns:
            Completion with the generated text and token usage

        Raises:
            UpstreamRateLimitedError: If the API rate limits the call
            UpstreamUnavailableError: If the API is unreachable or out of quota
            UpstreamTimeoutError: If the API does not answer in time
            UpstreamResponseError: If the API fails or answers unusably
        """
        pass
