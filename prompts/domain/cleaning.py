"""
Prompt cleaning domain objects.

Holds the per-tier request profile and the validated prompt and
result value objects. Nothing here performs I/O.
"""

from dataclasses import dataclass
from typing import Dict, List

from core.domain.value_objects import Tier

PRO_SYSTEM_PROMPT = (
    "You are an expert AI prompt optimizer. Clean, restructure, and enhance the given "
    "prompt to make it more effective, clear, and professional. Focus on clarity, "
    "specificity, and proper formatting. Remove redundancy and improve structure while "
    "maintaining the original intent. Return only the optimized prompt without explanations."
)

FREE_SYSTEM_PROMPT = (
    "You are an assistant that simplifies and cleans prompts. Make the prompt clearer, "
    "more concise, and better structured while keeping the main intent. Return only the "
    "cleaned prompt without explanations."
)

USER_MESSAGE_TEMPLATE = "Please clean and optimize this prompt:\n\n{prompt}"

TEMPERATURE = 0.3


@dataclass(frozen=True)
class TierProfile:
    """How requests of one tier are sent upstream."""

    tier: Tier
    model: str
    max_tokens: int
    system_prompt: str
    temperature: float = TEMPERATURE

    def build_messages(self, prompt: str) -> List[Dict[str, str]]:
        """Build the chat messages for a prompt."""
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": USER_MESSAGE_TEMPLATE.format(prompt=prompt)},
        ]


def profile_for(tier: Tier, free_model: str, pro_model: str) -> TierProfile:
    """
    Select the request profile for a tier.

    Args:
        tier: Tier the request is served at
        free_model: Model name used for the free tier
        pro_model: Model name used for the pro tier

    Returns:
        TierProfile for the tier
    """
    if tier is Tier.PRO:
        return TierProfile(
            tier=Tier.PRO, model=pro_model, max_tokens=1000, system_prompt=PRO_SYSTEM_PROMPT
        )
    return TierProfile(
        tier=Tier.FREE, model=free_model, max_tokens=500, system_prompt=FREE_SYSTEM_PROMPT
    )


@dataclass(frozen=True)
class Completion:
    """Text returned by the LLM for one request."""

    content: str
    total_tokens: int
