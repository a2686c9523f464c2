"""
Prompt DTOs for API responses.
"""
from dataclasses import dataclass


@dataclass
class CleanedPromptDTO:
    """DTO for a cleaned prompt."""

    output: str
    model: str
    tokens_used: int
    tier: str
