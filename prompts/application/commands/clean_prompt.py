"""
CleanPromptCommand.

Command to clean a prompt through the LLM relay.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CleanPromptCommand:
    """
    Command to clean a prompt.

    ``is_pro_user`` is the tier the client claims; ``license_key`` is
    only consulted when the service verifies pro access itself.
    """

    prompt: str
    is_pro_user: bool = False
    license_key: Optional[str] = None
