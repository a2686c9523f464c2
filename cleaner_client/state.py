"""
Local persistent client state.

The state lives in a small JSON file next to the client. It is advisory:
anyone with access to the file can edit it.
"""
import json
import logging
import os
import pathlib
import tempfile
from dataclasses import asdict, dataclass
from typing import Optional

logger = logging.getLogger(__name__)

STATE_FILE = "prompt_cleaner_state.json"


@dataclass
class ClientState:
    """Usage counter, its calendar day and the pro flag."""

    usage_count: int = 0
    last_usage_date: Optional[str] = None
    is_pro: bool = False
    license_key: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ClientState":
        usage_count = data.get("usage_count")
        last_usage_date = data.get("last_usage_date")
        license_key = data.get("license_key")
        return cls(
            usage_count=usage_count if isinstance(usage_count, int) and usage_count >= 0 else 0,
            last_usage_date=last_usage_date if isinstance(last_usage_date, str) else None,
            is_pro=data.get("is_pro") is True,
            license_key=license_key if isinstance(license_key, str) else None,
        )


class StateStore:
    """Loads and saves ClientState as JSON."""

    def __init__(self, path=None):
        path = path or os.environ.get("PROMPT_CLEANER_STATE", STATE_FILE)
        self.path = pathlib.Path(path).resolve()

    def load(self) -> ClientState:
        """Return the stored state, or a fresh one if missing or unreadable."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return ClientState()
        except (OSError, ValueError):
            logger.warning("Could not read client state from %s, starting fresh", self.path)
            return ClientState()
        return ClientState.from_dict(data) if isinstance(data, dict) else ClientState()

    def save(self, state: ClientState) -> None:
        """Write the state atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(asdict(state), f)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
