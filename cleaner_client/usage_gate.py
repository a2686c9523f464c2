"""
Daily usage limit for the free tier.

The count resets when the calendar day changes. Pro users are never
limited. The check runs before any request is sent to the service.
"""
import logging
from datetime import date
from typing import Callable

from cleaner_client.exceptions import UsageLimitReached
from cleaner_client.state import ClientState, StateStore

logger = logging.getLogger(__name__)

DAILY_LIMIT = 3


class UsageGate:
    """Enforces DAILY_LIMIT cleaning calls per day for free users."""

    def __init__(
        self,
        store: StateStore,
        limit: int = DAILY_LIMIT,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.limit = limit
        self.today = today

    def _current(self) -> ClientState:
        """Load the state, resetting the counter on a new day."""
        state = self.store.load()
        today = self.today().isoformat()
        if state.last_usage_date != today:
            state.usage_count = 0
            state.last_usage_date = today
            self.store.save(state)
        return state

    def check(self) -> ClientState:
        """
        Refuse the call if the daily limit is reached.

        Raises:
            UsageLimitReached: For a free user who already used the limit today
        """
        state = self._current()
        if not state.is_pro and state.usage_count >= self.limit:
            logger.info("Daily usage limit reached")
            raise UsageLimitReached(self.limit)
        return state

    def record_use(self) -> ClientState:
        """Count one successful cleaning call for a free user."""
        state = self._current()
        if not state.is_pro:
            state.usage_count += 1
            self.store.save(state)
        return state

    def remaining(self) -> int:
        """Calls left today; -1 means unlimited."""
        state = self._current()
        if state.is_pro:
            return -1
        return max(0, self.limit - state.usage_count)
