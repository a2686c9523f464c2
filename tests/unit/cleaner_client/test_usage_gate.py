"""
Unit tests for the client state store and daily usage gate.
"""
import json
from datetime import date, timedelta

import pytest

from cleaner_client.exceptions import UsageLimitReached
from cleaner_client.state import ClientState, StateStore
from cleaner_client.usage_gate import DAILY_LIMIT, UsageGate


class Clock:
    """Controllable calendar for rollover tests."""

    def __init__(self, today):
        self.current = today

    def __call__(self):
        return self.current


@pytest.fixture
def store(tmp_path):
    return StateStore(tmp_path / "state.json")


@pytest.fixture
def clock():
    return Clock(date(2026, 3, 14))


class TestStateStore:
    """Tests for StateStore."""

    def test_missing_file_gives_fresh_state(self, store):
        assert store.load() == ClientState()

    def test_round_trip(self, store):
        store.save(ClientState(usage_count=2, last_usage_date="2026-03-14", is_pro=True))
        assert store.load() == ClientState(
            usage_count=2, last_usage_date="2026-03-14", is_pro=True
        )

    def test_corrupt_file_gives_fresh_state(self, store):
        store.path.write_text("{not json", encoding="utf-8")
        assert store.load() == ClientState()

    def test_bad_values_are_ignored(self, store):
        store.path.write_text(
            json.dumps({"usage_count": -4, "is_pro": "yes", "last_usage_date": 5}),
            encoding="utf-8",
        )
        assert store.load() == ClientState()


class TestUsageGate:
    """Tests for UsageGate."""

    def test_free_user_limited_per_day(self, store, clock):
        """Test the fourth call of a day is refused."""
        gate = UsageGate(store, today=clock)

        for _ in range(DAILY_LIMIT):
            gate.check()
            gate.record_use()

        assert gate.remaining() == 0
        with pytest.raises(UsageLimitReached):
            gate.check()

    def test_counter_resets_on_new_day(self, store, clock):
        """Test day rollover restores the full allowance."""
        gate = UsageGate(store, today=clock)
        for _ in range(DAILY_LIMIT):
            gate.record_use()
        with pytest.raises(UsageLimitReached):
            gate.check()

        clock.current += timedelta(days=1)

        state = gate.check()
        assert state.usage_count == 0
        assert state.last_usage_date == "2026-03-15"
        assert gate.remaining() == DAILY_LIMIT

    def test_stale_state_from_earlier_day(self, store, clock):
        """Test a full counter saved on an earlier day does not block today."""
        store.save(ClientState(usage_count=DAILY_LIMIT, last_usage_date="2026-03-01"))
        gate = UsageGate(store, today=clock)
        gate.check()

    def test_pro_user_never_limited(self, store, clock):
        store.save(ClientState(is_pro=True))
        gate = UsageGate(store, today=clock)

        for _ in range(DAILY_LIMIT * 3):
            gate.check()
            gate.record_use()

        assert store.load().usage_count == 0
        assert gate.remaining() == -1

    def test_count_survives_restart(self, store, clock):
        """Test the counter is persisted between gate instances."""
        UsageGate(store, today=clock).record_use()
        UsageGate(store, today=clock).record_use()
        assert UsageGate(store, today=clock).remaining() == DAILY_LIMIT - 2
