"""
Test PaginationStore notifier operations and blinker notifications.
"""

import pytest

from chat_paginator.pagination_state import PaginationState
from chat_paginator.pagination_store import POSITION_END, POSITION_START, PaginationStore


class Recorder:
    """Collects blinker signal payloads."""

    def __init__(self):
        self.calls = []

    def __call__(self, sender, **kwargs):
        self.calls.append(kwargs)


class TestPaginationStore:
    """Tests for PaginationStore."""

    def setup_method(self):
        self.store = PaginationStore()
        self.changes = Recorder()
        self.inserts = Recorder()
        self.resets = Recorder()
        self.store.connect(self.changes)
        self.store.messages_inserted.connect(self.inserts)
        self.store.messages_reset.connect(self.resets)

    def test_append_keeps_chronological_order(self):
        self.store.add_messages(["a", "b"])
        self.store.add_messages(["c"])

        assert self.store.state.messages == ("a", "b", "c")
        assert self.inserts.calls == [
            {"position": POSITION_END, "count": 2},
            {"position": POSITION_END, "count": 1},
        ]

    def test_prepend_batches_in_reverse_call_order(self):
        self.store.add_messages(["orig"])
        self.store.add_messages(["p1a", "p1b"], prepend=True)
        self.store.add_messages(["p2a", "p2b"], prepend=True)

        assert self.store.state.messages == ("p2a", "p2b", "p1a", "p1b", "orig")
        assert self.inserts.calls[-1] == {"position": POSITION_START, "count": 2}

    def test_add_message_single(self):
        self.store.add_message("a")
        self.store.add_message("z", prepend=True)

        assert self.store.state.messages == ("z", "a")

    def test_empty_batch_is_ignored(self):
        self.store.add_messages([])

        assert self.changes.calls == []
        assert self.inserts.calls == []

    def test_state_changed_reports_previous_snapshot(self):
        before = self.store.state
        self.store.set_loading(True)

        assert len(self.changes.calls) == 1
        assert self.changes.calls[0]["previous"] is before
        assert self.changes.calls[0]["state"].is_loading is True

    def test_page_pointer(self):
        self.store.increment_page()
        self.store.increment_page()
        assert self.store.state.current_page == 2

        self.store.reset_current_page()
        assert self.store.state.current_page == 0

    def test_reset_messages_keeps_flags(self):
        self.store.add_messages(["a"])
        self.store.set_loading(True)
        self.store.set_has_more(False)

        self.store.reset_messages()

        state = self.store.state
        assert state.messages == ()
        assert state.is_loading is True
        assert state.has_more is False
        assert len(self.resets.calls) == 1

    def test_initial_state_can_be_injected(self):
        store = PaginationStore(PaginationState(messages=("seed",), current_page=4))

        assert store.state.messages == ("seed",)
        assert store.state.current_page == 4

    def test_disconnect(self):
        self.store.disconnect(self.changes)
        self.store.set_has_more(False)

        assert self.changes.calls == []


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
