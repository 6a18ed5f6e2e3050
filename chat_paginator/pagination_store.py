"""
Pagination Store Module

This module provides PaginationStore, the reactive container that owns the
current PaginationState and notifies observers through blinker signals
whenever the snapshot is replaced.

Instances are created by the caller and passed to the PaginationController
and the Qt model; there is no process-wide registry.
"""

import logging
from typing import Generic, Iterable, Optional

import blinker

from chat_paginator.pagination_state import M, PaginationState

logger = logging.getLogger(__name__)

# Insert positions reported by messages_inserted
POSITION_START = "start"
POSITION_END = "end"


class PaginationStore(Generic[M]):
    """
    Holds the current PaginationState and broadcasts replacements.

    Signals (blinker, one set per store):
        state_changed: sent with ``state`` and ``previous`` on every replacement
        messages_inserted: sent with ``position`` ("start"/"end") and ``count``
            after messages were prepended or appended
        messages_reset: sent after the message sequence was emptied
    """

    def __init__(self, initial_state: Optional[PaginationState[M]] = None):
        self._state: PaginationState[M] = initial_state or PaginationState.initial()
        self.state_changed = blinker.Signal()
        self.messages_inserted = blinker.Signal()
        self.messages_reset = blinker.Signal()

    @property
    def state(self) -> PaginationState[M]:
        return self._state

    def set_state(self, new_state: PaginationState[M]) -> None:
        """
        Replace the current snapshot and notify observers.

        Args:
            new_state: The snapshot to install
        """
        previous = self._state
        self._state = new_state
        self.state_changed.send(self, state=new_state, previous=previous)

    def connect(self, receiver, weak: bool = True):
        """
        Connect a receiver to the state_changed signal.

        Args:
            receiver: Callable taking (sender, state, previous)
            weak: Whether to use a weak reference (default True)
        """
        self.state_changed.connect(receiver, weak=weak)

    def disconnect(self, receiver):
        """Disconnect a receiver from the state_changed signal."""
        self.state_changed.disconnect(receiver)

    # ─── Notifier operations ───────────────────────────────────────────

    def add_messages(self, new_messages: Iterable[M], prepend: bool = False) -> None:
        """
        Splice messages into the sequence.

        Args:
            new_messages: Messages in chronological order
            prepend: True to insert before the current messages (older history),
                False to append after them (newer messages)
        """
        batch = tuple(new_messages)
        if not batch:
            return
        current = self._state.messages
        updated = batch + current if prepend else current + batch
        self.set_state(self._state.with_changes(messages=updated))
        position = POSITION_START if prepend else POSITION_END
        logger.debug(f"Inserted {len(batch)} messages at {position} (total: {len(updated)})")
        self.messages_inserted.send(self, position=position, count=len(batch))

    def add_message(self, message: M, prepend: bool = False) -> None:
        """Insert a single message at the start or the end."""
        self.add_messages((message,), prepend=prepend)

    def set_loading(self, value: bool) -> None:
        self.set_state(self._state.with_changes(is_loading=value))

    def set_has_more(self, value: bool) -> None:
        if not value and self._state.has_more:
            logger.debug("No more pages will be requested")
        self.set_state(self._state.with_changes(has_more=value))

    def increment_page(self) -> None:
        """Move the page pointer forward by one."""
        self.set_state(self._state.with_changes(current_page=self._state.current_page + 1))

    def reset_current_page(self) -> None:
        self.set_state(self._state.with_changes(current_page=0))

    def reset_messages(self) -> None:
        """Empty the message sequence; the loading and has-more flags are kept."""
        self.set_state(self._state.with_changes(messages=()))
        self.messages_reset.send(self)
