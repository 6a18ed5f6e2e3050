"""Immutable pagination snapshot.

This module contains the data structure shared by the store, the controller
and the Qt model:
- PaginationState: frozen snapshot of messages and paging flags
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Generic, Tuple, TypeVar

M = TypeVar("M")


@dataclass(frozen=True)
class PaginationState(Generic[M]):
    """Snapshot of the chat pagination progress.

    A new snapshot replaces the old one on every change; instances are never
    mutated.

    Attributes:
        messages: Loaded messages in chronological order
        is_loading: Whether a page request is in flight
        has_more: Whether further pages may be requested
        current_page: Zero-based index of the last advanced page
    """
    messages: Tuple[M, ...] = ()
    is_loading: bool = False
    has_more: bool = True
    current_page: int = 0

    def __post_init__(self):
        if not isinstance(self.messages, tuple):
            object.__setattr__(self, "messages", tuple(self.messages))

    @classmethod
    def initial(cls) -> "PaginationState[M]":
        """Return the empty snapshot used before the first page loads."""
        return cls()

    def with_changes(self, **changes: Any) -> "PaginationState[M]":
        """Copy this snapshot, overriding only the given fields.

        Args:
            **changes: Any of messages, is_loading, has_more, current_page

        Returns:
            A new PaginationState

        Raises:
            TypeError: If a field name is unknown
        """
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise TypeError(f"Unknown PaginationState fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    @property
    def is_empty(self) -> bool:
        return not self.messages

    @property
    def last_index(self) -> int:
        return len(self.messages) - 1
