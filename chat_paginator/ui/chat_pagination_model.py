"""Qt list model mirroring a PaginationStore.

The model keeps its own reference to the message tuple. On every snapshot
replacement it compares the new tuple with the one it holds: a prepend or
append becomes a row insertion, anything else resets the model.
"""
import logging
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from PySide6.QtCore import QAbstractListModel, QByteArray, QModelIndex, QObject, Qt

from chat_paginator.pagination_state import PaginationState
from chat_paginator.pagination_store import PaginationStore

logger = logging.getLogger(__name__)


class ChatPaginationModel(QAbstractListModel):
    """List model over the messages held by a PaginationStore.

    Roles:
    - Qt.DisplayRole: str(message)
    - MessageRole: the message object
    - KeyRole: the message key (item_key(message), or the row as a string)
    """

    MessageRole = Qt.UserRole + 1
    KeyRole = Qt.UserRole + 2

    def __init__(
        self,
        store: PaginationStore,
        item_key: Optional[Callable[[Any], str]] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._store = store
        self._item_key = item_key
        self._messages: Tuple[Any, ...] = store.state.messages
        self._key_to_row: Dict[str, int] = {}
        self._rebuild_key_index()

        store.state_changed.connect(self._on_state_changed, sender=store)

    def detach(self) -> None:
        """Stop following the store."""
        self._store.state_changed.disconnect(self._on_state_changed, sender=self._store)

    def roleNames(self):
        return {
            Qt.DisplayRole: QByteArray(b"display"),
            self.MessageRole: QByteArray(b"message"),
            self.KeyRole: QByteArray(b"key"),
        }

    def rowCount(self, parent: QModelIndex = None) -> int:
        if parent is None:
            parent = QModelIndex()
        if parent.isValid():
            return 0
        return len(self._messages)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if not index.isValid():
            return None
        row = index.row()
        if row >= len(self._messages):
            return None

        if role == self.MessageRole:
            return self._messages[row]
        if role == self.KeyRole:
            return self.key_at(row)
        if role == Qt.DisplayRole:
            return str(self._messages[row])
        return None

    def message_at(self, row: int) -> Any:
        if 0 <= row < len(self._messages):
            return self._messages[row]
        return None

    def key_at(self, row: int) -> Optional[str]:
        if not 0 <= row < len(self._messages):
            return None
        if self._item_key is None:
            return str(row)
        return self._item_key(self._messages[row])

    def row_for_key(self, key: str) -> Optional[int]:
        return self._key_to_row.get(key)

    def _rebuild_key_index(self) -> None:
        self._key_to_row.clear()
        if self._item_key is None:
            return
        for row, message in enumerate(self._messages):
            self._key_to_row[self._item_key(message)] = row

    def _on_state_changed(self, sender, state: PaginationState, previous: PaginationState) -> None:
        messages = state.messages
        if messages is self._messages:
            return
        old = self._messages
        added = len(messages) - len(old)
        if added > 0 and old and _same_items(messages[added:], old):
            self._insert_rows(0, added, messages)
        elif added > 0 and _same_items(messages[:len(old)], old):
            self._insert_rows(len(old), added, messages)
        else:
            logger.debug(f"Message sequence replaced ({len(old)} -> {len(messages)} rows)")
            self.beginResetModel()
            self._messages = messages
            self._rebuild_key_index()
            self.endResetModel()

    def _insert_rows(self, start: int, count: int, messages: Tuple[Any, ...]) -> None:
        self.beginInsertRows(QModelIndex(), start, start + count - 1)
        self._messages = messages
        self._rebuild_key_index()
        self.endInsertRows()


def _same_items(left: Sequence[Any], right: Sequence[Any]) -> bool:
    return len(left) == len(right) and all(a is b for a, b in zip(left, right))
