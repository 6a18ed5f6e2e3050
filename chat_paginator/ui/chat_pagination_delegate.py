"""Delegate for chat pagination list rows.

Rows are rendered by index widgets built from the caller's item builder, so
the delegate only answers size queries, forwarding them to the owning widget.
"""

from typing import TYPE_CHECKING

from PySide6.QtCore import QModelIndex, QSize
from PySide6.QtGui import QPainter
from PySide6.QtWidgets import QStyledItemDelegate, QStyleOptionViewItem

if TYPE_CHECKING:
    from chat_paginator.ui.chat_pagination_widget import ChatPaginationWidget


class ChatPaginationDelegate(QStyledItemDelegate):
    """Forwards size hints to ChatPaginationWidget.item_size_hint."""

    def __init__(self, owner: "ChatPaginationWidget", parent=None):
        """
        Args:
            owner: The widget that builds and measures row widgets
            parent: Parent QObject for memory management
        """
        super().__init__(parent)
        self._owner = owner

    def sizeHint(self, option: QStyleOptionViewItem, index: QModelIndex) -> QSize:
        return self._owner.item_size_hint(option, index)

    def paint(self, painter: QPainter, option: QStyleOptionViewItem, index: QModelIndex) -> None:
        # Rows are drawn by their index widgets
        return
