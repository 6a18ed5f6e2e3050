"""QListView used by the chat pagination widget.

Scrolling is per pixel so variable-height bubbles move smoothly, and
viewport scroll/resize events are re-emitted as signals for the widget that
owns the view.
"""

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QResizeEvent
from PySide6.QtWidgets import QAbstractItemView, QListView


class ChatPaginationView(QListView):
    """List view for chat messages with variable-height rows.

    Signals:
        viewport_scrolled: Emitted when the viewport is scrolled
        viewport_resized: Emitted when the viewport is resized
    """

    viewport_scrolled = Signal()
    viewport_resized = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setUniformItemSizes(False)
        self.setVerticalScrollMode(QAbstractItemView.ScrollPerPixel)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAsNeeded)
        self.setSelectionMode(QAbstractItemView.NoSelection)
        self.setFocusPolicy(Qt.NoFocus)
        self.setResizeMode(QListView.Adjust)

    def scrollContentsBy(self, dx: int, dy: int) -> None:
        super().scrollContentsBy(dx, dy)
        self.viewport_scrolled.emit()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self.viewport_resized.emit()
