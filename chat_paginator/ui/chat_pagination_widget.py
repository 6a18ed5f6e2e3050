"""Scrollable chat list that pages in messages near the top edge.

ChatPaginationWidget composes a ChatPaginationModel and ChatPaginationView,
shows a loading indicator or an empty placeholder as the store changes, and
asks its PaginationController for the next page whenever the scroll offset
drops under the controller's trigger threshold.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Set, Tuple

from PySide6.QtCore import (
    QEasingCurve, QModelIndex, QPoint, QPropertyAnimation, QSize, Qt, QTimer, Signal,
)
from PySide6.QtWidgets import (
    QAbstractItemView, QLabel, QProgressBar, QStackedWidget, QStyleOptionViewItem,
    QVBoxLayout, QWidget,
)
from qasync import asyncSlot

from chat_paginator.config import PaginationConfig
from chat_paginator.pagination_controller import PaginationController
from chat_paginator.pagination_state import PaginationState
from chat_paginator.ui.chat_pagination_delegate import ChatPaginationDelegate
from chat_paginator.ui.chat_pagination_model import ChatPaginationModel
from chat_paginator.ui.chat_pagination_view import ChatPaginationView

logger = logging.getLogger(__name__)

ItemBuilder = Callable[[int, Any], QWidget]
WidgetBuilder = Callable[[], QWidget]


class FirstItemAlign(Enum):
    """Where the initially shown row is placed in the viewport."""
    START = "start"
    END = "end"


class ChatPaginationWidget(QWidget):
    """Chat message list with automatic page loading.

    Row widgets are built lazily for visible rows with ``item_builder`` and
    measured through ChatPaginationDelegate. The widget binds itself to the
    controller as its scroll target, so controller.scroll_to_bottom() and
    controller.schedule_first_page() run after the next render pass.

    Signals:
        page_request_failed: Emitted with the error message when a
            scroll-triggered page request raises
    """

    page_request_failed = Signal(str)

    EMPTY_TEXT = "No messages yet"
    VISIBLE_REFRESH_DELAY_MS = 8

    def __init__(
        self,
        controller: PaginationController,
        item_builder: ItemBuilder,
        loading_builder: Optional[WidgetBuilder] = None,
        empty_builder: Optional[WidgetBuilder] = None,
        is_permanent: Optional[Callable[[str], bool]] = None,
        first_item_align: FirstItemAlign = FirstItemAlign.START,
        page_min_trigger_offset: Optional[float] = None,
        page_max_trigger_offset: Optional[float] = None,
        disable_cache_items: Optional[bool] = None,
        keep_position: Optional[bool] = None,
        show_loading_indicator: Optional[bool] = None,
        padding: int = 16,
        scroll_throttle_ms: Optional[int] = None,
        parent: Optional[QWidget] = None,
    ):
        """
        Args:
            controller: Controller that owns pagination state and scrolling
            item_builder: Builds the widget for (row, message)
            loading_builder: Builds a custom loading indicator
            empty_builder: Builds a custom placeholder for an empty list
            is_permanent: Returns True for keys whose widgets are never released
            first_item_align: Placement of the initially shown row
            page_min_trigger_offset: Lower bound of the trigger threshold (px)
            page_max_trigger_offset: Upper bound of the trigger threshold (px)
            disable_cache_items: Release row widgets once they scroll out of view
            keep_position: Keep visible content still when rows are prepended
            show_loading_indicator: Show the default busy bar while loading
            padding: Outer margin around the list (px)
            scroll_throttle_ms: Delay before a scroll event is evaluated
            parent: Parent widget

        Unset options fall back to the controller's PaginationConfig.
        """
        super().__init__(parent)
        config: PaginationConfig = controller.config

        self._controller = controller
        self._item_builder = item_builder
        self._loading_builder = loading_builder
        self._empty_builder = empty_builder
        self._is_permanent = is_permanent
        self._first_item_align = first_item_align
        self._min_trigger = _pick(page_min_trigger_offset, config.page_min_trigger_offset)
        self._max_trigger = _pick(page_max_trigger_offset, config.page_max_trigger_offset)
        self._disable_cache_items = _pick(disable_cache_items, config.disable_cache_items)
        self._keep_position = _pick(keep_position, config.keep_position)
        self._show_loading_indicator = _pick(show_loading_indicator, config.show_loading_indicator)
        self._padding = padding

        self._model = ChatPaginationModel(controller.store, controller.item_key, self)
        self._delegate = ChatPaginationDelegate(self, self)

        # Rows that currently carry an index widget
        self._attached_rows: Set[int] = set()
        self._size_hint_cache: Dict[str, QSize] = {}
        self._initial_positioned = False
        self._pending_prepend: Optional[Tuple[int, int]] = None  # (old_max, old_value)
        self._pending_scroll_value: Optional[int] = None
        self._scroll_animation: Optional[QPropertyAnimation] = None

        self._scroll_throttle_timer = QTimer(self)
        self._scroll_throttle_timer.setSingleShot(True)
        self._scroll_throttle_timer.setInterval(_pick(scroll_throttle_ms, config.scroll_throttle_ms))
        self._scroll_throttle_timer.timeout.connect(self._on_scroll_throttled)

        self._visible_refresh_timer = QTimer(self)
        self._visible_refresh_timer.setSingleShot(True)
        self._visible_refresh_timer.timeout.connect(self._refresh_visible_widgets)

        self._setup_ui()

        controller.store.connect(self._on_state_changed)
        controller.attach_view(self, post_frame=lambda callback: QTimer.singleShot(0, callback))
        self._apply_state(controller.state)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(self._padding, self._padding, self._padding, self._padding)
        layout.setSpacing(0)

        if self._loading_builder is not None:
            self.loading_indicator = self._loading_builder()
        else:
            bar = QProgressBar(self)
            bar.setRange(0, 0)
            bar.setTextVisible(False)
            bar.setFixedHeight(4)
            self.loading_indicator = bar
        self.loading_indicator.setVisible(False)
        layout.addWidget(self.loading_indicator)

        self.stack = QStackedWidget(self)

        if self._empty_builder is not None:
            self.empty_widget = self._empty_builder()
        else:
            label = QLabel(self.EMPTY_TEXT)
            label.setAlignment(Qt.AlignCenter)
            self.empty_widget = label
        self.stack.addWidget(self.empty_widget)

        self.list_view = ChatPaginationView(self)
        self.list_view.setModel(self._model)
        self.list_view.setItemDelegate(self._delegate)
        self.list_view.setSpacing(4)
        self.stack.addWidget(self.list_view)
        layout.addWidget(self.stack)

        self.list_view.verticalScrollBar().valueChanged.connect(self._on_scroll_value_changed)
        self.list_view.viewport_scrolled.connect(self._schedule_visible_refresh)
        self.list_view.viewport_resized.connect(self._on_viewport_resized)

        self._model.rowsAboutToBeInserted.connect(self._on_rows_about_to_be_inserted)
        self._model.rowsInserted.connect(self._on_rows_inserted)
        self._model.modelReset.connect(self._on_model_reset)

    # ─── Public accessors ─────────────────────────────────────────────

    @property
    def controller(self) -> PaginationController:
        return self._controller

    @property
    def model(self) -> ChatPaginationModel:
        return self._model

    def is_showing_empty(self) -> bool:
        return self.stack.currentWidget() is self.empty_widget

    def is_showing_loading(self) -> bool:
        return not self.loading_indicator.isHidden()

    def dispose(self) -> None:
        """Detach from the controller and its store."""
        self._scroll_throttle_timer.stop()
        self._visible_refresh_timer.stop()
        self._stop_scroll_animation()
        self._controller.store.disconnect(self._on_state_changed)
        self._model.detach()
        self._controller.detach_view()

    # ─── Store updates ────────────────────────────────────────────────

    def _on_state_changed(self, sender, state: PaginationState, previous: PaginationState) -> None:
        self._apply_state(state)

    def _apply_state(self, state: PaginationState) -> None:
        if state.is_empty and not state.is_loading:
            self.stack.setCurrentWidget(self.empty_widget)
        else:
            self.stack.setCurrentWidget(self.list_view)

        show_loading = state.is_loading and (self._show_loading_indicator or self._loading_builder is not None)
        self.loading_indicator.setVisible(show_loading)

    def _on_rows_about_to_be_inserted(self, parent: QModelIndex, start: int, end: int) -> None:
        if start == 0 and self._model.rowCount() > 0 and self._keep_position:
            scrollbar = self.list_view.verticalScrollBar()
            self._pending_prepend = (scrollbar.maximum(), scrollbar.value())

    def _on_rows_inserted(self, parent: QModelIndex, start: int, end: int) -> None:
        count = end - start + 1
        self._attached_rows = {row + count if row >= start else row for row in self._attached_rows}
        if self._controller.item_key is None and start == 0:
            # Row-based keys shifted
            self._size_hint_cache.clear()

        if not self._initial_positioned:
            self._initial_positioned = True
            self._pending_prepend = None
            QTimer.singleShot(0, self._position_initial_row)
        elif self._pending_prepend is not None:
            old_max, old_value = self._pending_prepend
            self._pending_prepend = None
            QTimer.singleShot(0, lambda: self._restore_scroll_after_prepend(old_max, old_value))

        self._schedule_visible_refresh(immediate=True)

    def _on_model_reset(self) -> None:
        # Qt deletes index widgets on reset
        self._attached_rows.clear()
        self._size_hint_cache.clear()
        self._initial_positioned = False
        self._pending_prepend = None

    def _position_initial_row(self) -> None:
        row = self._controller.initial_index
        if row < 0 or row >= self._model.rowCount():
            return
        hint = (QAbstractItemView.PositionAtTop if self._first_item_align == FirstItemAlign.START
                else QAbstractItemView.PositionAtBottom)
        self.list_view.scrollTo(self._model.index(row, 0), hint)
        self._schedule_visible_refresh()

    def _restore_scroll_after_prepend(self, old_max: int, old_value: int) -> None:
        self.list_view.doItemsLayout()
        scrollbar = self.list_view.verticalScrollBar()
        delta = scrollbar.maximum() - old_max
        scrollbar.setValue(old_value + delta)
        self._schedule_visible_refresh()

    # ─── Row widgets ──────────────────────────────────────────────────

    def _build_item_widget(self, row: int) -> QWidget:
        return self._item_builder(row, self._model.message_at(row))

    def item_size_hint(self, option: QStyleOptionViewItem, index: QModelIndex) -> QSize:
        """Measure the row at index for the current viewport width."""
        row = index.row()
        width = max(1, self.list_view.viewport().width())
        key = self._model.key_at(row)

        cached = self._size_hint_cache.get(key)
        if cached is not None and cached.width() == width:
            return cached

        widget = self.list_view.indexWidget(index)
        transient = widget is None
        if transient:
            widget = self._build_item_widget(row)

        height = widget.heightForWidth(width) if widget.hasHeightForWidth() else -1
        if height < 0:
            height = widget.sizeHint().height()
        if transient:
            widget.deleteLater()

        size = QSize(width, max(1, height))
        if key is not None:
            self._size_hint_cache[key] = size
        return size

    def _visible_row_range(self) -> Optional[Tuple[int, int]]:
        row_count = self._model.rowCount()
        if row_count == 0:
            return None
        viewport = self.list_view.viewport()
        height = viewport.height()
        # visualRect flushes a pending layout before indexAt is used
        last_rect = self.list_view.visualRect(self._model.index(row_count - 1, 0))
        # Row rects are inset by the list spacing on every side
        x = viewport.width() // 2
        gap = self.list_view.spacing() * 2 + 1

        first_row = self._row_near(x, 0, 1, gap)
        if first_row is None:
            first_row = 0

        if last_rect.isValid() and last_rect.bottom() < height:
            last_row = row_count - 1
        else:
            last_row = self._row_near(x, max(0, height - 1), -1, gap)
            if last_row is None:
                last_row = first_row
        return first_row, max(first_row, last_row)

    def _row_near(self, x: int, y: int, step: int, span: int) -> Optional[int]:
        """Row under (x, y), looking up to span px further in the step direction."""
        for offset in range(span + 1):
            index = self.list_view.indexAt(QPoint(x, y + step * offset))
            if index.isValid():
                return index.row()
        return None

    def _schedule_visible_refresh(self, immediate: bool = False) -> None:
        self._visible_refresh_timer.start(0 if immediate else self.VISIBLE_REFRESH_DELAY_MS)

    def _refresh_visible_widgets(self) -> None:
        visible = self._visible_row_range()
        if visible is None:
            return
        first_row, last_row = visible
        visible_rows = set(range(first_row, last_row + 1))

        for row in visible_rows - self._attached_rows:
            index = self._model.index(row, 0)
            self.list_view.setIndexWidget(index, self._build_item_widget(row))
            self._attached_rows.add(row)

        if self._disable_cache_items:
            for row in self._attached_rows - visible_rows:
                key = self._model.key_at(row)
                if self._is_permanent is not None and key is not None and self._is_permanent(key):
                    continue
                # Replacing an index widget deletes the previous one
                self.list_view.setIndexWidget(self._model.index(row, 0), None)
                self._attached_rows.discard(row)

    def _on_viewport_resized(self) -> None:
        self._size_hint_cache.clear()
        self.list_view.doItemsLayout()
        self._schedule_visible_refresh()

    # ─── Scroll-triggered paging ──────────────────────────────────────

    def _on_scroll_value_changed(self, value: int) -> None:
        self._pending_scroll_value = value
        self._schedule_visible_refresh()
        self._scroll_throttle_timer.start()

    def should_request_next_page(self, offset: float) -> bool:
        if not self.has_content_dimensions():
            return False
        return self._controller.should_trigger(offset, self._min_trigger, self._max_trigger)

    @asyncSlot()
    async def _on_scroll_throttled(self):
        value = self._pending_scroll_value
        self._pending_scroll_value = None
        if value is None or not self.should_request_next_page(value):
            return
        try:
            await self._controller.request_next_page()
        except Exception as e:
            logger.error(f"Failed to load page {self._controller.current_page + 1}: {e}", exc_info=True)
            self.page_request_failed.emit(str(e))

    # ─── Scroll target used by PaginationController ───────────────────

    def has_content_dimensions(self) -> bool:
        return self._model.rowCount() > 0 and self.list_view.viewport().height() > 0

    def scroll_offset(self) -> int:
        return self.list_view.verticalScrollBar().value()

    def max_scroll_offset(self) -> int:
        return self.list_view.verticalScrollBar().maximum()

    def jump_to_index(self, index: int, align_bottom: bool = True) -> None:
        self._stop_scroll_animation()
        hint = QAbstractItemView.PositionAtBottom if align_bottom else QAbstractItemView.PositionAtTop
        self.list_view.scrollTo(self._model.index(index, 0), hint)

    def animate_to_index(self, index: int, duration_ms: int, align_bottom: bool = True) -> None:
        scrollbar = self.list_view.verticalScrollBar()
        target = self._scroll_value_for_row(index, align_bottom)
        self._stop_scroll_animation()

        animation = QPropertyAnimation(scrollbar, b"value", self)
        animation.setDuration(duration_ms)
        animation.setStartValue(scrollbar.value())
        animation.setEndValue(target)
        animation.setEasingCurve(QEasingCurve.InOutQuad)
        animation.start()
        self._scroll_animation = animation

    def _scroll_value_for_row(self, row: int, align_bottom: bool) -> int:
        scrollbar = self.list_view.verticalScrollBar()
        rect = self.list_view.visualRect(self._model.index(row, 0))
        if not rect.isValid():
            return scrollbar.maximum() if align_bottom else scrollbar.minimum()
        if align_bottom:
            target = scrollbar.value() + rect.bottom() - self.list_view.viewport().height() + 1
        else:
            target = scrollbar.value() + rect.top()
        return max(scrollbar.minimum(), min(scrollbar.maximum(), target))

    def _stop_scroll_animation(self) -> None:
        if self._scroll_animation is not None:
            self._scroll_animation.stop()
            self._scroll_animation = None


def _pick(value, default):
    return default if value is None else value
