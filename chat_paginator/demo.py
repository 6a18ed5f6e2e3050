"""Demo window for chat_paginator.

Pages of generated messages are prepended as the user scrolls up; typed
messages are appended and scrolled into view.
"""
import asyncio
import logging
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication, QFrame, QHBoxLayout, QLabel, QLineEdit, QMainWindow, QPushButton,
    QVBoxLayout, QWidget,
)
from qasync import QEventLoop

from chat_paginator.config import PaginationConfig, load_config
from chat_paginator.pagination_controller import PaginationController
from chat_paginator.pagination_store import PaginationStore
from chat_paginator.ui import ChatPaginationWidget
from chat_paginator.utils.logging_utils import log_uncaught_exception, setup_logging

logger = logging.getLogger(__name__)

FAKE_LATENCY_S = 2.0


@dataclass(frozen=True)
class DemoMessage:
    id: str
    text: str
    user: bool
    created_at: datetime = field(default_factory=datetime.now)


class BubbleWidget(QWidget):
    """A rounded chat bubble aligned to the sender's side."""

    USER_COLOR = "#e8f5e9"
    PEER_COLOR = "#fff3e0"

    def __init__(self, text: str, is_user: bool, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 8)

        bubble = QFrame(self)
        bubble.setObjectName("bubble")
        bubble.setStyleSheet(
            f"#bubble {{ background-color: {self.USER_COLOR if is_user else self.PEER_COLOR};"
            " border-radius: 12px; }"
        )
        bubble_layout = QVBoxLayout(bubble)
        bubble_layout.setContentsMargins(16, 16, 16, 16)

        label = QLabel(text, bubble)
        label.setWordWrap(True)
        label.setStyleSheet("color: #202020;")
        bubble_layout.addWidget(label)

        if is_user:
            layout.addStretch(1)
            layout.addWidget(bubble, 0, Qt.AlignRight)
        else:
            layout.addWidget(bubble, 0, Qt.AlignLeft)
            layout.addStretch(1)


class ChatDemoWindow(QMainWindow):
    """Chat window backed by a fake paged history."""

    def __init__(self, config: Optional[PaginationConfig] = None):
        super().__init__()
        self.setWindowTitle("Chat Pagination")
        self.resize(480, 720)

        config = config or PaginationConfig(preload_offset=5, show_loading_indicator=True)
        self.controller = PaginationController(
            on_page_request=self._fetch_page,
            store=PaginationStore(),
            item_key=lambda message: message.id,
            config=config,
        )

        central = QWidget(self)
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)

        self.chat_view = ChatPaginationWidget(
            self.controller,
            item_builder=lambda index, message: BubbleWidget(message.text, message.user),
            parent=central,
        )
        layout.addWidget(self.chat_view, 1)

        input_row = QHBoxLayout()
        input_row.setContentsMargins(12, 8, 12, 8)
        self.input = QLineEdit(central)
        self.input.setPlaceholderText("Type a message...")
        self.input.returnPressed.connect(self._send_message)
        input_row.addWidget(self.input, 1)

        send_button = QPushButton("Send", central)
        send_button.clicked.connect(self._send_message)
        input_row.addWidget(send_button)
        layout.addLayout(input_row)

        self.controller.schedule_first_page()

    async def _fetch_page(self, page_index: int, page_size: int) -> None:
        await asyncio.sleep(FAKE_LATENCY_S)
        messages = [
            DemoMessage(
                id=f"msg-{page_index}-{i}",
                text=f"Message {page_index + 1}-{page_size - i}",
                user=i % 2 == 0,
            )
            for i in range(page_size)
        ]
        logger.info(f"Loaded page {page_index} with {len(messages)} messages")
        self.controller.add_messages(messages, prepend=True)

    def _send_message(self) -> None:
        text = self.input.text().strip()
        if not text:
            return
        message = DemoMessage(id=f"local-{int(time.time() * 1000)}", text=text, user=True)
        self.controller.add_message(message)
        self.input.clear()

    def closeEvent(self, event):
        self.chat_view.dispose()
        super().closeEvent(event)


def run(config_path: Optional[str] = None) -> int:
    """Start the demo application and block until it exits."""
    setup_logging(logging.INFO)
    sys.excepthook = log_uncaught_exception

    config = load_config(config_path) if config_path else None

    app = QApplication.instance() or QApplication(sys.argv)
    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)

    window = ChatDemoWindow(config)
    window.show()
    logger.info("Chat pagination demo started")

    with loop:
        loop.run_forever()
    logger.info("Chat pagination demo stopped")
    return 0
