"""Qt presentation layer for paginated chat lists.

Modules:
- chat_pagination_model: QAbstractListModel following a PaginationStore
- chat_pagination_view: per-pixel QListView with viewport signals
- chat_pagination_delegate: size-hint delegate for widget-rendered rows
- chat_pagination_widget: composite widget with loading/empty states and
  scroll-triggered page requests
"""

from chat_paginator.ui.chat_pagination_model import ChatPaginationModel
from chat_paginator.ui.chat_pagination_view import ChatPaginationView
from chat_paginator.ui.chat_pagination_delegate import ChatPaginationDelegate
from chat_paginator.ui.chat_pagination_widget import ChatPaginationWidget, FirstItemAlign

__all__ = [
    "ChatPaginationModel",
    "ChatPaginationView",
    "ChatPaginationDelegate",
    "ChatPaginationWidget",
    "FirstItemAlign",
]
