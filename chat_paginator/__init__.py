"""Paginated chat message lists for PySide6.

The pagination core (state, store, controller) has no Qt dependency; the
widgets live in chat_paginator.ui.
"""

from chat_paginator.config import PaginationConfig, load_config
from chat_paginator.exceptions import ConfigError, PaginatorError
from chat_paginator.pagination_controller import PaginationController
from chat_paginator.pagination_state import PaginationState
from chat_paginator.pagination_store import PaginationStore

__version__ = "0.1.0"

__all__ = [
    "PaginationConfig",
    "load_config",
    "ConfigError",
    "PaginatorError",
    "PaginationController",
    "PaginationState",
    "PaginationStore",
]
