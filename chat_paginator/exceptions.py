"""Exceptions raised by chat_paginator."""


class PaginatorError(Exception):
    """Base class for all chat_paginator errors."""


class ConfigError(PaginatorError):
    """Raised when pagination settings are missing, malformed or out of range."""
