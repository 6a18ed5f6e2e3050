"""
Logging helpers for chat_paginator applications.

AutoTracebackFormatter attaches the active exception's traceback to ERROR and
CRITICAL records even when the call site did not pass exc_info.
"""
import logging
import sys
import traceback
from typing import List, Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'


class AutoTracebackFormatter(logging.Formatter):
    """
    Formatter that adds the in-flight exception to ERROR/CRITICAL records.

    Usage:
        formatter = AutoTracebackFormatter(DEFAULT_FORMAT)
        handler.setFormatter(formatter)
    """

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        style: str = '%',
        min_level: int = logging.ERROR,
    ):
        """
        Args:
            fmt: Log message format string
            datefmt: Date format string
            style: Formatter style (%, { or $)
            min_level: Lowest level that receives an automatic traceback
        """
        super().__init__(fmt, datefmt, style)
        self.min_level = min_level

    def format(self, record: logging.LogRecord) -> str:
        exc_info = sys.exc_info()
        if (
            record.levelno >= self.min_level
            and record.exc_info is None
            and exc_info[0] is not None
        ):
            record.exc_info = exc_info
            record.exc_text = ''.join(traceback.format_exception(*exc_info))
        return super().format(record)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger with console and optional file output.

    Existing root handlers are replaced.

    Args:
        level: Level for the root logger and its handlers
        log_file: Optional path of a UTF-8 log file
        fmt: Format string (defaults to DEFAULT_FORMAT)

    Returns:
        The configured root logger
    """
    formatter = AutoTracebackFormatter(fmt or DEFAULT_FORMAT)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    return root_logger


def log_uncaught_exception(exc_type, exc_value, exc_traceback):
    """sys.excepthook replacement that logs crashes at CRITICAL before the default hook."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger = logging.getLogger("chat_paginator")
    logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))
    sys.__excepthook__(exc_type, exc_value, exc_traceback)
