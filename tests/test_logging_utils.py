"""
Test logging helpers.
"""

import logging

import pytest

from chat_paginator.utils.logging_utils import AutoTracebackFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(level, msg="page request failed"):
    return logging.LogRecord("chat_paginator.test", level, __file__, 1, msg, None, None)


class TestAutoTracebackFormatter:
    """Tests for AutoTracebackFormatter."""

    def test_error_inside_except_gets_traceback(self):
        formatter = AutoTracebackFormatter("%(levelname)s %(message)s")
        try:
            raise ValueError("boom")
        except ValueError:
            output = formatter.format(make_record(logging.ERROR))

        assert "Traceback" in output
        assert "ValueError: boom" in output

    def test_warning_inside_except_has_no_traceback(self):
        formatter = AutoTracebackFormatter("%(levelname)s %(message)s")
        try:
            raise ValueError("boom")
        except ValueError:
            output = formatter.format(make_record(logging.WARNING))

        assert output == "WARNING page request failed"

    def test_error_outside_except_is_plain(self):
        formatter = AutoTracebackFormatter("%(message)s")

        assert formatter.format(make_record(logging.ERROR)) == "page request failed"


def test_setup_logging_writes_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "paginator.log"

    root = setup_logging(logging.DEBUG, log_file=str(log_file))
    logging.getLogger("chat_paginator.test").debug("loaded page 3")
    for handler in root.handlers:
        handler.flush()

    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert "loaded page 3" in log_file.read_text(encoding="utf-8")


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
