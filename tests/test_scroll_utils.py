"""
Test scroll math helpers.
"""

import pytest

from chat_paginator.utils.scroll_utils import (
    MAX_DURATION_MS, MIN_DURATION_MS, clamp, scroll_duration_ms, should_animate, trigger_threshold,
)


def test_clamp():
    assert clamp(5, 0, 10) == 5
    assert clamp(-1, 0, 10) == 0
    assert clamp(11, 0, 10) == 10


def test_duration_scales_with_distance():
    assert scroll_duration_ms(1000) == 600
    assert scroll_duration_ms(1500) == 900


def test_duration_is_clamped():
    assert scroll_duration_ms(0) == MIN_DURATION_MS
    assert scroll_duration_ms(100) == MIN_DURATION_MS
    assert scroll_duration_ms(10_000) == MAX_DURATION_MS
    assert scroll_duration_ms(-1000) == 600


def test_should_animate():
    assert should_animate(501) is True
    assert should_animate(500) is False
    assert should_animate(5000, animated=False) is False


def test_trigger_threshold_respects_bounds():
    assert trigger_threshold(0, 200.0, 800.0) == 600.0
    assert trigger_threshold(0, 200.0, 500.0) == 500.0
    assert trigger_threshold(8, 200.0, 800.0) == 200.0
    assert trigger_threshold(4, 200.0, 800.0) == 400.0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
