"""
Test PaginationConfig loading and validation.
"""

import logging

import pytest

from chat_paginator.config import PaginationConfig, load_config, save_config
from chat_paginator.exceptions import ConfigError


class TestPaginationConfig:
    """Tests for PaginationConfig."""

    def test_defaults(self):
        config = PaginationConfig()

        assert config.page_size == 50
        assert config.preload_offset is None
        assert config.page_min_trigger_offset == 200.0
        assert config.page_max_trigger_offset == 800.0
        assert config.clear_loading_on_error is False
        assert config.keep_position is True

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "missing.yml"))

        assert config == PaginationConfig()

    def test_load_nested_section(self, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("pagination:\n  page_size: 25\n  preload_offset: 4\n", encoding="utf-8")

        config = load_config(str(path))

        assert config.page_size == 25
        assert config.preload_offset == 4

    def test_load_top_level(self, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("show_loading_indicator: true\nscroll_throttle_ms: 120\n", encoding="utf-8")

        config = load_config(str(path))

        assert config.show_loading_indicator is True
        assert config.scroll_throttle_ms == 120

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("", encoding="utf-8")

        assert load_config(str(path)) == PaginationConfig()

    def test_unknown_keys_are_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = PaginationConfig.from_dict({"page_size": 10, "theme": "dark"})

        assert config.page_size == 10
        assert "theme" in caplog.text

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("pagination: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_non_mapping(self):
        with pytest.raises(ConfigError):
            PaginationConfig.from_dict(["page_size", 10])

    def test_invalid_page_size(self):
        with pytest.raises(ConfigError):
            PaginationConfig.from_dict({"page_size": 0})

    def test_boolean_page_size_rejected(self):
        with pytest.raises(ConfigError):
            PaginationConfig.from_dict({"page_size": True})

    def test_boolean_preload_offset_rejected(self):
        with pytest.raises(ConfigError):
            PaginationConfig(preload_offset=False).validate()

    def test_min_trigger_above_max(self):
        with pytest.raises(ConfigError):
            PaginationConfig.from_dict({"page_min_trigger_offset": 900.0})

    def test_negative_throttle(self):
        with pytest.raises(ConfigError):
            PaginationConfig(scroll_throttle_ms=-5).validate()

    def test_save_then_load(self, tmp_path):
        path = str(tmp_path / "settings.yml")
        save_config(path, PaginationConfig(page_size=30, keep_position=False))

        config = load_config(path)

        assert config.page_size == 30
        assert config.keep_position is False


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
