"""
Pagination Settings Module

Provides PaginationConfig, the tunable values for the controller and the
chat list widget, with optional YAML-based storage.
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

import yaml

from chat_paginator.exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class PaginationConfig:
    """Settings for paginated chat lists.

    Attributes:
        page_size: Messages requested per page
        preload_offset: Page count after which requests stop (None = unlimited)
        page_min_trigger_offset: Lower bound of the scroll trigger threshold (px)
        page_max_trigger_offset: Upper bound of the scroll trigger threshold (px)
        scroll_throttle_ms: Delay before a scroll event is evaluated
        clear_loading_on_error: Release the loading flag when a fetch raises
        keep_position: Keep visible content still when older messages are prepended
        disable_cache_items: Release item widgets once they leave the viewport
        show_loading_indicator: Show the default busy indicator while loading
    """
    page_size: int = 50
    preload_offset: Optional[int] = None
    page_min_trigger_offset: float = 200.0
    page_max_trigger_offset: float = 800.0
    scroll_throttle_ms: int = 50
    clear_loading_on_error: bool = False
    keep_position: bool = True
    disable_cache_items: bool = True
    show_loading_indicator: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PaginationConfig":
        """Build a config from a mapping, ignoring unknown keys.

        Args:
            data: Mapping of field names to values (None gives the defaults)

        Raises:
            ConfigError: If the values fail validation
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Pagination settings must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                logger.warning(f"Ignoring unknown pagination setting: {key}")

        config = cls(**{key: value for key, value in data.items() if key in known})
        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigError: On the first invalid value
        """
        if not _is_int(self.page_size) or self.page_size <= 0:
            raise ConfigError(f"page_size must be a positive integer, got {self.page_size!r}")
        if self.preload_offset is not None and not _is_int(self.preload_offset):
            raise ConfigError(f"preload_offset must be an integer or null, got {self.preload_offset!r}")
        if self.page_min_trigger_offset > self.page_max_trigger_offset:
            raise ConfigError(
                f"page_min_trigger_offset ({self.page_min_trigger_offset}) exceeds "
                f"page_max_trigger_offset ({self.page_max_trigger_offset})"
            )
        if self.scroll_throttle_ms < 0:
            raise ConfigError(f"scroll_throttle_ms must not be negative, got {self.scroll_throttle_ms}")


def load_config(path: str) -> PaginationConfig:
    """
    Load pagination settings from a YAML file.

    The file may hold the settings at the top level or under a
    ``pagination`` key. A missing file yields the defaults.

    Args:
        path: Path to the YAML file

    Returns:
        The validated PaginationConfig

    Raises:
        ConfigError: If the file cannot be read or parsed, or fails validation
    """
    if not os.path.exists(path):
        logger.info(f"Pagination settings file not found, using defaults: {path}")
        return PaginationConfig()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load pagination settings from {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("pagination"), dict):
        data = data["pagination"]
    return PaginationConfig.from_dict(data)


def save_config(path: str, config: PaginationConfig) -> None:
    """Write settings to a YAML file under a ``pagination`` key."""
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump({"pagination": config.to_dict()}, f, default_flow_style=False, allow_unicode=True)


def _is_int(value) -> bool:
    # bool is an int subclass, but True is not a page count
    return isinstance(value, int) and not isinstance(value, bool)
