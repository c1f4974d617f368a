"""
Reader Configuration
====================

Default decode settings used by the command-line tool. Configuration
can come from:
- Default values (defined here)
- Environment variables

Environment variables (all optional):
    IHEX_MEMORY_SIZE: Memory image size in bytes
    IHEX_START_ADDRESS: Absolute address of the first cell
    IHEX_FILL_VALUE: Value of unwritten cells
    IHEX_START_SEGMENT_MODE: "standard" or "legacy"

Numeric values accept decimal or 0x-prefixed hexadecimal.
"""

from dataclasses import dataclass
from typing import Optional
import os

from ihex_reader.reader import StartSegmentMode


def _parse_int(text: str) -> Optional[int]:
    try:
        return int(text, 0)
    except ValueError:
        return None


@dataclass
class ReaderConfig:
    """
    Decode settings.

    Attributes:
        memory_size: Image size in bytes (None = must be given explicitly)
        start_address: Absolute address of cell 0 (default: 0)
        fill_value: Value of unwritten cells (default: 0xFF, erased EPROM)
        start_segment_mode: CS/IP composition rule (default: STANDARD)
    """
    memory_size: Optional[int] = None
    start_address: int = 0
    fill_value: int = 0xFF
    start_segment_mode: StartSegmentMode = StartSegmentMode.STANDARD

    @classmethod
    def from_env(cls) -> "ReaderConfig":
        """
        Create ReaderConfig from environment variables.

        Invalid values are ignored and the default is kept.

        Returns:
            ReaderConfig with values from environment variables
        """
        config = cls()

        if memory_size := os.environ.get("IHEX_MEMORY_SIZE"):
            value = _parse_int(memory_size)
            if value is not None and value > 0:
                config.memory_size = value

        if start_address := os.environ.get("IHEX_START_ADDRESS"):
            value = _parse_int(start_address)
            if value is not None and value >= 0:
                config.start_address = value

        if fill_value := os.environ.get("IHEX_FILL_VALUE"):
            value = _parse_int(fill_value)
            if value is not None and 0 <= value <= 0xFF:
                config.fill_value = value

        if mode := os.environ.get("IHEX_START_SEGMENT_MODE"):
            try:
                config.start_segment_mode = StartSegmentMode(mode.lower())
            except ValueError:
                pass  # Ignore invalid values

        return config


# Global default configuration (can be overridden in tests)
_default_config: Optional[ReaderConfig] = None


def get_default_config() -> ReaderConfig:
    """
    Get the default reader configuration.

    Creates from environment variables on first access.
    Can be overridden by calling set_default_config().
    """
    global _default_config
    if _default_config is None:
        _default_config = ReaderConfig.from_env()
    return _default_config


def set_default_config(config: Optional[ReaderConfig]) -> None:
    """Set (or with None, reset) the default reader configuration."""
    global _default_config
    _default_config = config
