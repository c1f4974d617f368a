"""
Reader Configuration Unit Tests
===============================

Tests for ReaderConfig defaults and environment overrides.
"""

import pytest

from ihex_reader.config import (
    ReaderConfig,
    get_default_config,
    set_default_config,
)
from ihex_reader.reader import StartSegmentMode


ENV_VARS = (
    "IHEX_MEMORY_SIZE",
    "IHEX_START_ADDRESS",
    "IHEX_FILL_VALUE",
    "IHEX_START_SEGMENT_MODE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without IHEX_* variables or a cached default."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


class TestReaderConfig:
    """Test ReaderConfig defaults and factory methods."""

    def test_defaults(self):
        config = ReaderConfig()
        assert config.memory_size is None
        assert config.start_address == 0
        assert config.fill_value == 0xFF
        assert config.start_segment_mode is StartSegmentMode.STANDARD

    def test_from_env_empty(self):
        assert ReaderConfig.from_env() == ReaderConfig()

    def test_from_env_decimal_and_hex(self, monkeypatch):
        monkeypatch.setenv("IHEX_MEMORY_SIZE", "65536")
        monkeypatch.setenv("IHEX_START_ADDRESS", "0x08000000")
        monkeypatch.setenv("IHEX_FILL_VALUE", "0x00")
        monkeypatch.setenv("IHEX_START_SEGMENT_MODE", "LEGACY")
        config = ReaderConfig.from_env()
        assert config.memory_size == 65536
        assert config.start_address == 0x08000000
        assert config.fill_value == 0
        assert config.start_segment_mode is StartSegmentMode.LEGACY

    @pytest.mark.parametrize("name, value", [
        ("IHEX_MEMORY_SIZE", "lots"),
        ("IHEX_MEMORY_SIZE", "0"),
        ("IHEX_START_ADDRESS", "-1"),
        ("IHEX_FILL_VALUE", "0x100"),
        ("IHEX_START_SEGMENT_MODE", "creative"),
    ])
    def test_from_env_ignores_invalid(self, monkeypatch, name: str, value: str):
        """Invalid values keep the defaults."""
        monkeypatch.setenv(name, value)
        assert ReaderConfig.from_env() == ReaderConfig()


class TestDefaultConfig:
    """Test the module-level default configuration."""

    def test_created_from_env(self, monkeypatch):
        monkeypatch.setenv("IHEX_MEMORY_SIZE", "1024")
        assert get_default_config().memory_size == 1024

    def test_cached(self):
        assert get_default_config() is get_default_config()

    def test_set_default_config(self):
        config = ReaderConfig(memory_size=16)
        set_default_config(config)
        assert get_default_config() is config
