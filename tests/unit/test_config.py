"""Unit tests for configuration module."""

from __future__ import annotations

import pytest

from pg_peek.infrastructure.config import Config, DecoderConfig, ObservabilityConfig, get_config


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.decoder.page_size == 8192
        assert config.decoder.endianness == "native"
        assert config.observability.log_level == "INFO"
        assert config.observability.log_format == "json"
        assert config.observability.otel_endpoint is None

    def test_custom_decoder_config(self) -> None:
        """Test custom decoder configuration."""
        decoder = DecoderConfig(page_size=16384, endianness="big")

        assert decoder.page_size == 16384
        assert decoder.endianness == "big"

    def test_invalid_page_size(self) -> None:
        """Test that invalid page size raises validation error."""
        with pytest.raises(ValueError):
            DecoderConfig(page_size=512)  # Too small
        with pytest.raises(ValueError):
            DecoderConfig(page_size=65536)  # Too large

    def test_invalid_endianness(self) -> None:
        """Test that unknown byte orders are rejected."""
        with pytest.raises(ValueError):
            DecoderConfig(endianness="middle")  # type: ignore

    def test_log_formats(self) -> None:
        """Test valid log formats."""
        for log_format in ["json", "console"]:
            observability = ObservabilityConfig(log_format=log_format)  # type: ignore
            assert observability.log_format == log_format

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that nested settings are read from PG_PEEK_ variables."""
        monkeypatch.setenv("PG_PEEK_DECODER__PAGE_SIZE", "4096")
        monkeypatch.setenv("PG_PEEK_DECODER__ENDIANNESS", "little")
        monkeypatch.setenv("PG_PEEK_OBSERVABILITY__LOG_LEVEL", "DEBUG")

        config = Config()

        assert config.decoder.page_size == 4096
        assert config.decoder.endianness == "little"
        assert config.observability.log_level == "DEBUG"


@pytest.mark.unit
class TestConfigSingleton:
    """Tests for get_config singleton."""

    def test_get_config_returns_same_instance(self) -> None:
        """Test that get_config returns the same instance."""
        config1 = get_config()
        config2 = get_config()
        assert config1 is config2
