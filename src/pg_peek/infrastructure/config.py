"""Configuration management for the page inspector."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DecoderConfig(BaseModel):
    """Page decoder configuration."""

    page_size: int = Field(
        default=8192, ge=1024, le=32768, description="Block size in bytes"
    )
    endianness: Literal["native", "little", "big"] = Field(
        default="native", description="Byte order of the inspected files"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="pg_peek", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the page inspector."""

    model_config = SettingsConfigDict(
        env_prefix="PG_PEEK_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    decoder: DecoderConfig = Field(default_factory=DecoderConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
