"""Configuration management for the reactive SQL layer."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseModel):
    """Embedded engine configuration."""

    database_path: str = Field(
        default=":memory:", description="SQLite database path (':memory:' for in-process)"
    )
    timeout_seconds: float = Field(
        default=5.0, gt=0, description="Seconds to wait on a locked database file"
    )


class NotificationConfig(BaseModel):
    """Listener notification configuration."""

    notify_in_background: bool = Field(
        default=False, description="Dispatch listener calls on a worker pool"
    )
    max_workers: int = Field(default=4, ge=1, le=64, description="Notification worker threads")
    compact_on_notify: bool = Field(
        default=False, description="Drop dead listener references after each notification"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="reactive_sql", description="Service name for tracing")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")


class Config(BaseSettings):
    """Main configuration for the reactive SQL layer."""

    model_config = SettingsConfigDict(
        env_prefix="REACTIVE_SQL_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    engine: EngineConfig = Field(default_factory=EngineConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
