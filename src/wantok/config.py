"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta

from dotenv import load_dotenv


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _env_int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass(frozen=True)
class CosmosConfig:
    endpoint: str = field(default_factory=lambda: _env("COSMOS_ENDPOINT"))
    key: str = field(default_factory=lambda: _env("COSMOS_KEY"))
    database: str = field(default_factory=lambda: _env("COSMOS_DATABASE", "wantok"))


@dataclass(frozen=True)
class OpenAIConfig:
    endpoint: str = field(default_factory=lambda: _env("AZURE_OPENAI_ENDPOINT"))
    deployment: str = field(default_factory=lambda: _env("AZURE_OPENAI_DEPLOYMENT"))
    api_key: str = field(default_factory=lambda: _env("AZURE_OPENAI_API_KEY"))

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint and self.deployment)


@dataclass(frozen=True)
class QueueConfig:
    """Tuning for the translation work queue."""

    lock_minutes: int = field(default_factory=lambda: _env_int("QUEUE_LOCK_MINUTES", 10))
    target_redundancy: int = field(
        default_factory=lambda: _env_int("QUEUE_TARGET_REDUNDANCY", 2)
    )
    priority_window: int = field(
        default_factory=lambda: _env_int("QUEUE_PRIORITY_WINDOW", 500)
    )
    fallback_window: int = field(
        default_factory=lambda: _env_int("QUEUE_FALLBACK_WINDOW", 100)
    )
    experienced_threshold: int = field(
        default_factory=lambda: _env_int("QUEUE_EXPERIENCED_THRESHOLD", 200)
    )
    language: str = field(default_factory=lambda: _env("QUEUE_LANGUAGE", "hula"))

    @property
    def lock_duration(self) -> timedelta:
        return timedelta(minutes=self.lock_minutes)


@dataclass(frozen=True)
class MonitorConfig:
    connection_string: str = field(
        default_factory=lambda: _env("APPLICATIONINSIGHTS_CONNECTION_STRING")
    )


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    log_level: str = field(default_factory=lambda: _env("APP_LOG_LEVEL", "INFO"))
    secret_key: str = field(default_factory=lambda: _env("APP_SECRET_KEY"))

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class Settings:
    cosmos: CosmosConfig = field(default_factory=CosmosConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    queue: QueueConfig = field(default_factory=QueueConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    app: AppConfig = field(default_factory=AppConfig)


def load_settings() -> Settings:
    """Load ``.env`` (if present) and build the settings tree."""
    load_dotenv()
    return Settings()
