"""Configuration management for the studio dev launcher.

Configuration is loaded from environment variables. Everything has a local
development default, so a bare checkout can run the launcher with no setup.
"""

from __future__ import annotations

import json
import shlex
from enum import StrEnum
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

STUDIO_URL = "http://localhost:3333"
STUDIO_PACKAGE = "sanity-studio"
DEFAULT_DEV_COMMAND = ("pnpm", "turbo", "run", "dev", f"--filter={STUDIO_PACKAGE}", "--no-cache")


class AppEnvironment(StrEnum):
    LOCAL = "local"
    TEST = "test"
    PROD = "prod"


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ReadinessMode(StrEnum):
    DELAY = "delay"
    POLL = "poll"


class AppConfig(BaseSettings):
    name: str = Field(default="studio-dev-launcher")
    env: AppEnvironment = Field(default=AppEnvironment.LOCAL)
    version: str = Field(default="0.1.0")
    log_level: LogLevel = Field(default=LogLevel.INFO)

    model_config = SettingsConfigDict(env_prefix="APP_")

    @field_validator("env", mode="before")
    @classmethod
    def validate_env(cls, v: str | AppEnvironment) -> AppEnvironment:
        if isinstance(v, AppEnvironment):
            return v
        return AppEnvironment(v.strip().lower())

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        if isinstance(v, LogLevel):
            return v
        return LogLevel(v.strip().upper())


class LauncherConfig(BaseSettings):
    command: Annotated[list[str], NoDecode] = Field(default_factory=lambda: list(DEFAULT_DEV_COMMAND))
    workdir: str | None = Field(default=None)
    startup_delay_seconds: float = Field(default=5.0, ge=0)
    readiness: ReadinessMode = Field(default=ReadinessMode.DELAY)
    poll_timeout_seconds: float = Field(default=30.0, gt=0)
    poll_interval_seconds: float = Field(default=0.5, gt=0)
    open_browser: bool = Field(default=True)
    termination_grace_seconds: float = Field(default=5.0, ge=0)

    model_config = SettingsConfigDict(env_prefix="LAUNCHER_")

    @field_validator("command", mode="before")
    @classmethod
    def parse_command(cls, v: str | list[str] | tuple[str, ...]) -> list[str]:
        """Accept a JSON list, a shell-style string, or a sequence of args."""
        if isinstance(v, str):
            raw = v.strip()
            parsed = json.loads(raw) if raw.startswith("[") else shlex.split(raw)
        else:
            parsed = list(v)
        if not parsed:
            raise ValueError("LAUNCHER_COMMAND must name a program to run")
        return [str(arg) for arg in parsed]

    @field_validator("readiness", mode="before")
    @classmethod
    def validate_readiness(cls, v: str | ReadinessMode) -> ReadinessMode:
        if isinstance(v, ReadinessMode):
            return v
        return ReadinessMode(v.strip().lower())


class ObservabilityConfig(BaseSettings):
    record_format: str = Field(default="console")

    model_config = SettingsConfigDict(env_prefix="LOG_")

    @field_validator("record_format", mode="after")
    @classmethod
    def validate_record_format(cls, v: str) -> str:
        normalized = v.strip().lower()
        if normalized not in {"console", "json"}:
            raise ValueError("LOG_RECORD_FORMAT must be 'console' or 'json'")
        return normalized


class Settings(BaseSettings):
    app: AppConfig = Field(default_factory=AppConfig)
    launcher: LauncherConfig = Field(default_factory=LauncherConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def reload_settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()
