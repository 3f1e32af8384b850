"""Configuration management for the Lark Open Platform client.

Configuration models use Pydantic for validation. ``ClientConfig`` is a
pydantic-settings model, so every field can also come from ``LARK_*``
environment variables or a ``.env`` file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://open.feishu.cn/open-apis/"
DEBUG_PROXY_URL = "http://127.0.0.1:8888"

_DOTENV_LOADED = False


def _load_env_once() -> None:
    """Load environment variables from a .env file exactly once."""

    global _DOTENV_LOADED
    if not _DOTENV_LOADED:
        load_dotenv()
        _DOTENV_LOADED = True


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in configuration data."""

    if isinstance(data, str):
        return os.path.expandvars(data)
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    return data


class RetryPolicyConfig(BaseModel):
    """Configuration for HTTP retry behaviour."""

    max_attempts: int = Field(
        default=5,
        ge=1,
        description="Maximum number of attempts (including the first request)",
    )
    backoff_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Initial delay in seconds before retrying",
    )
    backoff_multiplier: float = Field(
        default=2.0,
        ge=1.0,
        description="Multiplier applied to the backoff delay after each failure",
    )
    max_backoff_seconds: float = Field(
        default=3.0,
        ge=0.0,
        description="Maximum delay cap between retries",
    )


class TimeoutConfig(BaseModel):
    """Per-attempt transport timeouts in seconds."""

    connect: float = Field(default=5.0, gt=0.0, description="Connection timeout")
    read: float = Field(default=30.0, gt=0.0, description="Read timeout")
    write: float = Field(default=30.0, gt=0.0, description="Write timeout")
    pool: float = Field(default=5.0, gt=0.0, description="Connection pool timeout")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    log_file: str | None = Field(default=None, description="Log file path")
    max_bytes: int = Field(default=10485760, description="Max log file size (10MB)")
    backup_count: int = Field(default=5, description="Number of backup files")

    @field_validator("level", mode="before")
    @classmethod
    def normalise_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class ClientConfig(BaseSettings):
    """Main configuration for the Lark client."""

    model_config = SettingsConfigDict(
        env_prefix="LARK_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(default=DEFAULT_BASE_URL, description="Open API base URL")
    timeout: TimeoutConfig = Field(default_factory=TimeoutConfig)
    retry: RetryPolicyConfig = Field(default_factory=RetryPolicyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    proxy: str | None = Field(default=None, description="HTTP proxy for debugging")
    tls_version: Literal["TLSv1_2", "TLSv1_3"] | None = Field(
        default="TLSv1_2", description="Pin the TLS protocol version (None to negotiate)"
    )
    skip_verify_ssl: bool = Field(
        default=False, description="Disable certificate verification"
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Base URL cannot be empty")
        if not value.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
        if not value.endswith("/"):
            value = f"{value}/"
        return value

    @model_validator(mode="after")
    def apply_debug_proxy(self) -> ClientConfig:
        if self.proxy is None and os.environ.get("CHARLES_PROXY"):
            self.proxy = DEBUG_PROXY_URL
        return self

    @classmethod
    def from_yaml(cls, path: str | Path) -> ClientConfig:
        """Load configuration from a YAML file."""

        _load_env_once()
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, encoding="utf-8") as handle:
            try:
                config_data = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in config file: {exc}") from exc

        if not config_data:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ValueError("Configuration root must be a mapping")

        config_data = _expand_env_vars(config_data)
        return cls(**config_data)
