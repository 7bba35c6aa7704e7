"""Client configuration settings and loading."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from actionkit.errors import ConfigValidationError, ErrorContext
from actionkit.http.models import merge_headers
from actionkit.observability.logging import configure_logging


class ClientSettings(BaseSettings):
    """Base URL, timeout and baseline headers for an HttpDispatcher."""

    model_config = SettingsConfigDict(
        env_prefix="ACTIONKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = "https://api.github.com"
    timeout: float = 30.0
    token: str | None = None
    accept: str | None = "application/vnd.github.v3+json"
    headers: dict[str, str] = Field(default_factory=dict)
    log_level: str = "INFO"
    json_logs: bool = False

    @field_validator("base_url", mode="before")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ConfigValidationError(
                message="base_url cannot be empty",
                field="base_url",
                value=v,
            )
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ConfigValidationError(
                message="base_url must start with http:// or https://",
                field="base_url",
                value=v,
                context=ErrorContext(extra={"expected_prefix": "https://"}),
            )
        return v.rstrip("/")

    @field_validator("timeout", mode="before")
    @classmethod
    def validate_timeout(cls, v: Any) -> Any:
        try:
            positive = float(v) > 0
        except (TypeError, ValueError):
            positive = False
        if not positive:
            raise ConfigValidationError(
                message="timeout must be a positive number of seconds",
                field="timeout",
                value=v,
            )
        return v

    def baseline_headers(self) -> dict[str, str]:
        """Headers applied to every request: Accept, Authorization, then extras."""
        headers: dict[str, str] = {}
        if self.accept:
            headers["Accept"] = self.accept
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return merge_headers(headers, self.headers)

    def setup_logging(self) -> logging.Logger:
        """Configure the ``actionkit`` logger from ``log_level`` and ``json_logs``."""
        return configure_logging(level=self.log_level, json_format=self.json_logs)


def load_config(config_path: str | Path | None = None) -> ClientSettings:
    """Load settings from a YAML file and the environment.

    Priority: env vars > config file > defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ConfigValidationError(
                    message="config file must contain a mapping",
                    field="config_path",
                    value=str(config_path),
                )
            config_data = loaded

    config_data.update(_get_env_overrides())
    return ClientSettings(**config_data)


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        "ACTIONKIT_BASE_URL": "base_url",
        "ACTIONKIT_TIMEOUT": ("timeout", float),
        "ACTIONKIT_TOKEN": "token",
        "ACTIONKIT_ACCEPT": "accept",
        "ACTIONKIT_LOG_LEVEL": "log_level",
        "ACTIONKIT_JSON_LOGS": ("json_logs", lambda x: x.lower() in ("true", "1", "yes")),
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            if isinstance(config_key, tuple):
                key, converter = config_key
                try:
                    overrides[key] = converter(value)
                except ValueError as e:
                    raise ConfigValidationError(
                        message=f"{env_key} has an invalid value",
                        field=key,
                        value=value,
                        cause=e,
                    ) from e
            else:
                overrides[config_key] = value

    return overrides
