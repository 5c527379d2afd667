"""Process-wide defaults for MTCaptcha clients using Pydantic.

Values are read from ``MTCAPTCHA_*`` environment variables, falling back to
the defaults below. A client copies what it needs at construction, so
changing a default later only affects clients created afterwards.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CHECK_TOKEN_URL = "https://service.mtcaptcha.com/mtcv1/api/checktoken.json"
DEFAULT_CONNECT_TIMEOUT_MS = 10_000
DEFAULT_READ_TIMEOUT_MS = 3_000


class MTCaptchaSettings(BaseSettings):
    """Defaults shared by every client in the process."""

    model_config = SettingsConfigDict(
        env_prefix="MTCAPTCHA_",
        extra="ignore",
        validate_assignment=True,
    )

    # --- Endpoint ---
    check_token_url: str = Field(default=DEFAULT_CHECK_TOKEN_URL, min_length=1)

    # --- Timeouts (milliseconds) ---
    connect_timeout_ms: int = Field(
        default=DEFAULT_CONNECT_TIMEOUT_MS,
        gt=0,
        description="Bounds TCP/TLS connection setup",
    )
    read_timeout_ms: int = Field(
        default=DEFAULT_READ_TIMEOUT_MS,
        gt=0,
        description="Bounds waiting for response bytes once connected",
    )

    # --- Connection pool ---
    max_connections: int = Field(default=100, gt=0)
    max_keepalive_connections: int = Field(default=20, ge=0)

    # --- Logging ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


_settings: MTCaptchaSettings | None = None


def get_settings() -> MTCaptchaSettings:
    """Get or create the process-wide settings instance."""
    global _settings
    if _settings is None:
        _settings = MTCaptchaSettings()
    return _settings


def reload_settings() -> MTCaptchaSettings:
    """Re-read settings from the environment, discarding runtime overrides."""
    global _settings
    _settings = None
    return get_settings()


def set_default_timeouts(
    connect_timeout_ms: int | None = None,
    read_timeout_ms: int | None = None,
) -> MTCaptchaSettings:
    """Override the default timeouts used by clients created from now on.

    Raises ``pydantic.ValidationError`` for non-positive values.
    """
    cfg = get_settings()
    if connect_timeout_ms is not None:
        cfg.connect_timeout_ms = connect_timeout_ms
    if read_timeout_ms is not None:
        cfg.read_timeout_ms = read_timeout_ms
    return cfg
