"""
Centralized configuration with environment variable overrides.

Endpoints, timeouts, mirror storage location, and booking rules are all
configurable here. Nothing is hardcoded in the accessor or form logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from kingplay.logging_context import install_request_id_filter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] [%(request_id)s] %(levelname)s: %(message)s"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag (true/false, yes/no, 1/0, on/off)."""
    raw = os.getenv(env_var, default).strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class ApiConfig:
    """Remote API location and HTTP client settings."""

    base_url: str = os.getenv("API_BASE_URL", "http://localhost:5000/api")
    timeout_seconds: float = _safe_float("API_TIMEOUT_SECONDS", "5.0")


@dataclass(frozen=True)
class MirrorConfig:
    """Local mirror persistence settings."""

    path: str = os.getenv("MIRROR_PATH", ".kpb_mirror.json")
    key_prefix: str = os.getenv("MIRROR_KEY_PREFIX", "kpb_local_")
    cache_reads: bool = _safe_bool("MIRROR_CACHE_READS", "true")


@dataclass(frozen=True)
class BookingConfig:
    """Booking form rules and site identity."""

    site_name: str = os.getenv("SITE_NAME", "The King Play Elite")
    minimum_age: int = _safe_int("MINIMUM_AGE", "18")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    api: ApiConfig = field(default_factory=ApiConfig)
    mirror: MirrorConfig = field(default_factory=MirrorConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not config.api.base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"API_BASE_URL must be an http(s) URL, got {config.api.base_url!r}"
        )
    if config.api.timeout_seconds <= 0:
        raise ValueError(
            f"API_TIMEOUT_SECONDS must be > 0, got {config.api.timeout_seconds}"
        )
    if not config.mirror.key_prefix:
        raise ValueError("MIRROR_KEY_PREFIX must not be empty")
    if not config.mirror.path:
        raise ValueError("MIRROR_PATH must not be empty")
    if config.booking.minimum_age < 1:
        raise ValueError(
            f"MINIMUM_AGE must be >= 1, got {config.booking.minimum_age}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    install_request_id_filter()
    logger.info("Configuration loaded for '%s' (api=%s)", config.booking.site_name, config.api.base_url)
    return config


# Singleton instance
settings = load_config()
