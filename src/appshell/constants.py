"""Stable constants shared across the appshell backend."""

from __future__ import annotations

from typing import Final

# Configuration source.
DEFAULT_CONFIG_FILE: Final[str] = "config.ini"
ENVIRONMENT_VARIABLE: Final[str] = "APP_ENV"
ENVIRONMENT_FILE_PREFIX: Final[str] = ".env"

# Profile used when neither APP_ENV nor [app] environment selects one.
DEFAULT_ENVIRONMENT: Final[str] = "development"

# Security thresholds.
MIN_CSRF_SECRET_LENGTH: Final[int] = 32
GENERATED_SECRET_LENGTH: Final[int] = 64
MIN_GENERATED_SECRET_LENGTH: Final[int] = 16
PRODUCTION_RATE_LIMIT_RPS: Final[int] = 100
PRODUCTION_RATE_LIMIT_BURST: Final[int] = 200
MAX_PRODUCTION_API_TIMEOUT_SECONDS: Final[float] = 60.0
MIN_STAGING_API_TIMEOUT_SECONDS: Final[float] = 10.0

# Hosts that identify a developer machine rather than a deployed service.
LOOPBACK_HOST_MARKERS: Final[tuple[str, ...]] = ("localhost", "127.0.0.1")

MASKED_VALUE: Final[str] = "***MASKED***"

# Identity service.
LOGIN_PATH: Final[str] = "/identity/login"

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_ENVIRONMENT",
    "ENVIRONMENT_FILE_PREFIX",
    "ENVIRONMENT_VARIABLE",
    "GENERATED_SECRET_LENGTH",
    "LOGIN_PATH",
    "LOOPBACK_HOST_MARKERS",
    "MASKED_VALUE",
    "MAX_PRODUCTION_API_TIMEOUT_SECONDS",
    "MIN_CSRF_SECRET_LENGTH",
    "MIN_GENERATED_SECRET_LENGTH",
    "MIN_STAGING_API_TIMEOUT_SECONDS",
    "PRODUCTION_RATE_LIMIT_BURST",
    "PRODUCTION_RATE_LIMIT_RPS",
]
