"""Security hardening helpers: secret generation, masking, and production defaults."""

from __future__ import annotations

import base64
import logging
import secrets
from pathlib import Path

from appshell.config.schema import AppShellConfig, Environment
from appshell.constants import (
    ENVIRONMENT_FILE_PREFIX,
    GENERATED_SECRET_LENGTH,
    MASKED_VALUE,
    MIN_GENERATED_SECRET_LENGTH,
    PRODUCTION_RATE_LIMIT_BURST,
    PRODUCTION_RATE_LIMIT_RPS,
)

logger = logging.getLogger(__name__)


def generate_secure_secret(length: int = GENERATED_SECRET_LENGTH) -> str:
    """Return ``length`` characters of URL-safe base64 drawn from the OS CSPRNG."""

    if length < MIN_GENERATED_SECRET_LENGTH:
        raise ValueError(f"secret length must be at least {MIN_GENERATED_SECRET_LENGTH}")
    raw = secrets.token_bytes(length)
    return base64.urlsafe_b64encode(raw).decode("ascii")[:length]


def apply_security_defaults(config: AppShellConfig) -> AppShellConfig:
    """Fill in missing secrets and force production-safe settings.

    Returns a new snapshot; ``config`` is left untouched.
    """

    hardened = config

    if hardened.security.csrf_enabled and not hardened.security.csrf_secret:
        hardened = hardened.with_section("security", csrf_secret=generate_secure_secret())
        logger.info("Generated secure CSRF secret.")

    if hardened.environment is not Environment.PRODUCTION:
        return hardened

    hardened = hardened.with_section("app", debug=False, dev_tools=False, hot_reload=False)

    if not hardened.security.rate_limit_enabled:
        hardened = hardened.with_section(
            "security",
            rate_limit_enabled=True,
            rate_limit_rps=PRODUCTION_RATE_LIMIT_RPS,
            rate_limit_burst=PRODUCTION_RATE_LIMIT_BURST,
        )
        logger.info(
            "Enabled rate limiting for production. rps=%s burst=%s",
            PRODUCTION_RATE_LIMIT_RPS,
            PRODUCTION_RATE_LIMIT_BURST,
        )

    if hardened.database.ssl_mode == "disable":
        hardened = hardened.with_section("database", ssl_mode="require")
        logger.info("Upgraded database ssl_mode from disable to require for production.")

    return hardened


def sanitize_config(config: AppShellConfig) -> AppShellConfig:
    """Return a copy with credentials masked, suitable for logs and diagnostics."""

    sanitized = config
    if sanitized.database.password:
        sanitized = sanitized.with_section("database", password=MASKED_VALUE)
    if sanitized.security.csrf_secret:
        sanitized = sanitized.with_section("security", csrf_secret=MASKED_VALUE)
    return sanitized


def environment_file_path(environment: Environment | str, base_dir: Path) -> Path:
    return base_dir / f"{ENVIRONMENT_FILE_PREFIX}.{Environment(environment).value}"


def check_environment_file(environment: Environment | str, base_dir: Path) -> str | None:
    """Return an advisory message when the per-environment ``.env`` file is absent."""

    path = environment_file_path(environment, base_dir)
    if path.is_file():
        return None
    return f"environment file {path.name} does not exist in {base_dir}"


__all__ = [
    "apply_security_defaults",
    "check_environment_file",
    "environment_file_path",
    "generate_secure_secret",
    "sanitize_config",
]
