"""
appshell: environment and security policy checks.

File: src/appshell/config/policy.py
Last updated: 2026-10-17

Purpose
- Surface misconfiguration early without blocking startup.

What should be included in this file
- ``ValidationFinding`` (severity + message) shared by every validation stage.
- Environment advisories keyed off development/staging/production.
- Security advisories that apply in every environment, plus a production-only pass.

Functional requirements
- Every finding produced here is a warning; nothing in this module raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from appshell.config.schema import Environment
from appshell.constants import (
    LOOPBACK_HOST_MARKERS,
    MAX_PRODUCTION_API_TIMEOUT_SECONDS,
    MIN_CSRF_SECRET_LENGTH,
    MIN_STAGING_API_TIMEOUT_SECONDS,
)

if TYPE_CHECKING:
    from appshell.config.schema import AppShellConfig, ConfigValidationIssue

_ORIGIN_PATTERN: Final[re.Pattern[str]] = re.compile(r"^https?://[a-zA-Z0-9.-]+(:[0-9]+)?$")
_TEST_HOST_MARKER: Final[str] = "test"


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class ValidationFinding:
    """A single load-time finding. Errors abort the load; warnings are reported."""

    severity: Severity
    message: str
    path: str | None = None

    @classmethod
    def warning(cls, message: str, path: str | None = None) -> ValidationFinding:
        return cls(severity=Severity.WARNING, message=message, path=path)

    @classmethod
    def from_issue(cls, issue: ConfigValidationIssue) -> ValidationFinding:
        return cls(severity=Severity.ERROR, message=issue.message, path=issue.path)

    def __str__(self) -> str:
        if self.path:
            return f"{self.severity}: {self.path}: {self.message}"
        return f"{self.severity}: {self.message}"


def is_valid_origin(origin: str) -> bool:
    """Accept ``scheme://host[:port]`` and the ``*`` wildcard."""

    if origin == "*":
        return True
    return _ORIGIN_PATTERN.fullmatch(origin) is not None


def _mentions_loopback(value: str) -> bool:
    return any(marker in value for marker in LOOPBACK_HOST_MARKERS)


# ---------------------------------------------------------------------------
# Environment advisories
# ---------------------------------------------------------------------------


def validate_environment(config: AppShellConfig) -> tuple[ValidationFinding, ...]:
    """Apply the advisory rules for the config's own environment."""

    environment = config.environment
    if environment is Environment.DEVELOPMENT:
        return _validate_development(config)
    if environment is Environment.STAGING:
        return _validate_staging(config)
    return _validate_production(config)


def _validate_development(config: AppShellConfig) -> tuple[ValidationFinding, ...]:
    findings: list[ValidationFinding] = []
    if not config.app.debug:
        findings.append(
            ValidationFinding.warning("debug mode should be enabled in development", "app.debug")
        )
    base_url = config.api.base_url
    if not _mentions_loopback(base_url) and _TEST_HOST_MARKER not in base_url:
        findings.append(
            ValidationFinding.warning(
                "development should typically use localhost or test API URLs", "api.base_url"
            )
        )
    return tuple(findings)


def _validate_staging(config: AppShellConfig) -> tuple[ValidationFinding, ...]:
    findings: list[ValidationFinding] = []
    if _mentions_loopback(config.api.base_url):
        findings.append(
            ValidationFinding.warning("staging should not use localhost API URLs", "api.base_url")
        )
    if config.api.timeout.total_seconds() < MIN_STAGING_API_TIMEOUT_SECONDS:
        findings.append(
            ValidationFinding.warning("API timeout is too low for staging", "api.timeout")
        )
    return tuple(findings)


def _validate_production(config: AppShellConfig) -> tuple[ValidationFinding, ...]:
    findings: list[ValidationFinding] = []
    if config.app.debug:
        findings.append(
            ValidationFinding.warning("debug mode must be disabled in production", "app.debug")
        )
    if config.app.dev_tools:
        findings.append(
            ValidationFinding.warning("dev tools must be disabled in production", "app.dev_tools")
        )
    if not config.api.base_url.startswith("https://"):
        findings.append(
            ValidationFinding.warning("production must use HTTPS API URLs", "api.base_url")
        )
    if config.database.ssl_mode == "disable":
        findings.append(
            ValidationFinding.warning(
                "database SSL must be enabled in production", "database.ssl_mode"
            )
        )
    if not config.security.rate_limit_enabled:
        findings.append(
            ValidationFinding.warning(
                "rate limiting should be enabled in production", "security.rate_limit_enabled"
            )
        )
    return tuple(findings)


# ---------------------------------------------------------------------------
# Security advisories
# ---------------------------------------------------------------------------


def validate_security(config: AppShellConfig) -> tuple[ValidationFinding, ...]:
    """Check security-relevant combinations; adds a production pass when applicable."""

    security = config.security
    findings: list[ValidationFinding] = []

    if security.cors_enabled:
        if not security.cors_origins:
            findings.append(
                ValidationFinding.warning(
                    "CORS is enabled but no origins are specified", "security.cors_origins"
                )
            )
        for origin in security.cors_origins:
            if origin == "*":
                findings.append(
                    ValidationFinding.warning(
                        "wildcard CORS origin '*' is not recommended", "security.cors_origins"
                    )
                )
            elif not is_valid_origin(origin):
                findings.append(
                    ValidationFinding.warning(
                        f"invalid CORS origin: {origin}", "security.cors_origins"
                    )
                )

    if security.csrf_enabled:
        if not security.csrf_secret:
            findings.append(
                ValidationFinding.warning(
                    "CSRF is enabled but no secret is provided", "security.csrf_secret"
                )
            )
        elif len(security.csrf_secret) < MIN_CSRF_SECRET_LENGTH:
            findings.append(
                ValidationFinding.warning(
                    f"CSRF secret should be at least {MIN_CSRF_SECRET_LENGTH} characters long",
                    "security.csrf_secret",
                )
            )

    if security.rate_limit_enabled:
        if security.rate_limit_rps <= 0:
            findings.append(
                ValidationFinding.warning(
                    "rate limiting is enabled but RPS is not positive", "security.rate_limit_rps"
                )
            )
        if security.rate_limit_burst <= 0:
            findings.append(
                ValidationFinding.warning(
                    "rate limiting is enabled but burst is not positive",
                    "security.rate_limit_burst",
                )
            )

    if config.environment is Environment.PRODUCTION:
        findings.extend(_validate_production_security(config))

    return tuple(findings)


def _validate_production_security(config: AppShellConfig) -> list[ValidationFinding]:
    findings: list[ValidationFinding] = []
    if config.security.cors_enabled:
        for origin in config.security.cors_origins:
            if _mentions_loopback(origin):
                findings.append(
                    ValidationFinding.warning(
                        f"localhost origin {origin} should not be allowed in production",
                        "security.cors_origins",
                    )
                )
    if config.database.ssl_mode == "disable":
        findings.append(
            ValidationFinding.warning(
                "database SSL should be enabled in production", "database.ssl_mode"
            )
        )
    if config.api.timeout.total_seconds() > MAX_PRODUCTION_API_TIMEOUT_SECONDS:
        findings.append(
            ValidationFinding.warning(
                "API timeout is very high for production", "api.timeout"
            )
        )
    return findings


def run_policy_checks(config: AppShellConfig) -> tuple[ValidationFinding, ...]:
    """Environment advisories followed by security advisories."""

    return validate_environment(config) + validate_security(config)


__all__ = [
    "Severity",
    "ValidationFinding",
    "is_valid_origin",
    "run_policy_checks",
    "validate_environment",
    "validate_security",
]
