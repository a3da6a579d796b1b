"""
appshell: configuration schema and structural validation.

File: src/appshell/config/schema.py
Last updated: 2026-10-17

Purpose
- Define the configuration sections, their typed defaults, and per-field constraints.

What should be included in this file
- Frozen section records and the root ``AppShellConfig`` aggregate.
- The explicit field table (``FIELD_SPECS``) consulted by the loader and validator.
- Structural validation that reports every violation with a dotted field path.

Functional requirements
- Validation aggregates all issues; it never stops at the first one.
- Enumerated values match case-sensitively.

Non-functional requirements
- Keep rules deterministic and easy to audit.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, fields, replace
from datetime import timedelta
from enum import StrEnum
from typing import Any, Final, Literal

from appshell.config.durations import format_duration

FieldKind = Literal["str", "int", "bool", "duration", "list", "enum"]
FieldCheck = Literal["semver", "url", "positive"]

_SEMVER_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d+\.\d+\.\d+$")
_URL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^https?://[^\s/?#]+(?:[/?#]\S*)?$")


class Environment(StrEnum):
    """Deployment profile that selects defaults and advisory checks."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AppSettings:
    environment: Environment
    name: str
    version: str
    debug: bool
    hot_reload: bool
    dev_tools: bool
    mock_api: bool


@dataclass(frozen=True, slots=True)
class APISettings:
    base_url: str
    timeout: timedelta
    retry_count: int
    retry_delay: timedelta
    user_agent: str
    max_idle_conn: int


@dataclass(frozen=True, slots=True)
class AuthSettings:
    token_expiry: timedelta
    refresh_threshold: timedelta
    max_login_attempts: int
    lockout_duration: timedelta
    session_timeout: timedelta
    remember_me_duration: timedelta


@dataclass(frozen=True, slots=True)
class LogSettings:
    level: str
    format: str
    output: str
    file_path: str
    max_size: int  # MB
    max_backups: int
    max_age: int  # days
    compress: bool

    @property
    def writes_file(self) -> bool:
        return self.output in ("file", "both")

    @property
    def writes_console(self) -> bool:
        return self.output in ("console", "both")


@dataclass(frozen=True, slots=True)
class DatabaseSettings:
    host: str
    port: int
    name: str
    username: str
    password: str
    ssl_mode: str
    max_open_conns: int
    max_idle_conns: int
    conn_lifetime: timedelta


@dataclass(frozen=True, slots=True)
class SecuritySettings:
    cors_enabled: bool
    cors_origins: tuple[str, ...]
    rate_limit_enabled: bool
    rate_limit_rps: int
    rate_limit_burst: int
    csrf_enabled: bool
    csrf_secret: str


@dataclass(frozen=True, slots=True)
class WindowSettings:
    width: int
    height: int
    resizable: bool
    fullscreen: bool
    maximized: bool
    minimized: bool
    always_on_top: bool


@dataclass(frozen=True, slots=True)
class CacheSettings:
    """Cache tuning knobs. Nothing in appshell implements the cache itself."""

    enabled: bool
    ttl: timedelta
    max_size: int  # MB
    max_items: int
    compression_enabled: bool
    eviction_policy: str


@dataclass(frozen=True, slots=True)
class AppShellConfig:
    """Immutable configuration snapshot. Use ``dataclasses.replace`` to derive variants."""

    app: AppSettings
    api: APISettings
    auth: AuthSettings
    log: LogSettings
    database: DatabaseSettings
    security: SecuritySettings
    window: WindowSettings
    cache: CacheSettings

    @property
    def environment(self) -> Environment:
        return Environment(self.app.environment)

    def with_section(self, section: str, **changes: object) -> AppShellConfig:
        """Return a copy with ``changes`` applied to one section."""

        current = getattr(self, section)
        return replace(self, **{section: replace(current, **changes)})


SECTION_TYPES: Final[dict[str, type]] = {
    "app": AppSettings,
    "api": APISettings,
    "auth": AuthSettings,
    "log": LogSettings,
    "database": DatabaseSettings,
    "security": SecuritySettings,
    "window": WindowSettings,
    "cache": CacheSettings,
}
SECTION_NAMES: Final[tuple[str, ...]] = tuple(SECTION_TYPES)


# ---------------------------------------------------------------------------
# Field table
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One row of the schema: ``(key, type, default, constraint)``."""

    section: str
    key: str
    kind: FieldKind
    default: Any
    required: bool = False
    minimum: int | timedelta | None = None
    maximum: int | timedelta | None = None
    choices: tuple[str, ...] | None = None
    min_length: int | None = None
    max_length: int | None = None
    check: FieldCheck | None = None

    @property
    def path(self) -> str:
        return f"{self.section}.{self.key}"


def _seconds(value: int) -> timedelta:
    return timedelta(seconds=value)


FIELD_SPECS: Final[tuple[FieldSpec, ...]] = (
    # [app]
    FieldSpec(
        "app",
        "environment",
        "enum",
        Environment.DEVELOPMENT,
        required=True,
        choices=tuple(item.value for item in Environment),
    ),
    FieldSpec("app", "name", "str", "AppShell", required=True, min_length=1, max_length=100),
    FieldSpec("app", "version", "str", "1.0.0", required=True, check="semver"),
    FieldSpec("app", "debug", "bool", True),
    FieldSpec("app", "hot_reload", "bool", True),
    FieldSpec("app", "dev_tools", "bool", True),
    FieldSpec("app", "mock_api", "bool", False),
    # [api]
    FieldSpec("api", "base_url", "str", "http://localhost:8080/api", required=True, check="url"),
    FieldSpec("api", "timeout", "duration", _seconds(30), required=True, check="positive"),
    FieldSpec("api", "retry_count", "int", 3, minimum=0, maximum=10),
    FieldSpec("api", "retry_delay", "duration", _seconds(1)),
    FieldSpec("api", "user_agent", "str", ""),
    FieldSpec("api", "max_idle_conn", "int", 10, minimum=1, maximum=100),
    # [auth]
    FieldSpec(
        "auth",
        "token_expiry",
        "duration",
        _seconds(3600),
        required=True,
        minimum=_seconds(300),
        maximum=_seconds(86400),
    ),
    FieldSpec(
        "auth",
        "refresh_threshold",
        "duration",
        _seconds(300),
        required=True,
        minimum=_seconds(60),
        maximum=_seconds(3600),
    ),
    FieldSpec("auth", "max_login_attempts", "int", 5, minimum=1, maximum=10),
    FieldSpec(
        "auth",
        "lockout_duration",
        "duration",
        timedelta(minutes=15),
        minimum=timedelta(minutes=1),
        maximum=timedelta(hours=24),
    ),
    FieldSpec(
        "auth",
        "session_timeout",
        "duration",
        timedelta(hours=24),
        minimum=timedelta(minutes=5),
        maximum=timedelta(hours=24),
    ),
    FieldSpec(
        "auth",
        "remember_me_duration",
        "duration",
        timedelta(hours=720),
        minimum=timedelta(hours=1),
        maximum=timedelta(hours=720),
    ),
    # [log]
    FieldSpec(
        "log", "level", "enum", "debug", required=True, choices=("debug", "info", "warn", "error")
    ),
    FieldSpec("log", "format", "enum", "json", required=True, choices=("json", "text")),
    FieldSpec(
        "log", "output", "enum", "console", required=True, choices=("console", "file", "both")
    ),
    FieldSpec("log", "file_path", "str", "logs/app.log"),
    FieldSpec("log", "max_size", "int", 100, minimum=1, maximum=1000),
    FieldSpec("log", "max_backups", "int", 3, minimum=0, maximum=100),
    FieldSpec("log", "max_age", "int", 28, minimum=1, maximum=365),
    FieldSpec("log", "compress", "bool", True),
    # [database]
    FieldSpec("database", "host", "str", "localhost", required=True),
    FieldSpec("database", "port", "int", 5432, required=True, minimum=1, maximum=65535),
    FieldSpec("database", "name", "str", "appshell", required=True, min_length=1, max_length=100),
    FieldSpec("database", "username", "str", ""),
    FieldSpec("database", "password", "str", ""),
    FieldSpec(
        "database",
        "ssl_mode",
        "enum",
        "disable",
        choices=("disable", "require", "verify-ca", "verify-full"),
    ),
    FieldSpec("database", "max_open_conns", "int", 25, minimum=1, maximum=100),
    FieldSpec("database", "max_idle_conns", "int", 5, minimum=1, maximum=100),
    FieldSpec(
        "database",
        "conn_lifetime",
        "duration",
        timedelta(minutes=5),
        minimum=timedelta(minutes=1),
        maximum=timedelta(hours=24),
    ),
    # [security]
    FieldSpec("security", "cors_enabled", "bool", True),
    FieldSpec("security", "cors_origins", "list", ()),
    FieldSpec("security", "rate_limit_enabled", "bool", False),
    FieldSpec("security", "rate_limit_rps", "int", 100, minimum=1, maximum=10000),
    FieldSpec("security", "rate_limit_burst", "int", 200, minimum=1, maximum=1000),
    FieldSpec("security", "csrf_enabled", "bool", False),
    FieldSpec("security", "csrf_secret", "str", ""),
    # [window]
    FieldSpec("window", "width", "int", 1200, required=True, minimum=400, maximum=4000),
    FieldSpec("window", "height", "int", 800, required=True, minimum=300, maximum=3000),
    FieldSpec("window", "resizable", "bool", True),
    FieldSpec("window", "fullscreen", "bool", False),
    FieldSpec("window", "maximized", "bool", False),
    FieldSpec("window", "minimized", "bool", False),
    FieldSpec("window", "always_on_top", "bool", False),
    # [cache]
    FieldSpec("cache", "enabled", "bool", False),
    FieldSpec(
        "cache",
        "ttl",
        "duration",
        _seconds(3600),
        minimum=_seconds(1),
        maximum=timedelta(hours=24),
    ),
    FieldSpec("cache", "max_size", "int", 100, minimum=1, maximum=10000),
    FieldSpec("cache", "max_items", "int", 10000, minimum=100, maximum=1_000_000),
    FieldSpec("cache", "compression_enabled", "bool", False),
    FieldSpec("cache", "eviction_policy", "enum", "lru", choices=("lru", "lfu", "fifo")),
)

FIELD_SPECS_BY_PATH: Final[dict[str, FieldSpec]] = {spec.path: spec for spec in FIELD_SPECS}


def iter_section_specs(section: str) -> Iterator[FieldSpec]:
    """Yield the field specs belonging to ``section`` in declaration order."""

    return (spec for spec in FIELD_SPECS if spec.section == section)


def build_config(values: Mapping[str, Mapping[str, object]]) -> AppShellConfig:
    """Assemble a config from per-section values, filling gaps from field defaults."""

    sections: dict[str, object] = {}
    for section, section_type in SECTION_TYPES.items():
        provided = values.get(section, {})
        kwargs = {
            spec.key: provided.get(spec.key, spec.default) for spec in iter_section_specs(section)
        }
        sections[section] = section_type(**kwargs)
    return AppShellConfig(**sections)  # type: ignore[arg-type]


def default_config() -> AppShellConfig:
    """Return a config made entirely of documented defaults."""

    return build_config({})


def config_as_dict(config: AppShellConfig) -> dict[str, dict[str, Any]]:
    """Return a JSON-ready mapping; durations rendered as ``1h2m3s`` strings."""

    out: dict[str, dict[str, Any]] = {}
    for section in SECTION_NAMES:
        record = getattr(config, section)
        rendered: dict[str, Any] = {}
        for item in fields(record):
            rendered[item.name] = _render_value(getattr(record, item.name))
        out[section] = rendered
    return out


def _render_value(value: object) -> object:
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, StrEnum):
        return value.value
    return value


# ---------------------------------------------------------------------------
# Structural validation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    config: AppShellConfig | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised when structural validation fails; carries every issue found."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"configuration validation failed:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def validate_config(config: AppShellConfig) -> ConfigValidationResult:
    """Check every field against its declared constraint."""

    issues = _IssueCollector()
    for spec in FIELD_SPECS:
        value = getattr(getattr(config, spec.section), spec.key)
        _TYPE_CHECKERS[spec.kind](spec, value, issues)

    if issues.has_issues:
        return ConfigValidationResult(config=None, issues=issues.items())
    return ConfigValidationResult(config=config, issues=())


def assert_valid_config(config: AppShellConfig) -> AppShellConfig:
    """Validate ``config`` and raise ``ConfigValidationError`` on failure."""

    result = validate_config(config)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def _check_str(spec: FieldSpec, value: object, issues: _IssueCollector) -> None:
    if not isinstance(value, str):
        issues.add(spec.path, f"expected string, got {type(value).__name__}")
        return
    if spec.required and not value.strip():
        issues.add(spec.path, "missing required field")
        return
    if spec.min_length is not None and len(value) < spec.min_length:
        issues.add(spec.path, f"length must be >= {spec.min_length}")
    if spec.max_length is not None and len(value) > spec.max_length:
        issues.add(spec.path, f"length must be <= {spec.max_length}")
    if spec.check == "semver" and not _SEMVER_PATTERN.fullmatch(value):
        issues.add(spec.path, f"{value!r} is not a semantic version (major.minor.patch)")
    if spec.check == "url" and not _URL_PATTERN.fullmatch(value):
        issues.add(spec.path, f"{value!r} is not an absolute http(s) URL")


def _check_enum(spec: FieldSpec, value: object, issues: _IssueCollector) -> None:
    if not isinstance(value, str):
        issues.add(spec.path, f"expected string, got {type(value).__name__}")
        return
    if spec.required and not value:
        issues.add(spec.path, "missing required field")
        return
    allowed = spec.choices or ()
    if value not in allowed:
        expected = ", ".join(allowed)
        issues.add(spec.path, f"invalid value {value!r}; expected one of: {expected}")


def _check_int(spec: FieldSpec, value: object, issues: _IssueCollector) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        issues.add(spec.path, f"expected integer, got {type(value).__name__}")
        return
    if isinstance(spec.minimum, int) and value < spec.minimum:
        issues.add(spec.path, f"must be >= {spec.minimum}, got {value}")
    if isinstance(spec.maximum, int) and value > spec.maximum:
        issues.add(spec.path, f"must be <= {spec.maximum}, got {value}")


def _check_bool(spec: FieldSpec, value: object, issues: _IssueCollector) -> None:
    if not isinstance(value, bool):
        issues.add(spec.path, f"expected boolean, got {type(value).__name__}")


def _check_duration(spec: FieldSpec, value: object, issues: _IssueCollector) -> None:
    if not isinstance(value, timedelta):
        issues.add(spec.path, f"expected duration, got {type(value).__name__}")
        return
    if spec.check == "positive" and value <= timedelta(0):
        issues.add(spec.path, f"must be positive, got {format_duration(value)}")
        return
    if isinstance(spec.minimum, timedelta) and value < spec.minimum:
        issues.add(
            spec.path,
            f"must be >= {format_duration(spec.minimum)}, got {format_duration(value)}",
        )
    if isinstance(spec.maximum, timedelta) and value > spec.maximum:
        issues.add(
            spec.path,
            f"must be <= {format_duration(spec.maximum)}, got {format_duration(value)}",
        )


def _check_list(spec: FieldSpec, value: object, issues: _IssueCollector) -> None:
    if not isinstance(value, tuple) or not all(isinstance(item, str) for item in value):
        issues.add(spec.path, f"expected list of strings, got {type(value).__name__}")


_TYPE_CHECKERS: Final[dict[str, Callable[[FieldSpec, object, _IssueCollector], None]]] = {
    "str": _check_str,
    "enum": _check_enum,
    "int": _check_int,
    "bool": _check_bool,
    "duration": _check_duration,
    "list": _check_list,
}


__all__ = [
    "APISettings",
    "AppSettings",
    "AppShellConfig",
    "AuthSettings",
    "CacheSettings",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DatabaseSettings",
    "Environment",
    "FIELD_SPECS",
    "FIELD_SPECS_BY_PATH",
    "FieldSpec",
    "LogSettings",
    "SECTION_NAMES",
    "SECTION_TYPES",
    "SecuritySettings",
    "WindowSettings",
    "assert_valid_config",
    "build_config",
    "config_as_dict",
    "default_config",
    "iter_section_specs",
    "validate_config",
]
