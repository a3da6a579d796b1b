"""
appshell config package public API.

File: src/appshell/config/__init__.py
Last updated: 2026-10-17

Purpose
- Export config loading/validation entrypoints, the snapshot store, and error types.

What should be included in this file
- Schema types and validation results.
- Loader and store APIs, the public projection, and security helpers.
- No logging setup or other runtime side effects.

Functional requirements
- Support loading from ``config.ini`` with ``APP_ENV`` selecting the environment.
- Fail with one aggregated error listing every structural violation.
"""

from appshell.config.durations import DurationParseError, format_duration, parse_duration
from appshell.config.loader import (
    ConfigLoadError,
    LoadedConfig,
    load_config,
    parse_bool,
    parse_int,
    parse_list,
    resolve_environment,
)
from appshell.config.policy import (
    Severity,
    ValidationFinding,
    run_policy_checks,
    validate_environment,
    validate_security,
)
from appshell.config.public import PublicConfig, build_public_config
from appshell.config.schema import (
    FIELD_SPECS,
    APISettings,
    AppSettings,
    AppShellConfig,
    AuthSettings,
    CacheSettings,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    DatabaseSettings,
    Environment,
    FieldSpec,
    LogSettings,
    SecuritySettings,
    WindowSettings,
    assert_valid_config,
    config_as_dict,
    default_config,
    validate_config,
)
from appshell.config.security import (
    apply_security_defaults,
    check_environment_file,
    generate_secure_secret,
    sanitize_config,
)
from appshell.config.store import ConfigNotLoadedError, ConfigStore

__all__ = [
    "APISettings",
    "AppSettings",
    "AppShellConfig",
    "AuthSettings",
    "CacheSettings",
    "ConfigLoadError",
    "ConfigNotLoadedError",
    "ConfigStore",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DatabaseSettings",
    "DurationParseError",
    "Environment",
    "FIELD_SPECS",
    "FieldSpec",
    "LoadedConfig",
    "LogSettings",
    "PublicConfig",
    "SecuritySettings",
    "Severity",
    "ValidationFinding",
    "WindowSettings",
    "apply_security_defaults",
    "assert_valid_config",
    "build_public_config",
    "check_environment_file",
    "config_as_dict",
    "default_config",
    "format_duration",
    "generate_secure_secret",
    "load_config",
    "parse_bool",
    "parse_duration",
    "parse_int",
    "parse_list",
    "resolve_environment",
    "run_policy_checks",
    "sanitize_config",
    "validate_config",
    "validate_environment",
    "validate_security",
]
