"""Public observability primitives: structured logging with redaction."""

from appshell.observability.logging import (
    LoggingConfig,
    LoggingHandle,
    LogRedactor,
    default_log_redactor,
    flush_logging,
    get_active_logging_handle,
    prune_expired_backups,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)

__all__ = [
    "LogRedactor",
    "LoggingConfig",
    "LoggingHandle",
    "default_log_redactor",
    "flush_logging",
    "get_active_logging_handle",
    "prune_expired_backups",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
