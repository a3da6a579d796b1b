"""Owned, injectable holder of the live configuration snapshot."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Mapping
from pathlib import Path

from appshell.config.loader import LoadedConfig, load_config, replace_config
from appshell.config.policy import ValidationFinding
from appshell.config.public import PublicConfig, build_public_config
from appshell.config.schema import AppShellConfig
from appshell.config.security import apply_security_defaults

logger = logging.getLogger(__name__)


class ConfigNotLoadedError(RuntimeError):
    """Raised when the snapshot is read before any successful load.

    This signals a startup-ordering bug in the caller, not a recoverable condition.
    """


class ConfigStore:
    """Loads the configuration once and swaps it atomically on reload.

    Readers always see either the previous or the new snapshot, never a mix.
    A failed reload leaves the previous snapshot in place.
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        harden: bool = False,
    ) -> None:
        self._config_path = config_path
        self._environ = environ
        self._harden = harden
        self._lock = threading.Lock()
        self._loaded: LoadedConfig | None = None

    @property
    def is_loaded(self) -> bool:
        return self._loaded is not None

    @property
    def findings(self) -> tuple[ValidationFinding, ...]:
        return self._require_loaded().findings

    @property
    def source_path(self) -> Path:
        return self._require_loaded().source_path

    def load(self) -> AppShellConfig:
        """Return the existing snapshot, or run the pipeline if there is none yet."""

        with self._lock:
            if self._loaded is None:
                self._loaded = self._run_pipeline()
            return self._loaded.config

    def reload(self) -> AppShellConfig:
        """Rerun the full pipeline and replace the snapshot on success."""

        with self._lock:
            fresh = self._run_pipeline()
            self._loaded = fresh
        logger.info("Configuration reloaded. environment=%s", fresh.environment)
        return fresh.config

    def current(self) -> AppShellConfig:
        return self._require_loaded().config

    def public(self) -> PublicConfig:
        return build_public_config(self.current())

    def _require_loaded(self) -> LoadedConfig:
        loaded = self._loaded
        if loaded is None:
            raise ConfigNotLoadedError("configuration not loaded; call load() first")
        return loaded

    def _run_pipeline(self) -> LoadedConfig:
        environ = os.environ if self._environ is None else self._environ
        loaded = load_config(self._config_path, environ=environ)
        if self._harden:
            loaded = replace_config(loaded, apply_security_defaults(loaded.config))
        return loaded


__all__ = ["ConfigNotLoadedError", "ConfigStore"]
