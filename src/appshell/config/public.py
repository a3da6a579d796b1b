"""Public projection: the configuration subset safe to hand to the frontend."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from appshell.config.schema import AppShellConfig, Environment


@dataclass(frozen=True, slots=True)
class PublicAppConfig:
    environment: Environment
    name: str
    version: str
    debug: bool


@dataclass(frozen=True, slots=True)
class PublicAPIConfig:
    timeout: timedelta
    retry_count: int


@dataclass(frozen=True, slots=True)
class PublicWindowConfig:
    width: int
    height: int
    resizable: bool
    fullscreen: bool


@dataclass(frozen=True, slots=True)
class PublicConfig:
    app: PublicAppConfig
    api: PublicAPIConfig
    window: PublicWindowConfig

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Frontend wire shape: camelCase keys, timeout in milliseconds."""

        return {
            "app": {
                "environment": self.app.environment.value,
                "name": self.app.name,
                "version": self.app.version,
                "debug": self.app.debug,
            },
            "api": {
                "timeout": int(self.api.timeout.total_seconds() * 1000),
                "retryCount": self.api.retry_count,
            },
            "window": {
                "width": self.window.width,
                "height": self.window.height,
                "resizable": self.window.resizable,
                "fullscreen": self.window.fullscreen,
            },
        }


def build_public_config(config: AppShellConfig) -> PublicConfig:
    """Copy whitelisted fields only. Credentials and database details never cross over."""

    return PublicConfig(
        app=PublicAppConfig(
            environment=config.environment,
            name=config.app.name,
            version=config.app.version,
            debug=config.app.debug,
        ),
        api=PublicAPIConfig(
            timeout=config.api.timeout,
            retry_count=config.api.retry_count,
        ),
        window=PublicWindowConfig(
            width=config.window.width,
            height=config.window.height,
            resizable=config.window.resizable,
            fullscreen=config.window.fullscreen,
        ),
    )


__all__ = [
    "PublicAPIConfig",
    "PublicAppConfig",
    "PublicConfig",
    "PublicWindowConfig",
    "build_public_config",
]
