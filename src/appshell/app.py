"""Backend object bound to the web frontend.

Every public method here is callable from the UI layer. The object never reads
global state: it is handed a ``ConfigStore`` at construction time.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from appshell.config.schema import APISettings
from appshell.config.store import ConfigStore
from appshell.identity.client import IdentityClient, LoginResponse


class App:
    def __init__(
        self,
        store: ConfigStore,
        *,
        identity_factory: Callable[[APISettings], IdentityClient] = IdentityClient,
    ) -> None:
        self._store = store
        self._identity_factory = identity_factory

    @property
    def store(self) -> ConfigStore:
        return self._store

    def greet(self, name: str) -> str:
        return f"Hello {name}, It's show time!"

    def get_config(self) -> dict[str, Any]:
        """Public configuration for the frontend."""
        return self._store.public().to_dict()

    def get_api_base_url(self) -> str:
        return self._store.current().api.base_url

    def get_environment(self) -> str:
        return self._store.current().environment.value

    def is_debug_mode(self) -> bool:
        return self._store.current().app.debug

    def get_app_info(self) -> dict[str, Any]:
        config = self._store.current()
        return {
            "name": config.app.name,
            "version": config.app.version,
            "environment": config.environment.value,
            "debug": config.app.debug,
        }

    def reload_config(self) -> None:
        self._store.reload()

    def login(self, username: str, password: str) -> LoginResponse:
        """Authenticate against the identity API using the current [api] settings."""
        with self._identity_factory(self._store.current().api) as client:
            return client.login(username, password)


__all__ = ["App"]
