"""Unit tests for the frontend-bound ``App`` object."""

from __future__ import annotations

from pathlib import Path

import pytest

from appshell.app import App
from appshell.config.schema import APISettings
from appshell.config.store import ConfigNotLoadedError, ConfigStore
from appshell.identity.client import LoginData, LoginResponse


def _store(tmp_path: Path, text: str, environ: dict[str, str] | None = None) -> ConfigStore:
    path = tmp_path / "config.ini"
    path.write_text(text, encoding="utf-8")
    store = ConfigStore(path, environ={} if environ is None else environ)
    store.load()
    return store


class _RecordingIdentityClient:
    def __init__(self, api: APISettings) -> None:
        self.api = api
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    def __enter__(self) -> _RecordingIdentityClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True

    def login(self, username: str, password: str) -> LoginResponse:
        self.calls.append((username, password))
        return LoginResponse(
            code="OK", success=True, status_code=200, message="", data=LoginData()
        )


def test_read_surface_reflects_snapshot(tmp_path: Path) -> None:
    app = App(
        _store(
            tmp_path,
            "[app]\nname = Ledger\nversion = 2.0.0\ndebug = false\n\n"
            "[api]\nbase_url = http://localhost:9000/api\n",
        )
    )

    assert app.get_api_base_url() == "http://localhost:9000/api"
    assert app.get_environment() == "development"
    assert app.is_debug_mode() is False
    assert app.get_app_info() == {
        "name": "Ledger",
        "version": "2.0.0",
        "environment": "development",
        "debug": False,
    }


def test_get_config_returns_public_projection(tmp_path: Path) -> None:
    app = App(_store(tmp_path, "[database]\npassword = hunter2\n"))

    payload = app.get_config()

    assert set(payload) == {"app", "api", "window"}
    assert payload["api"] == {"timeout": 30000, "retryCount": 3}
    assert "hunter2" not in repr(payload)


def test_reload_config_picks_up_changes(tmp_path: Path) -> None:
    environ: dict[str, str] = {}
    store = _store(tmp_path, "", environ)
    app = App(store)
    assert app.get_environment() == "development"

    environ["APP_ENV"] = "staging"
    app.reload_config()

    assert app.get_environment() == "staging"


def test_unloaded_store_is_a_programming_error(tmp_path: Path) -> None:
    app = App(ConfigStore(tmp_path / "config.ini", environ={}))

    with pytest.raises(ConfigNotLoadedError):
        app.get_environment()


def test_login_uses_current_api_settings(tmp_path: Path) -> None:
    created: list[_RecordingIdentityClient] = []

    def factory(api: APISettings) -> _RecordingIdentityClient:
        client = _RecordingIdentityClient(api)
        created.append(client)
        return client

    app = App(_store(tmp_path, "[api]\nretry_count = 5\n"), identity_factory=factory)  # type: ignore[arg-type]

    response = app.login("alice", "pw")

    assert response.success is True
    assert created[0].api.retry_count == 5
    assert created[0].calls == [("alice", "pw")]
    assert created[0].closed is True


def test_greet(tmp_path: Path) -> None:
    app = App(_store(tmp_path, ""))
    assert app.greet("Ada") == "Hello Ada, It's show time!"
