"""
appshell: unit tests for the identity login client

File: tests/unit/identity/test_client.py
Last updated: 2026-10-17

Purpose
- Validate request shape, retry policy, and envelope parsing without network access.

What this test file should cover
- POST body, headers, URL, and timeout derived from ``[api]`` settings.
- Retries on transport errors and 5xx responses, none on 4xx.
- Failure envelopes and undecodable bodies raise ``IdentityError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

import pytest
import requests

from appshell.config.schema import APISettings, default_config
from appshell.identity.client import IdentityClient, IdentityError, LoginResponse

_SUCCESS_ENVELOPE: dict[str, Any] = {
    "code": "OK",
    "success": True,
    "statusCode": 200,
    "message": "logged in",
    "data": {
        "access_token": "access-abc",
        "refresh_token": "refresh-def",
        "expires_in": 3600,
        "token_type": "Bearer",
        "user": {
            "id": "u-1",
            "username": "alice",
            "name": "Alice",
            "email": "alice@example.com",
            "roles": ["admin"],
            "scopes": ["read", "write"],
            "current_tenant_id": "t-9",
        },
    },
}


class _FakeResponse:
    def __init__(self, status_code: int, payload: object = None, *, raw: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self._raw = raw

    def json(self) -> object:
        if self._raw is not None:
            raise ValueError(f"Expecting value: {self._raw!r}")
        return self._payload


@dataclass
class _FakeSession:
    outcomes: list[object]
    calls: list[dict[str, Any]] = field(default_factory=list)

    def post(self, url: str, **kwargs: Any) -> object:
        self.calls.append({"url": url, **kwargs})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def _api(**changes: object) -> APISettings:
    base = default_config().with_section(
        "api",
        base_url="https://id.example.com/api/",
        user_agent="AppShell/1.0.0",
        timeout=timedelta(seconds=12),
        retry_count=2,
        retry_delay=timedelta(milliseconds=250),
    )
    return base.with_section("api", **changes).api if changes else base.api


def _client(session: _FakeSession, sleeps: list[float], **changes: object) -> IdentityClient:
    return IdentityClient(_api(**changes), session=session, sleep=sleeps.append)  # type: ignore[arg-type]


def test_login_posts_credentials_with_configured_headers() -> None:
    session = _FakeSession([_FakeResponse(200, _SUCCESS_ENVELOPE)])
    sleeps: list[float] = []

    response = _client(session, sleeps).login("alice", "pw")

    assert isinstance(response, LoginResponse)
    assert len(session.calls) == 1
    call = session.calls[0]
    assert call["url"] == "https://id.example.com/api/identity/login"
    assert call["json"] == {"username": "alice", "password": "pw"}
    assert call["headers"] == {"Content-Type": "application/json", "User-Agent": "AppShell/1.0.0"}
    assert call["timeout"] == 12.0
    assert sleeps == []


def test_login_parses_envelope() -> None:
    session = _FakeSession([_FakeResponse(200, _SUCCESS_ENVELOPE)])

    response = _client(session, []).login("alice", "pw")

    assert response.success is True
    assert response.status_code == 200
    assert response.data.access_token == "access-abc"
    assert response.data.expires_in == 3600
    assert response.data.user.username == "alice"
    assert response.data.user.roles == ("admin",)
    assert response.data.user.current_tenant_id == "t-9"
    assert "access-abc" not in repr(response.data)


def test_transport_errors_are_retried_then_succeed() -> None:
    session = _FakeSession(
        [
            requests.ConnectionError("refused"),
            _FakeResponse(503, {"success": False}),
            _FakeResponse(200, _SUCCESS_ENVELOPE),
        ]
    )
    sleeps: list[float] = []

    response = _client(session, sleeps).login("alice", "pw")

    assert response.success is True
    assert len(session.calls) == 3
    assert sleeps == [0.25, 0.25]


def test_exhausted_retries_raise_identity_error() -> None:
    session = _FakeSession([requests.Timeout("slow")] * 3)
    sleeps: list[float] = []

    with pytest.raises(IdentityError, match="failed to send request after 3 attempts"):
        _client(session, sleeps).login("alice", "pw")

    assert len(session.calls) == 3
    assert len(sleeps) == 2


def test_zero_retry_count_makes_a_single_attempt() -> None:
    session = _FakeSession([requests.ConnectionError("refused")])

    with pytest.raises(IdentityError):
        _client(session, [], retry_count=0).login("alice", "pw")

    assert len(session.calls) == 1


def test_client_errors_are_not_retried() -> None:
    session = _FakeSession(
        [_FakeResponse(401, {"success": False, "statusCode": 401, "message": "bad credentials"})]
    )

    with pytest.raises(IdentityError, match="login failed: bad credentials"):
        _client(session, []).login("alice", "wrong")

    assert len(session.calls) == 1


def test_persistent_server_errors_surface_the_last_response() -> None:
    session = _FakeSession([_FakeResponse(502, {"success": False, "message": "gateway"})] * 3)

    with pytest.raises(IdentityError, match="login failed: gateway"):
        _client(session, []).login("alice", "pw")

    assert len(session.calls) == 3


def test_undecodable_body_raises_identity_error() -> None:
    session = _FakeSession([_FakeResponse(200, raw="<html>")])

    with pytest.raises(IdentityError, match="failed to parse response"):
        _client(session, []).login("alice", "pw")


def test_non_object_body_raises_identity_error() -> None:
    session = _FakeSession([_FakeResponse(200, ["not", "an", "object"])])

    with pytest.raises(IdentityError, match="expected a JSON object"):
        _client(session, []).login("alice", "pw")


def test_negative_retry_delay_does_not_sleep_backwards() -> None:
    session = _FakeSession([requests.ConnectionError("refused")] * 2)
    sleeps: list[float] = []

    with pytest.raises(IdentityError, match="after 2 attempts"):
        _client(session, sleeps, retry_count=1, retry_delay=timedelta(seconds=-1)).login(
            "alice", "pw"
        )

    assert sleeps == [0.0]


class _ClosableSession(_FakeSession):
    closed: bool = False

    def close(self) -> None:
        self.closed = True


def test_owned_session_is_closed_on_exit(monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[_ClosableSession] = []

    def _session_factory() -> _ClosableSession:
        session = _ClosableSession([_FakeResponse(200, _SUCCESS_ENVELOPE)])
        created.append(session)
        return session

    monkeypatch.setattr("appshell.identity.client.requests.Session", _session_factory)

    with IdentityClient(_api(), sleep=lambda _: None) as client:
        client.login("alice", "pw")

    assert len(created) == 1
    assert created[0].closed is True


def test_injected_session_is_left_open() -> None:
    session = _ClosableSession([_FakeResponse(200, _SUCCESS_ENVELOPE)])

    with _client(session, []) as client:
        client.login("alice", "pw")

    assert session.closed is False
