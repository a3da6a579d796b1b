"""
appshell: identity service login client.

File: src/appshell/identity/client.py
Last updated: 2026-10-17

Purpose
- POST credentials to ``<base_url>/identity/login`` and parse the response envelope.

Functional requirements
- Timeout, retry count, retry delay, and User-Agent come from the ``[api]`` section.
- Transport errors and 5xx responses are retried; 4xx responses are not.
- ``success: false`` in the envelope is a login failure.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import requests

from appshell.config.schema import APISettings
from appshell.constants import LOGIN_PATH

logger = logging.getLogger(__name__)


class IdentityError(RuntimeError):
    """Raised when a login request cannot be completed or is rejected."""


@dataclass(frozen=True, slots=True)
class User:
    id: str = ""
    username: str = ""
    name: str = ""
    email: str = ""
    gender: str = ""
    roles: tuple[str, ...] = ()
    scopes: tuple[str, ...] = ()
    created_at: str = ""
    current_tenant_id: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> User:
        return cls(
            id=str(payload.get("id", "")),
            username=str(payload.get("username", "")),
            name=str(payload.get("name", "")),
            email=str(payload.get("email", "")),
            gender=str(payload.get("gender", "")),
            roles=tuple(str(item) for item in payload.get("roles") or ()),
            scopes=tuple(str(item) for item in payload.get("scopes") or ()),
            created_at=str(payload.get("created_at", "")),
            current_tenant_id=str(payload.get("current_tenant_id", "")),
        )


@dataclass(frozen=True, slots=True)
class LoginData:
    access_token: str = field(default="", repr=False)
    refresh_token: str = field(default="", repr=False)
    expires_in: int = 0
    token_type: str = ""
    user: User = field(default_factory=User)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> LoginData:
        user = payload.get("user")
        return cls(
            access_token=str(payload.get("access_token", "")),
            refresh_token=str(payload.get("refresh_token", "")),
            expires_in=int(payload.get("expires_in") or 0),
            token_type=str(payload.get("token_type", "")),
            user=User.from_payload(user) if isinstance(user, Mapping) else User(),
        )


@dataclass(frozen=True, slots=True)
class LoginResponse:
    code: str
    success: bool
    status_code: int
    message: str
    data: LoginData

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> LoginResponse:
        data = payload.get("data")
        return cls(
            code=str(payload.get("code", "")),
            success=bool(payload.get("success", False)),
            status_code=int(payload.get("statusCode") or 0),
            message=str(payload.get("message", "")),
            data=LoginData.from_payload(data) if isinstance(data, Mapping) else LoginData(),
        )


class IdentityClient:
    """Synchronous client for the external identity API."""

    def __init__(
        self,
        api: APISettings,
        *,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._api = api
        self._owns_session = session is None
        self._session = requests.Session() if session is None else session
        self._sleep = sleep

    def __enter__(self) -> IdentityClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self._session.close()

    @property
    def login_url(self) -> str:
        return f"{self._api.base_url.rstrip('/')}{LOGIN_PATH}"

    def login(self, username: str, password: str) -> LoginResponse:
        response = self._post_with_retry({"username": username, "password": password})

        try:
            payload = response.json()
        except ValueError as exc:
            raise IdentityError(f"failed to parse response: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise IdentityError("failed to parse response: expected a JSON object")

        try:
            login_response = LoginResponse.from_payload(payload)
        except (TypeError, ValueError) as exc:
            raise IdentityError(f"failed to parse response: {exc}") from exc

        if not login_response.success:
            raise IdentityError(f"login failed: {login_response.message}")

        logger.info("Login succeeded. user=%s", login_response.data.user.username or username)
        return login_response

    def _post_with_retry(self, body: Mapping[str, str]) -> requests.Response:
        attempts = self._api.retry_count + 1
        timeout = self._api.timeout.total_seconds()
        delay = max(self._api.retry_delay.total_seconds(), 0.0)
        headers = {"Content-Type": "application/json", "User-Agent": self._api.user_agent}

        last_error: Exception | None = None
        response: requests.Response | None = None
        for attempt in range(1, attempts + 1):
            try:
                response = self._session.post(
                    self.login_url, json=dict(body), headers=headers, timeout=timeout
                )
                last_error = None
            except requests.RequestException as exc:
                last_error = exc
                response = None
                logger.warning(
                    "Login request failed. attempt=%s/%s error=%s", attempt, attempts, exc
                )
            else:
                if response.status_code < 500:
                    return response
                logger.warning(
                    "Login request returned server error. attempt=%s/%s status=%s",
                    attempt,
                    attempts,
                    response.status_code,
                )

            if attempt < attempts:
                self._sleep(delay)

        if last_error is not None:
            raise IdentityError(
                f"failed to send request after {attempts} attempts: {last_error}"
            ) from last_error
        assert response is not None
        return response


__all__ = ["IdentityClient", "IdentityError", "LoginData", "LoginResponse", "User"]
