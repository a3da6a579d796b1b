"""
appshell: unit tests for the command-line entrypoint

File: tests/unit/test_cli.py
Last updated: 2026-10-17

Purpose
- Validate command routing, output shapes, and the exit-code contract.

What this test file should cover
- ``show``/``public``/``info``/``validate``/``secret`` happy paths.
- Config failures map to exit code 2 with the aggregated message on stderr.
- Secrets never appear in ``show`` output.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from appshell.config import ConfigLoadError, ConfigNotLoadedError
from appshell.identity import IdentityError
from appshell.main import ExitCode, _route_exception, cli_entrypoint
from appshell.ui.cli import build_parser


@pytest.fixture(autouse=True)
def _clear_app_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("APP_ENV", raising=False)


def _write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.ini"
    path.write_text(text, encoding="utf-8")
    return path


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_show_json_masks_secrets(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_config(
        tmp_path,
        "[database]\npassword = hunter2\n\n[security]\ncsrf_enabled = true\n"
        f"csrf_secret = {'z' * 40}\n",
    )

    exit_code = cli_entrypoint(["show", "--config", str(path), "--json"])

    assert exit_code == ExitCode.SUCCESS
    out = capsys.readouterr().out
    payload = json.loads(out)
    assert payload["database"]["password"] == "***MASKED***"
    assert payload["security"]["csrf_secret"] == "***MASKED***"
    assert payload["api"]["timeout"] == "30s"
    assert "hunter2" not in out


def test_public_prints_projection(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_config(tmp_path, "[window]\nwidth = 1280\n")

    exit_code = cli_entrypoint(["public", "--config", str(path)])

    assert exit_code == ExitCode.SUCCESS
    payload = json.loads(capsys.readouterr().out)
    assert payload["window"]["width"] == 1280
    assert set(payload) == {"app", "api", "window"}


def test_info_prints_metadata(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_config(tmp_path, "[app]\nname = Ledger\n")

    assert cli_entrypoint(["info", "--config", str(path)]) == ExitCode.SUCCESS

    out = capsys.readouterr().out
    assert "name: Ledger" in out
    assert "environment: development" in out


def test_validate_lists_findings(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_config(tmp_path, "[app]\ndebug = false\n")

    exit_code = cli_entrypoint(["validate", "--config", str(path)])

    assert exit_code == ExitCode.SUCCESS
    out = capsys.readouterr().out
    assert "warning: app.debug: debug mode should be enabled in development" in out
    assert "note: environment file .env.development does not exist" in out
    assert "ok:" in out


def test_validate_strict_fails_on_findings(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_config(tmp_path, "[app]\ndebug = false\n")

    exit_code = cli_entrypoint(["validate", "--config", str(path), "--strict"])

    assert exit_code == ExitCode.ADVISORY_FINDINGS
    capsys.readouterr()


def test_validate_reports_aggregated_errors(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_config(tmp_path, "[window]\nwidth = 10\n\n[log]\nlevel = verbose\n")

    exit_code = cli_entrypoint(["validate", "--config", str(path)])

    assert exit_code == ExitCode.CONFIG_ERROR
    err = capsys.readouterr().err
    assert "configuration validation failed" in err
    assert "window.width" in err
    assert "log.level" in err


def test_missing_config_is_a_config_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = cli_entrypoint(["show", "--config", str(tmp_path / "nope.ini")])

    assert exit_code == ExitCode.CONFIG_ERROR
    assert "config file not found" in capsys.readouterr().err


def test_app_env_is_honoured(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_config(tmp_path, "")
    monkeypatch.setenv("APP_ENV", "staging")

    assert cli_entrypoint(["info", "--config", str(path)]) == ExitCode.SUCCESS
    assert "environment: staging" in capsys.readouterr().out


def test_harden_flag_generates_csrf_secret(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_config(tmp_path, "[security]\ncsrf_enabled = true\n")
    monkeypatch.setenv("APP_ENV", "production")

    exit_code = cli_entrypoint(["show", "--config", str(path), "--json", "--harden"])

    assert exit_code == ExitCode.SUCCESS
    payload = json.loads(capsys.readouterr().out)
    assert payload["security"]["csrf_secret"] == "***MASKED***"
    assert payload["app"]["debug"] is False
    assert payload["database"]["ssl_mode"] == "require"


def test_secret_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_entrypoint(["secret", "--length", "40"]) == ExitCode.SUCCESS
    assert len(capsys.readouterr().out.strip()) == 40


def test_secret_command_rejects_short_length(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_entrypoint(["secret", "--length", "8"]) == ExitCode.CONFIG_ERROR
    assert "at least 16" in capsys.readouterr().err


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (ConfigNotLoadedError("configuration not loaded"), ExitCode.INTERNAL_ERROR),
        (ConfigLoadError("config file not found: x"), ExitCode.CONFIG_ERROR),
        (IdentityError("login failed: nope"), ExitCode.IDENTITY_ERROR),
    ],
)
def test_exception_routing(exc: BaseException, expected: ExitCode) -> None:
    assert _route_exception(exc) is expected


def test_exception_routing_follows_the_cause_chain() -> None:
    try:
        try:
            raise ConfigLoadError("config file not found: x")
        except ConfigLoadError as inner:
            raise RuntimeError("startup failed") from inner
    except RuntimeError as outer:
        assert _route_exception(outer) is ExitCode.CONFIG_ERROR
