"""Command-line interface for inspecting and validating appshell configuration."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from appshell.app import App
from appshell.config import (
    ConfigStore,
    check_environment_file,
    config_as_dict,
    generate_secure_secret,
    sanitize_config,
)
from appshell.constants import GENERATED_SECRET_LENGTH, MIN_GENERATED_SECRET_LENGTH
from appshell.observability import setup_logging


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appshell",
        description=(
            "appshell desktop backend configuration tools.\n\n"
            "Common workflows:\n"
            "  appshell validate            Load config.ini and report advisories\n"
            "  appshell show --json         Dump the effective config with secrets masked\n"
            "  appshell public              Print what the frontend is allowed to see\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to the INI config (default: ./config.ini).",
    )
    common.add_argument(
        "--harden",
        action="store_true",
        default=False,
        help="Apply security defaults (generated CSRF secret, production hardening).",
    )
    common.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Configure logging from the [log] section before running the command.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser(
        "show", parents=[common], help="Show the effective configuration (secrets masked)"
    )
    show_parser.add_argument("--json", action="store_true", help="Emit compact JSON output")
    show_parser.set_defaults(handler=_cmd_show)

    public_parser = subparsers.add_parser(
        "public", parents=[common], help="Show the public projection sent to the frontend"
    )
    public_parser.set_defaults(handler=_cmd_public)

    info_parser = subparsers.add_parser(
        "info", parents=[common], help="Show application name, version, and environment"
    )
    info_parser.set_defaults(handler=_cmd_info)

    validate_parser = subparsers.add_parser(
        "validate", parents=[common], help="Load the config and list advisory findings"
    )
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Exit with status 1 when any advisory finding is reported.",
    )
    validate_parser.set_defaults(handler=_cmd_validate)

    secret_parser = subparsers.add_parser("secret", help="Generate a random secret")
    secret_parser.add_argument(
        "--length",
        type=int,
        default=GENERATED_SECRET_LENGTH,
        help=f"Secret length in characters (default: {GENERATED_SECRET_LENGTH}).",
    )
    secret_parser.set_defaults(handler=_cmd_secret)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_show(args: argparse.Namespace) -> int:
    store = _load_store(args)
    payload = config_as_dict(sanitize_config(store.current()))
    if args.json:
        _emit_json(payload)
    else:
        print(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))
    return 0


def _cmd_public(args: argparse.Namespace) -> int:
    app = App(_load_store(args))
    print(json.dumps(app.get_config(), indent=2, sort_keys=True, ensure_ascii=False))
    return 0


def _cmd_info(args: argparse.Namespace) -> int:
    app = App(_load_store(args))
    for key, value in app.get_app_info().items():
        print(f"{key}: {value}")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    store = _load_store(args)
    findings = list(store.findings)
    for finding in findings:
        print(finding)

    env_note = check_environment_file(store.current().environment, store.source_path.parent)
    if env_note is not None:
        print(f"note: {env_note}")

    print(
        f"ok: {store.source_path} ({store.current().environment}, "
        f"{len(findings)} advisory finding(s))"
    )
    if args.strict and findings:
        return 1
    return 0


def _cmd_secret(args: argparse.Namespace) -> int:
    if args.length < MIN_GENERATED_SECRET_LENGTH:
        raise CLIError(
            f"--length must be at least {MIN_GENERATED_SECRET_LENGTH}", exit_code=2
        )
    print(generate_secure_secret(args.length))
    return 0


def _load_store(args: argparse.Namespace) -> ConfigStore:
    store = ConfigStore(args.config_path, harden=args.harden)
    config = store.load()
    if args.log:
        setup_logging(config.log)
    return store


def _emit_json(payload: Mapping[str, object]) -> None:
    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


__all__ = ["CLIError", "build_parser", "run_cli"]
