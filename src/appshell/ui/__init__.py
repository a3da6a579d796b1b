"""Operator-facing command-line surface."""

from appshell.ui.cli import CLIError, build_parser, run_cli

__all__ = ["CLIError", "build_parser", "run_cli"]
