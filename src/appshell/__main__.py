"""Module entrypoint for ``python -m appshell``."""

from __future__ import annotations

from appshell.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
