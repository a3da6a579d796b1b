"""Duration parsing and formatting for configuration values.

Accepted input forms:

- unit-suffixed strings such as ``"30s"``, ``"5m"``, ``"1.5h"`` or ``"2h45m"``
  (units: ``ns``, ``us``/``µs``, ``ms``, ``s``, ``m``, ``h``);
- bare integers, interpreted as whole seconds (``"30"`` == ``"30s"``).
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Final

_UNIT_MICROSECONDS: Final[dict[str, float]] = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}

_COMPONENT_PATTERN: Final[re.Pattern[str]] = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")
_INTEGER_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")


class DurationParseError(ValueError):
    """Raised when a duration string is not in a recognised form."""


def parse_duration(raw: str) -> timedelta:
    """Parse a unit-suffixed duration or a bare integer number of seconds."""

    text = raw.strip()
    if not text:
        raise DurationParseError("empty duration")

    if _INTEGER_PATTERN.fullmatch(text):
        return _checked_timedelta(raw, seconds=int(text))

    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)

    total_us = 0.0
    position = 0
    while position < len(text):
        match = _COMPONENT_PATTERN.match(text, position)
        if match is None:
            raise DurationParseError(f"invalid duration {raw!r}")
        total_us += float(match.group(1)) * _UNIT_MICROSECONDS[match.group(2)]
        position = match.end()

    if position == 0:
        raise DurationParseError(f"invalid duration {raw!r}")
    return _checked_timedelta(raw, microseconds=sign * total_us)


def _checked_timedelta(raw: str, **parts: float) -> timedelta:
    try:
        return timedelta(**parts)
    except OverflowError as exc:
        raise DurationParseError(f"duration out of range {raw!r}") from exc


def format_duration(value: timedelta) -> str:
    """Render ``value`` in the compact ``1h2m3s`` form used in messages and dumps."""

    total_us = int(round(value.total_seconds() * 1_000_000))
    if total_us == 0:
        return "0s"

    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)

    if total_us < 1_000_000:
        if total_us % 1_000 == 0:
            return f"{sign}{total_us // 1_000}ms"
        return f"{sign}{total_us}µs"

    hours, remainder = divmod(total_us, 3_600_000_000)
    minutes, remainder = divmod(remainder, 60_000_000)
    seconds = remainder / 1_000_000

    parts: list[str] = []
    if hours:
        parts.append(f"{hours}h")
    if hours or minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{seconds:g}s")
    return sign + "".join(parts)


__all__ = ["DurationParseError", "format_duration", "parse_duration"]
