"""
appshell: runtime config loader.

File: src/appshell/config/loader.py
Last updated: 2026-10-17

Purpose
- Turn a sectioned ``config.ini`` plus the ``APP_ENV`` variable into a validated snapshot.

What should be included in this file
- INI parsing via ``configparser``.
- Per-field coercion with fallback to documented defaults for malformed values.
- Pipeline: defaults, parse, structural validation, policy advisories, adjustments.

Functional requirements
- A missing source file is a load error; missing keys are not.
- Structural issues are aggregated into one ``ConfigValidationError``.
- Policy findings are logged as warnings and never abort the load.

Non-functional requirements
- No network access; the only side effect is creating the log directory.
"""

from __future__ import annotations

import configparser
import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Final

from appshell.config.durations import parse_duration
from appshell.config.policy import ValidationFinding, run_policy_checks
from appshell.config.schema import (
    FIELD_SPECS_BY_PATH,
    SECTION_NAMES,
    AppShellConfig,
    Environment,
    FieldSpec,
    assert_valid_config,
    build_config,
    iter_section_specs,
)
from appshell.constants import DEFAULT_CONFIG_FILE, DEFAULT_ENVIRONMENT, ENVIRONMENT_VARIABLE

logger = logging.getLogger(__name__)

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})

# Legacy section whose keys fill the matching [app] fields when [app] omits them.
_LEGACY_DEVELOPMENT_SECTION: Final[str] = "development"
_LEGACY_DEVELOPMENT_KEYS: Final[tuple[str, ...]] = ("hot_reload", "dev_tools", "mock_api")

RawSections = dict[str, dict[str, str]]


class ConfigLoadError(ValueError):
    """Raised when the config source cannot be read or post-load adjustment fails."""


@dataclass(frozen=True, slots=True)
class LoadedConfig:
    """Outcome of one pipeline run: the snapshot plus the advisories it produced."""

    config: AppShellConfig
    findings: tuple[ValidationFinding, ...]
    source_path: Path

    @property
    def environment(self) -> Environment:
        return self.config.environment


def load_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> LoadedConfig:
    """Run the full load pipeline and return a validated snapshot."""

    resolved_path = resolve_config_path(config_path)
    env_map = os.environ if environ is None else environ

    raw = read_config_source(resolved_path)
    findings: list[ValidationFinding] = list(_unknown_key_findings(raw))

    values = coerce_sections(raw)
    values.setdefault("app", {})["environment"] = resolve_environment(raw, env_map)

    config = assert_valid_config(build_config(values))
    config = config.with_section("app", environment=Environment(config.app.environment))

    findings.extend(run_policy_checks(config))
    for finding in findings:
        logger.warning("Configuration advisory: %s", finding)

    config = post_validation_adjustments(config, base_dir=resolved_path.parent)
    logger.debug(
        "Configuration loaded. path=%s environment=%s", resolved_path, config.environment
    )
    return LoadedConfig(config=config, findings=tuple(findings), source_path=resolved_path)


def resolve_config_path(config_path: str | Path | None) -> Path:
    if config_path is None:
        return (Path.cwd() / DEFAULT_CONFIG_FILE).resolve()
    return Path(config_path).expanduser().resolve()


def read_config_source(path: Path) -> RawSections:
    """Parse the INI source into ``{section: {key: raw_value}}``."""

    if not path.is_file():
        raise ConfigLoadError(f"config file not found: {path}")

    parser = configparser.ConfigParser(interpolation=None)
    try:
        with path.open(encoding="utf-8") as handle:
            parser.read_file(handle, source=str(path))
    except configparser.Error as exc:
        raise ConfigLoadError(f"invalid config syntax in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc

    return {section: dict(parser.items(section)) for section in parser.sections()}


def resolve_environment(raw: Mapping[str, Mapping[str, str]], environ: Mapping[str, str]) -> str:
    """``APP_ENV`` wins when set; then ``[app] environment``; then development.

    The value is returned verbatim so an unknown name fails structural validation.
    """

    from_env = environ.get(ENVIRONMENT_VARIABLE, "").strip()
    if from_env:
        return from_env
    from_file = raw.get("app", {}).get("environment", "").strip()
    if from_file:
        return from_file
    return DEFAULT_ENVIRONMENT


def coerce_sections(raw: Mapping[str, Mapping[str, str]]) -> dict[str, dict[str, Any]]:
    """Coerce each known key; malformed or empty values are left out so defaults apply."""

    merged = _apply_legacy_development_section(raw)
    values: dict[str, dict[str, Any]] = {}
    for section in SECTION_NAMES:
        section_raw = merged.get(section, {})
        parsed: dict[str, Any] = {}
        for spec in iter_section_specs(section):
            if spec.key not in section_raw:
                continue
            coerced = coerce_value(spec, section_raw[spec.key])
            if coerced is not _MISSING:
                parsed[spec.key] = coerced
        values[section] = parsed
    return values


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"


_MISSING: Final = _Missing()


def coerce_value(spec: FieldSpec, raw: str) -> Any:
    """Coerce one raw string for ``spec``; returns ``_MISSING`` to request the default."""

    text = raw.strip()
    if spec.kind == "list":
        return parse_list(text)
    if not text:
        return _MISSING

    try:
        return _COERCERS[spec.kind](text)
    except ValueError:
        logger.debug(
            "Malformed value ignored; using default. field=%s value=%r default=%r",
            spec.path,
            text,
            spec.default,
        )
        return _MISSING


def parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise ValueError(f"not a boolean: {text!r}")


def parse_int(text: str) -> int:
    stripped = text.strip()
    if not stripped.lstrip("+-").isdigit() or not stripped.isascii():
        raise ValueError(f"not a base-10 integer: {text!r}")
    return int(stripped, 10)


def parse_list(text: str) -> tuple[str, ...]:
    """Split on commas, trim each element, drop empties. ``""`` yields ``()``."""

    if not text.strip():
        return ()
    return tuple(item.strip() for item in text.split(",") if item.strip())


_COERCERS: Final[dict[str, Callable[[str], Any]]] = {
    "str": str,
    "enum": str,
    "int": parse_int,
    "bool": parse_bool,
    "duration": parse_duration,
}


def post_validation_adjustments(config: AppShellConfig, *, base_dir: Path) -> AppShellConfig:
    """Create the log directory when logging to a file and derive the user agent."""

    adjusted = config
    if adjusted.log.writes_file:
        log_path = Path(adjusted.log.file_path).expanduser()
        if not log_path.is_absolute():
            log_path = base_dir / log_path
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigLoadError(
                f"failed to create log directory {log_path.parent}: {exc}"
            ) from exc
        adjusted = adjusted.with_section("log", file_path=log_path.as_posix())

    if not adjusted.api.user_agent:
        adjusted = adjusted.with_section(
            "api", user_agent=f"{adjusted.app.name}/{adjusted.app.version}"
        )

    return adjusted


def _apply_legacy_development_section(
    raw: Mapping[str, Mapping[str, str]],
) -> dict[str, dict[str, str]]:
    merged = {section: dict(items) for section, items in raw.items()}
    legacy = merged.get(_LEGACY_DEVELOPMENT_SECTION)
    if not legacy:
        return merged
    app = merged.setdefault("app", {})
    for key in _LEGACY_DEVELOPMENT_KEYS:
        if key in legacy and key not in app:
            app[key] = legacy[key]
    return merged


def _unknown_key_findings(raw: Mapping[str, Mapping[str, str]]) -> list[ValidationFinding]:
    findings: list[ValidationFinding] = []
    for section in sorted(raw):
        if section == _LEGACY_DEVELOPMENT_SECTION:
            unknown = sorted(set(raw[section]) - set(_LEGACY_DEVELOPMENT_KEYS))
            findings.extend(
                ValidationFinding.warning("unknown field", f"{section}.{key}") for key in unknown
            )
            continue
        if section not in SECTION_NAMES:
            findings.append(ValidationFinding.warning("unknown section", section))
            continue
        for key in sorted(raw[section]):
            if f"{section}.{key}" not in FIELD_SPECS_BY_PATH:
                findings.append(ValidationFinding.warning("unknown field", f"{section}.{key}"))
    return findings


def replace_config(loaded: LoadedConfig, config: AppShellConfig) -> LoadedConfig:
    return replace(loaded, config=config)


__all__ = [
    "ConfigLoadError",
    "LoadedConfig",
    "coerce_sections",
    "coerce_value",
    "load_config",
    "parse_bool",
    "parse_int",
    "parse_list",
    "post_validation_adjustments",
    "read_config_source",
    "replace_config",
    "resolve_config_path",
    "resolve_environment",
]
