"""
Configuration Loader (``club_config.loader``).

Responsibility
--------------
Loads the club's YAML configuration file and parses each section into the
typed values of ``club_config.schema``.  The public entry point is
``club_config.load_club_config()``; this module holds the parsing steps.

Architecture position
---------------------
**Config layer**.  Depends on ``club_kernel`` only; engines and services
never read YAML themselves.

Invariants enforced
-------------------
* Structural problems (a section that is not a mapping, an unknown Life
  rule key, a non-integer threshold, an unknown log level) raise
  ``InvalidConfigurationError`` naming the file and section.
* Rate values are parsed by ``RateSettings``: a malformed rate falls back
  to its default with a ``settings_value_defaulted`` warning instead of
  failing the whole file.
* ``compute_checksum`` produces a deterministic SHA-256 hash for change
  detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from club_config.schema import LOG_LEVELS, ClubConfiguration, LoggingConfig
from club_kernel.domain.dates import parse_local_date
from club_kernel.domain.settings import LifeRules, RateSettings
from club_kernel.exceptions import InvalidConfigurationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        InvalidConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise InvalidConfigurationError(str(path), "<root>", "document must be a mapping")
    return data


def _section(data: dict[str, Any], name: str, source: str) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidConfigurationError(source, name, "must be a mapping")
    return value


def parse_settings(data: dict[str, Any], source: str = "<memory>") -> RateSettings:
    """Parse the ``settings`` section."""
    return RateSettings.from_mapping(_section(data, "settings", source))


def parse_life_rules(data: dict[str, Any], source: str = "<memory>") -> LifeRules:
    """
    Parse the ``life_rules`` section.

    Absent keys keep the built-in thresholds; unknown keys are rejected so
    a misspelled threshold never silently falls back.
    """
    section = _section(data, "life_rules", source)
    known = {f.name for f in fields(LifeRules)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise InvalidConfigurationError(
            source, "life_rules", f"unknown keys: {', '.join(unknown)}"
        )

    values: dict[str, Any] = {}
    for key, raw in section.items():
        if key == "legacy_cutoff":
            cutoff = parse_local_date(raw)
            if cutoff is None:
                raise InvalidConfigurationError(
                    source, "life_rules", f"legacy_cutoff is not a date: {raw!r}"
                )
            values[key] = cutoff
        elif isinstance(raw, bool) or not isinstance(raw, int):
            raise InvalidConfigurationError(
                source, "life_rules", f"{key} must be an integer, got {raw!r}"
            )
        else:
            values[key] = raw

    try:
        return LifeRules(**values)
    except ValueError as exc:
        raise InvalidConfigurationError(source, "life_rules", str(exc)) from exc


def parse_logging(data: dict[str, Any], source: str = "<memory>") -> LoggingConfig:
    """Parse the ``logging`` section."""
    section = _section(data, "logging", source)
    level = str(section.get("level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise InvalidConfigurationError(source, "logging", f"unknown level {level!r}")
    return LoggingConfig(level=level)


def parse_configuration(data: dict[str, Any], source: str = "<memory>") -> ClubConfiguration:
    """Parse a whole configuration document."""
    version = data.get("version", 1)
    if isinstance(version, bool) or not isinstance(version, int):
        raise InvalidConfigurationError(source, "version", f"must be an integer, got {version!r}")

    return ClubConfiguration(
        config_id=str(data.get("config_id") or Path(source).stem),
        version=version,
        settings=parse_settings(data, source),
        life_rules=parse_life_rules(data, source),
        logging=parse_logging(data, source),
        checksum=compute_checksum(data),
        source=source,
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
