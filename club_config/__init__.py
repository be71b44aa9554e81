"""
club_config -- single public entrypoint for club configuration.

Responsibility:
    Provides ``load_club_config()``, which reads the club's YAML file and
    returns a frozen ``ClubConfiguration``: billing rates, Life-membership
    thresholds and the logging level.

Architecture position:
    Configuration -- sits above ``club_kernel`` and beside
    ``club_engines``.  The kernel and engines MUST NEVER import from
    ``club_config``; callers pass the parsed values into engines and
    services explicitly.

Invariants enforced:
    - No global state: there is no cache and no module-level settings
      object.  Each call returns a fresh immutable value.
    - Deterministic checksum: the same YAML always produces the same
      ``ClubConfiguration.checksum``.

Failure modes:
    - ``FileNotFoundError`` -- the requested file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``InvalidConfigurationError`` -- a section has the wrong shape.

Audit relevance:
    Every successful call emits a ``CLUB_CONFIG_TRACE`` log entry carrying
    the config_id, version, checksum and source path, tying each billing
    run to the exact configuration that priced it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from club_config.loader import load_yaml_file, parse_configuration
from club_config.schema import ClubConfiguration, LoggingConfig

__all__ = [
    "ClubConfiguration",
    "LoggingConfig",
    "DEFAULT_CONFIG_PATH",
    "load_club_config",
]

_logger = logging.getLogger("club_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def load_club_config(path: Path | str | None = None) -> ClubConfiguration:
    """
    Load a club configuration file.

    Args:
        path: YAML file to read.  Defaults to the bundled
            ``club_config/sets/default.yaml``.

    Returns:
        ClubConfiguration.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        InvalidConfigurationError: If a section has the wrong shape.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    data = load_yaml_file(config_path)
    config = parse_configuration(data, source=str(config_path))

    _logger.info(
        "CLUB_CONFIG_TRACE",
        extra={
            "trace_type": "CLUB_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source": config.source,
        },
    )
    return config
