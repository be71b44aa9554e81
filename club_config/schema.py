"""
Club configuration schema.

The YAML file a club administrator edits is parsed by the loader into these
frozen types.  Rate values and Life thresholds reuse the kernel's own
``RateSettings`` and ``LifeRules`` so the engines receive exactly what was
configured.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from club_kernel.domain.settings import DEFAULT_LIFE_RULES, LifeRules, RateSettings

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LoggingConfig:
    """Logging section."""

    level: str = "INFO"


@dataclass(frozen=True)
class ClubConfiguration:
    """
    A loaded configuration file.

    Attributes:
        config_id: Identifier declared in the file
        version: Integer version declared in the file
        settings: Billing rate parameters
        life_rules: Life-membership thresholds
        logging: Logging section
        checksum: SHA-256 of the parsed YAML, for change detection
        source: Path the configuration was read from
    """

    config_id: str
    version: int = 1
    settings: RateSettings = field(default_factory=RateSettings)
    life_rules: LifeRules = DEFAULT_LIFE_RULES
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    checksum: str = ""
    source: str = ""
