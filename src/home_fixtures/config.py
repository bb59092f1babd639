"""Configuration helpers for the home_fixtures service."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

LOGGER = logging.getLogger(__name__)

DEFAULT_SOURCE_BASE_URL = "https://system.gotsport.com/org_event/events"
DIVISION_STRATEGIES = ("cell", "team_name", "keywords")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class ConfigError(ValueError):
    """Raised when configuration values cannot be used."""


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Root configuration model."""

    tracked_team: str = "Reno Apex"
    club_prefixes: Tuple[str, ...] = ("Reno APEX Soccer Club", "Reno Apex")
    timezone: str = "America/Los_Angeles"
    source_base_url: str = DEFAULT_SOURCE_BASE_URL
    window_radius: int = 8000
    context_lines: int = 3
    expected_cells: int = 7
    opponent_min_length: int = 8
    division_strategies: Tuple[str, ...] = field(default=DIVISION_STRATEGIES)
    parse_timeout: float = 10.0
    http_timeout: float = 30.0
    http_retries: int = 1
    port: int = 8080
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.tracked_team.strip():
            raise ConfigError("tracked_team must not be empty.")
        unknown = [name for name in self.division_strategies if name not in DIVISION_STRATEGIES]
        if unknown:
            raise ConfigError(f"Unknown division strategies: {', '.join(unknown)}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Invalid log level {self.log_level!r}.")
        for name in ("window_radius", "expected_cells", "http_retries"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be at least 1.")
        if self.parse_timeout <= 0 or self.http_timeout <= 0:
            raise ConfigError("Timeouts must be positive.")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(f"Unknown timezone {self.timezone!r}.") from exc

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "AppConfig":
        defaults = cls()
        values: dict = {}

        team = mapping.get("tracked_team")
        if team is not None:
            values["tracked_team"] = str(team).strip()

        for key in ("club_prefixes", "division_strategies"):
            raw = mapping.get(key)
            if raw is None:
                continue
            if isinstance(raw, str):
                items = [item.strip() for item in raw.split(",")]
            elif isinstance(raw, Sequence):
                items = [str(item).strip() for item in raw]
            else:
                raise ConfigError(f"{key} must be a list or a comma separated string.")
            values[key] = tuple(item for item in items if item)

        for key in ("timezone", "source_base_url", "log_level"):
            raw = mapping.get(key)
            if raw is not None and str(raw).strip():
                values[key] = str(raw).strip()

        for key, caster in (
            ("window_radius", int),
            ("context_lines", int),
            ("expected_cells", int),
            ("opponent_min_length", int),
            ("parse_timeout", float),
            ("http_timeout", float),
            ("http_retries", int),
            ("port", int),
        ):
            raw = mapping.get(key)
            if raw is None or raw == "":
                continue
            try:
                values[key] = caster(raw)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Invalid value for {key}: {raw!r}") from exc

        if "log_level" in values:
            values["log_level"] = values["log_level"].upper()
        return replace(defaults, **values)


ENVIRONMENT_KEYS = {
    "PORT": "port",
    "LOG_LEVEL": "log_level",
    "TRACKED_TEAM": "tracked_team",
    "SOURCE_TIMEZONE": "timezone",
    "PARSE_TIMEOUT": "parse_timeout",
    "HTTP_TIMEOUT": "http_timeout",
}


def _read_yaml(path: Path) -> Mapping[str, object]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        raise ConfigError("Configuration file must contain a mapping at the root.")
    return data


def load_config(path: Path) -> AppConfig:
    """Load a configuration file from YAML."""

    return AppConfig.from_mapping(_read_yaml(path))


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    *,
    path: Optional[Path] = None,
) -> AppConfig:
    """Build the configuration from an optional YAML file plus environment overrides."""

    env = os.environ if environ is None else environ
    config_path = path
    if config_path is None and env.get("HOME_FIXTURES_CONFIG"):
        config_path = Path(env["HOME_FIXTURES_CONFIG"])

    mapping: dict = {}
    if config_path is not None:
        mapping.update(_read_yaml(config_path))

    for env_key, config_key in ENVIRONMENT_KEYS.items():
        value = env.get(env_key)
        if value is not None and value.strip():
            mapping[config_key] = value.strip()

    return AppConfig.from_mapping(mapping)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    LOGGER.debug("Logging configured with level %s", level.upper())
