"""Extract a club team's upcoming weekend home games from schedule pages."""

__version__ = "0.3.0"

from .config import AppConfig, ConfigError, load_config, load_settings
from .dates import TargetWeekend, upcoming_weekend
from .extraction import extract_home_games, extract_with_timeout
from .fetcher import FetchError, fetch_schedule
from .records import LEAGUE, TBD, GameRecord, dedupe_records

__all__ = [
    "AppConfig",
    "ConfigError",
    "FetchError",
    "GameRecord",
    "LEAGUE",
    "TBD",
    "TargetWeekend",
    "dedupe_records",
    "extract_home_games",
    "extract_with_timeout",
    "fetch_schedule",
    "load_config",
    "load_settings",
    "upcoming_weekend",
]
