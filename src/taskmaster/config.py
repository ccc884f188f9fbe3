"""Configuration management for Taskmaster."""

import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .core.tasks import Weekday
from .core.windows import TodayPolicy

logger = logging.getLogger(__name__)

TASKMASTER_HOME = Path(os.environ.get("TASKMASTER_HOME", Path.home() / "taskmaster"))
CONFIG_FILE = TASKMASTER_HOME / "config" / "taskmaster.conf"
SESSION_FILE = TASKMASTER_HOME / "config" / ".session.json"


@dataclass
class Config:
    """Taskmaster configuration."""

    api_base_url: str = "http://localhost:3000"
    timezone: str = "UTC"
    week_start: str = "Sunday"
    today_policy: str = TodayPolicy.ALL_ACTIVE.value
    calendar_cell_limit: int = 3
    refresh_interval_seconds: int = 60
    reminder_check_seconds: int = 60
    request_timeout: float = 10.0

    @property
    def tz(self) -> tzinfo:
        """Reference timezone for every calendar-day comparison."""
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone {self.timezone!r}, using UTC")
            return ZoneInfo("UTC")

    @property
    def first_weekday(self) -> Weekday:
        try:
            return Weekday.parse(self.week_start)
        except ValueError:
            logger.warning(f"Invalid WEEK_START {self.week_start!r}, using Sunday")
            return Weekday.SUNDAY

    @property
    def policy(self) -> TodayPolicy:
        try:
            return TodayPolicy(self.today_policy)
        except ValueError:
            logger.warning(f"Invalid TODAY_POLICY {self.today_policy!r}, using all_active")
            return TodayPolicy.ALL_ACTIVE


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_number(key: str, value: str, cast, default):
    try:
        return cast(value)
    except ValueError:
        logger.warning(f"Invalid {key.upper()} value {value!r}, keeping {default}")
        return default


def load_config(path: Path | None = None) -> Config:
    """Load configuration from taskmaster.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "api_base_url":
                config.api_base_url = value.rstrip("/")
            case "timezone":
                config.timezone = value
            case "week_start":
                config.week_start = value
            case "today_policy":
                config.today_policy = value.lower()
            case "calendar_cell_limit":
                config.calendar_cell_limit = _parse_number(key, value, int, config.calendar_cell_limit)
            case "refresh_interval_seconds":
                config.refresh_interval_seconds = _parse_number(
                    key, value, int, config.refresh_interval_seconds
                )
            case "reminder_check_seconds":
                config.reminder_check_seconds = _parse_number(
                    key, value, int, config.reminder_check_seconds
                )
            case "request_timeout":
                config.request_timeout = _parse_number(key, value, float, config.request_timeout)
            case _:
                logger.debug(f"Ignoring unknown config key {key!r}")

    return config
