"""Tests for configuration loading."""

from zoneinfo import ZoneInfo

import pytest

from taskmaster.config import Config, load_config
from taskmaster.core.tasks import Weekday
from taskmaster.core.windows import TodayPolicy


@pytest.fixture
def write_conf(tmp_path):
    def _write(text: str):
        path = tmp_path / "taskmaster.conf"
        path.write_text(text)
        return path

    return _write


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.conf")
        assert config == Config()

    def test_reads_values(self, write_conf):
        path = write_conf(
            """
# Taskmaster settings
API_BASE_URL="https://tasks.example.com/"
TIMEZONE=Asia/Jakarta
WEEK_START=Monday
TODAY_POLICY=DUE_TODAY
CALENDAR_CELL_LIMIT=5
REFRESH_INTERVAL_SECONDS=30
REMINDER_CHECK_SECONDS=15  # quarter minute
REQUEST_TIMEOUT=2.5
"""
        )
        config = load_config(path)

        assert config.api_base_url == "https://tasks.example.com"
        assert config.timezone == "Asia/Jakarta"
        assert config.first_weekday is Weekday.MONDAY
        assert config.policy is TodayPolicy.DUE_TODAY
        assert config.calendar_cell_limit == 5
        assert config.refresh_interval_seconds == 30
        assert config.reminder_check_seconds == 15
        assert config.request_timeout == 2.5

    def test_invalid_number_keeps_default(self, write_conf):
        config = load_config(write_conf("CALENDAR_CELL_LIMIT=many\n"))
        assert config.calendar_cell_limit == 3

    def test_ignores_unknown_and_malformed_lines(self, write_conf):
        config = load_config(write_conf("SOMETHING_ELSE=1\nnot a setting\n"))
        assert config == Config()

    def test_single_quotes_keep_hash(self, write_conf):
        config = load_config(write_conf("API_BASE_URL='http://host/#frag'\n"))
        assert config.api_base_url == "http://host/#frag"


class TestProperties:
    def test_tz(self):
        assert Config(timezone="Europe/Berlin").tz == ZoneInfo("Europe/Berlin")

    def test_unknown_tz_falls_back_to_utc(self):
        assert Config(timezone="Mars/Olympus").tz == ZoneInfo("UTC")

    def test_invalid_week_start(self):
        assert Config(week_start="someday").first_weekday is Weekday.SUNDAY

    def test_invalid_policy(self):
        assert Config(today_policy="whenever").policy is TodayPolicy.ALL_ACTIVE
