"""Unit tests for time helpers."""

import os
import time
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from inbox_sweeper.exceptions import ConfigurationError
from inbox_sweeper.timeutils import (
    days_ago,
    format_file_timestamp,
    format_log_timestamp,
    format_search_date,
    from_epoch_ms,
    month_name,
    months_ago,
    resolve_timezone,
)

UTC = timezone.utc


@pytest.mark.parametrize(
    "value,months,expected",
    [
        (datetime(2025, 3, 31, tzinfo=UTC), 6, datetime(2024, 9, 30, tzinfo=UTC)),
        (datetime(2025, 3, 15, tzinfo=UTC), 6, datetime(2024, 9, 15, tzinfo=UTC)),
        (datetime(2024, 8, 31, tzinfo=UTC), 6, datetime(2024, 2, 29, tzinfo=UTC)),
        (datetime(2025, 1, 10, tzinfo=UTC), 1, datetime(2024, 12, 10, tzinfo=UTC)),
        (datetime(2025, 1, 10, tzinfo=UTC), 25, datetime(2022, 12, 10, tzinfo=UTC)),
    ],
)
def test_months_ago(value: datetime, months: int, expected: datetime) -> None:
    assert months_ago(value, months) == expected


def test_days_ago() -> None:
    assert days_ago(datetime(2025, 3, 31, tzinfo=UTC), 30) == datetime(2025, 3, 1, tzinfo=UTC)


def test_formats() -> None:
    value = datetime(2025, 3, 1, 7, 5, 9, tzinfo=UTC)

    assert format_log_timestamp(value, UTC) == "2025/03/01 07:05:09"
    assert format_file_timestamp(value, UTC) == "2025-03-01 07-05-09"
    assert format_search_date(value, UTC) == "2025/03/01"
    assert month_name(value, UTC) == "March"
    assert format_log_timestamp(None, UTC) == ""


def test_formats_convert_to_zone() -> None:
    value = datetime(2025, 3, 1, 2, 0, 0, tzinfo=UTC)
    tz = ZoneInfo("America/Los_Angeles")

    assert format_search_date(value, tz) == "2025/02/28"
    assert month_name(value, tz) == "February"


def test_naive_datetimes_are_in_target_zone() -> None:
    tz = ZoneInfo("Asia/Tokyo")

    assert format_log_timestamp(datetime(2025, 3, 1, 9, 0, 0), tz) == "2025/03/01 09:00:00"


def test_resolve_timezone() -> None:
    assert resolve_timezone("Europe/Paris") == ZoneInfo("Europe/Paris")
    assert resolve_timezone(None) is None


def test_resolve_unknown_timezone() -> None:
    with pytest.raises(ConfigurationError):
        resolve_timezone("Mars/Olympus_Mons")


def test_from_epoch_ms() -> None:
    assert from_epoch_ms("1735725600000") == datetime(2025, 1, 1, 10, 0, 0, tzinfo=UTC)
    assert from_epoch_ms(None) is None
    assert from_epoch_ms("not a number") is None


@pytest.fixture
def host_zone_new_york():
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "America/New_York"
    time.tzset()
    yield
    if previous is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = previous
    time.tzset()


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
def test_host_zone_applies_daylight_saving_per_date(host_zone_new_york) -> None:
    host = resolve_timezone(None)

    winter = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)
    summer = datetime(2025, 7, 15, 12, 0, 0, tzinfo=UTC)

    assert format_log_timestamp(winter, host) == "2025/01/15 07:00:00"
    assert format_log_timestamp(summer, host) == "2025/07/15 08:00:00"
    assert format_search_date(datetime(2025, 3, 1, 3, 0, 0, tzinfo=UTC), host) == "2025/02/28"
