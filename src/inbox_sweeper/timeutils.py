"""Time zone resolution and the fixed timestamp formats used in logs."""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from inbox_sweeper.exceptions import ConfigurationError

LOG_TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"
FILE_TIMESTAMP_FORMAT = "%Y-%m-%d %H-%M-%S"
SEARCH_DATE_FORMAT = "%Y/%m/%d"


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Return the configured zone, or None for the host zone.

    `localize` resolves None per value, applying the host's daylight saving
    rules to each date.
    """

    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationError(f"Unknown time zone: {name}") from exc

    return None


def localize(value: datetime, tz: tzinfo | None) -> datetime:
    # Naive datetimes are taken to be in the target zone already.
    # A tz of None is the host zone.
    if tz is None:
        return value.astimezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def format_log_timestamp(value: datetime | None, tz: tzinfo | None) -> str:
    if value is None:
        return ""
    return localize(value, tz).strftime(LOG_TIMESTAMP_FORMAT)


def format_file_timestamp(value: datetime, tz: tzinfo | None) -> str:
    return localize(value, tz).strftime(FILE_TIMESTAMP_FORMAT)


def format_search_date(value: datetime, tz: tzinfo | None) -> str:
    return localize(value, tz).strftime(SEARCH_DATE_FORMAT)


def month_name(value: datetime, tz: tzinfo | None) -> str:
    """Full English month name, used for the per-month log folder."""

    return calendar.month_name[localize(value, tz).month]


def months_ago(value: datetime, months: int) -> datetime:
    """Shift a datetime back by whole calendar months, clamping the day."""

    month_index = value.month - 1 - months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def days_ago(value: datetime, days: int) -> datetime:
    return value - timedelta(days=days)


def from_epoch_ms(value: int | str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


__all__ = [
    "FILE_TIMESTAMP_FORMAT",
    "LOG_TIMESTAMP_FORMAT",
    "SEARCH_DATE_FORMAT",
    "days_ago",
    "format_file_timestamp",
    "format_log_timestamp",
    "format_search_date",
    "from_epoch_ms",
    "localize",
    "month_name",
    "months_ago",
    "resolve_timezone",
]
