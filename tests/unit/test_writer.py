"""Unit tests for log row rendering."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from inbox_sweeper.models import FallbackRow, LogRow, ThreadAction
from inbox_sweeper.sweep import LogWriter
from inbox_sweeper.sweep.writer import (
    FALLBACK_LOG_HEADER,
    FALLBACK_LOG_TABLE,
    RUN_LOG_HEADER,
    RUN_LOG_TABLE,
    thread_link,
)
from tests.helpers import MemoryWorkbook

PROCESSED_AT = datetime(2025, 3, 31, 12, 0, 0, tzinfo=timezone.utc)


def make_row(**overrides) -> LogRow:
    values = {
        "timestamp": PROCESSED_AT,
        "rule_name": "OldUnread",
        "subject": "Weekly Digest",
        "email_date": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        "reason": "Unread and older than 6 months",
        "unread_count": 2,
        "custom_labels": ["Receipts", "Family"],
        "labels": ["INBOX", "Receipts", "Family", "CATEGORY_UPDATES"],
        "category": "CATEGORY_UPDATES",
        "action": ThreadAction.MOVE_TO_BIN,
        "thread_id": "18c2f",
    }
    values.update(overrides)
    return LogRow(**values)


def test_thread_link() -> None:
    assert thread_link("18c2f") == '=HYPERLINK("https://mail.google.com/mail/u/0/#inbox/18c2f", "18c2f")'
    assert thread_link("") == ""


def test_prepare_creates_both_tables_once() -> None:
    workbook = MemoryWorkbook("wb", "log")
    writer = LogWriter(workbook, timezone.utc)

    writer.prepare()
    writer.prepare()

    assert workbook.headers == {
        RUN_LOG_TABLE: list(RUN_LOG_HEADER),
        FALLBACK_LOG_TABLE: list(FALLBACK_LOG_HEADER),
    }


def test_render_decision_columns() -> None:
    writer = LogWriter(MemoryWorkbook("wb", "log"), timezone.utc)

    cells = writer.render_decision(make_row())

    assert len(cells) == len(RUN_LOG_HEADER)
    assert cells == [
        "2025/03/31 12:00:00",
        "OldUnread",
        "Weekly Digest",
        "2024/01/02 03:04:05",
        "Unread and older than 6 months",
        2,
        "Receipts, Family",
        "INBOX, Receipts, Family, CATEGORY_UPDATES",
        "UPDATES",
        "Move To Bin",
        '=HYPERLINK("https://mail.google.com/mail/u/0/#inbox/18c2f", "18c2f")',
    ]


def test_render_decision_with_missing_values() -> None:
    writer = LogWriter(MemoryWorkbook("wb", "log"), timezone.utc)

    cells = writer.render_decision(
        make_row(email_date=None, reason="", custom_labels=[], category="", action=ThreadAction.SKIPPED)
    )

    assert cells[3] == ""
    assert cells[4] == ""
    assert cells[6] == ""
    assert cells[8] == ""
    assert cells[9] == "Skipped"


def test_timestamps_rendered_in_zone() -> None:
    writer = LogWriter(MemoryWorkbook("wb", "log"), ZoneInfo("Europe/Berlin"))

    cells = writer.render_decision(make_row())

    assert cells[0] == "2025/03/31 14:00:00"
    assert cells[3] == "2024/01/02 04:04:05"


def test_write_decision_and_fallback() -> None:
    workbook = MemoryWorkbook("wb", "log")
    writer = LogWriter(workbook, timezone.utc)
    writer.prepare()

    writer.write_decision(make_row())
    writer.write_fallback(
        FallbackRow(
            timestamp=PROCESSED_AT,
            issue="ThreadException",
            thread_id="18c2f",
            details="RuntimeError: boom",
        )
    )

    assert len(workbook.tables[RUN_LOG_TABLE]) == 1
    assert workbook.tables[FALLBACK_LOG_TABLE] == [
        [
            "2025/03/31 12:00:00",
            "ThreadException",
            "",
            '=HYPERLINK("https://mail.google.com/mail/u/0/#inbox/18c2f", "18c2f")',
            "RuntimeError: boom",
        ]
    ]
