"""Render log rows into the per-run workbook."""

from __future__ import annotations

from datetime import tzinfo

from inbox_sweeper.contracts import Workbook
from inbox_sweeper.models import FallbackRow, LogRow
from inbox_sweeper.rules.labels import CATEGORY_PREFIX
from inbox_sweeper.timeutils import format_log_timestamp

RUN_LOG_TABLE = "Run Log"
FALLBACK_LOG_TABLE = "Fallback Log"

RUN_LOG_HEADER: tuple[str, ...] = (
    "Timestamp",
    "Rule Name",
    "Subject",
    "Email Date",
    "Reason",
    "Unread Messages Count",
    "Custom Labels",
    "Labels",
    "Gmail Category",
    "Action Taken",
    "ThreadID",
)
FALLBACK_LOG_HEADER: tuple[str, ...] = ("Timestamp", "Issue", "Subject", "ThreadID", "Details")

THREAD_URL_TEMPLATE = "https://mail.google.com/mail/u/0/#inbox/{thread_id}"


def thread_link(thread_id: str) -> str:
    """Spreadsheet formula rendering the thread id as a link to the thread."""

    if not thread_id:
        return ""
    url = THREAD_URL_TEMPLATE.format(thread_id=thread_id)
    return f'=HYPERLINK("{url}", "{thread_id}")'


class LogWriter:
    """Appends decision rows and fallback rows to a run workbook."""

    def __init__(self, workbook: Workbook, tz: tzinfo | None) -> None:
        self.workbook = workbook
        self.tz = tz

    def prepare(self) -> None:
        """Create both log tables with their headers."""

        self.workbook.ensure_table(RUN_LOG_TABLE, RUN_LOG_HEADER)
        self.workbook.ensure_table(FALLBACK_LOG_TABLE, FALLBACK_LOG_HEADER)

    def render_decision(self, row: LogRow) -> list[object]:
        return [
            format_log_timestamp(row.timestamp, self.tz),
            row.rule_name,
            row.subject,
            format_log_timestamp(row.email_date, self.tz),
            row.reason,
            row.unread_count,
            ", ".join(row.custom_labels),
            ", ".join(row.labels),
            row.category.removeprefix(CATEGORY_PREFIX),
            row.action.value,
            thread_link(row.thread_id),
        ]

    def render_fallback(self, row: FallbackRow) -> list[object]:
        return [
            format_log_timestamp(row.timestamp, self.tz),
            row.issue,
            row.subject,
            thread_link(row.thread_id),
            row.details,
        ]

    def write_decision(self, row: LogRow) -> None:
        self.append_decision(self.render_decision(row))

    def append_decision(self, cells: list[object]) -> None:
        self.workbook.append_row(RUN_LOG_TABLE, cells)

    def write_fallback(self, row: FallbackRow) -> None:
        self.workbook.append_row(FALLBACK_LOG_TABLE, self.render_fallback(row))
