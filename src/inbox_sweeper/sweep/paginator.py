"""Paged traversal of search results with per-thread failure isolation.

Every thread returned by a query produces exactly one row: a decision row in the
run log, or a fallback row when the thread could not be classified. A failure
on one thread never stops the page or the batch. Errors raised by the log
workbook itself are not caught here; they abort the run.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

import structlog

from inbox_sweeper.contracts import MailStore, ThreadHandle
from inbox_sweeper.models import Delete, FallbackRow, LogRow, ThreadAction, ThreadFacts
from inbox_sweeper.rules.engine import DecideFn
from inbox_sweeper.rules.labels import SystemLabelPredicate
from inbox_sweeper.sweep.facts import extract_facts
from inbox_sweeper.sweep.writer import LogWriter

logger = structlog.get_logger()

DEFAULT_PAGE_SIZE = 100

ISSUE_THREAD_EXCEPTION = "ThreadException"
ISSUE_TRASH_EXCEPTION = "TrashException"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class BatchStats:
    """Counters for one query run."""

    rule_name: str
    pages: int = 0
    processed: int = 0
    deleted: int = 0
    skipped: int = 0
    failed: int = 0
    trashed: int = 0


class BatchPaginator:
    """Runs search queries page by page and logs a decision per thread."""

    def __init__(
        self,
        mail_store: MailStore,
        writer: LogWriter,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        trash_enabled: bool = False,
        is_system_label: SystemLabelPredicate | None = None,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")

        self.mail_store = mail_store
        self.writer = writer
        self.page_size = page_size
        self.trash_enabled = trash_enabled
        self.is_system_label = is_system_label or SystemLabelPredicate()
        self.clock = clock

    def run(self, query: str, rule_name: str, decide: DecideFn) -> BatchStats:
        """Classify every thread matching `query` with `decide`.

        A page shorter than the page size is taken as the last page; no further
        page is requested after it.
        """

        stats = BatchStats(rule_name=rule_name)
        offset = 0

        logger.info("batch_started", rule=rule_name, query=query, page_size=self.page_size)

        while True:
            threads = self.mail_store.search(query, offset, self.page_size)
            if not threads:
                break

            stats.pages += 1
            for thread in threads:
                self._process_thread(thread, rule_name, decide, stats)

            if len(threads) < self.page_size:
                break
            offset += self.page_size

        logger.info(
            "batch_completed",
            rule=rule_name,
            pages=stats.pages,
            processed=stats.processed,
            deleted=stats.deleted,
            skipped=stats.skipped,
            failed=stats.failed,
            trashed=stats.trashed,
        )
        return stats

    def _process_thread(
        self,
        thread: ThreadHandle,
        rule_name: str,
        decide: DecideFn,
        stats: BatchStats,
    ) -> None:
        stats.processed += 1
        facts: ThreadFacts | None = None

        try:
            facts = extract_facts(thread, self.is_system_label)
            decision = decide(facts)
            is_delete = isinstance(decision, Delete)
            row = LogRow(
                timestamp=self.clock(),
                rule_name=rule_name,
                subject=facts.subject,
                email_date=facts.date,
                reason=decision.reason or "",
                unread_count=facts.unread_count,
                custom_labels=list(facts.custom_labels),
                labels=list(facts.labels),
                category=facts.category,
                action=ThreadAction.MOVE_TO_BIN if is_delete else ThreadAction.SKIPPED,
                thread_id=facts.thread_id,
            )
            cells = self.writer.render_decision(row)
        except Exception as exc:  # noqa: BLE001
            stats.failed += 1
            self._record_failure(thread, facts, ISSUE_THREAD_EXCEPTION, exc)
            return

        self.writer.append_decision(cells)

        if not is_delete:
            stats.skipped += 1
            return

        stats.deleted += 1
        if self.trash_enabled:
            self._move_to_trash(thread, facts, stats)

    def _move_to_trash(self, thread: ThreadHandle, facts: ThreadFacts, stats: BatchStats) -> None:
        try:
            thread.move_to_trash()
        except Exception as exc:  # noqa: BLE001
            stats.failed += 1
            self._record_failure(thread, facts, ISSUE_TRASH_EXCEPTION, exc)
            return
        stats.trashed += 1

    def _record_failure(
        self,
        thread: ThreadHandle,
        facts: ThreadFacts | None,
        issue: str,
        exc: Exception,
    ) -> None:
        thread_id = facts.thread_id if facts is not None else _safe_thread_id(thread)
        logger.warning(
            "thread_processing_failed",
            issue=issue,
            thread_id=thread_id,
            error=str(exc),
        )
        self.writer.write_fallback(
            FallbackRow(
                timestamp=self.clock(),
                issue=issue,
                subject=facts.subject if facts is not None else "",
                thread_id=thread_id,
                details=f"{type(exc).__name__}: {exc}",
            )
        )


def _safe_thread_id(thread: ThreadHandle) -> str:
    try:
        return str(thread.id)
    except Exception:  # noqa: BLE001
        return ""
