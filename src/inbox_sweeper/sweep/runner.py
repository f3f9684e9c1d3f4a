"""One end-to-end cleanup run.

The runner opens a run, executes each configured query with its rule, and
closes the run as Completed. Any error escaping a batch aborts the remaining
queries, marks the run Failed, and is re-raised to the caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

import structlog

from inbox_sweeper.config import Settings
from inbox_sweeper.contracts import MailStore, StorageHierarchy
from inbox_sweeper.rules.engine import DecideFn, keyword_rule, unread_age_rule
from inbox_sweeper.rules.labels import SystemLabelPredicate
from inbox_sweeper.sweep.paginator import BatchPaginator, BatchStats
from inbox_sweeper.sweep.tracker import RunHandle, RunTracker
from inbox_sweeper.sweep.writer import LogWriter
from inbox_sweeper.timeutils import days_ago, format_search_date, months_ago, resolve_timezone

logger = structlog.get_logger()


@dataclass(frozen=True)
class RuleBatch:
    """A search query bound to the rule that classifies its results."""

    rule_name: str
    query: str
    decide: DecideFn


@dataclass(frozen=True)
class RunResult:
    run_id: str
    log_name: str
    batches: tuple[BatchStats, ...]


def build_default_batches(
    now: datetime,
    tz: tzinfo | None,
    keyword_groups: Sequence[Sequence[str]],
    *,
    old_unread_months: int = 6,
    promo_unread_days: int = 30,
) -> list[RuleBatch]:
    """The three standard sweeps: old unread, stale promotions, subject keywords."""

    old_cutoff = format_search_date(months_ago(now, old_unread_months), tz)
    promo_cutoff = format_search_date(days_ago(now, promo_unread_days), tz)

    return [
        RuleBatch(
            rule_name="OldUnread",
            query=f"is:unread before:{old_cutoff}",
            decide=unread_age_rule(f"Unread and older than {old_unread_months} months", True),
        ),
        RuleBatch(
            rule_name="PromoUnread",
            query=f"category:promotions is:unread before:{promo_cutoff}",
            decide=unread_age_rule(
                f"Unread in Promotions and older than {promo_unread_days} days", True
            ),
        ),
        RuleBatch(
            rule_name="KeywordMatch",
            query="in:inbox",
            decide=keyword_rule([list(group) for group in keyword_groups]),
        ),
    ]


class CleanupRunner:
    """Runs all batches under one tracked run."""

    def __init__(
        self,
        settings: Settings,
        mail_store: MailStore,
        storage: StorageHierarchy,
        keyword_groups: Sequence[Sequence[str]] | None = None,
    ) -> None:
        self.settings = settings
        self.mail_store = mail_store
        self.tz = resolve_timezone(settings.timezone)
        self.keyword_groups = (
            list(keyword_groups) if keyword_groups is not None else list(settings.keyword_groups)
        )
        self.tracker = RunTracker(
            storage,
            tz=self.tz,
            root_folder_name=settings.root_folder_name,
            debug_folder_name=settings.debug_folder_name,
        )
        self.is_system_label = SystemLabelPredicate.from_lists(
            settings.system_label_prefixes, settings.system_label_names
        )

    def batches(self, now: datetime) -> list[RuleBatch]:
        return build_default_batches(
            now,
            self.tz,
            self.keyword_groups,
            old_unread_months=self.settings.old_unread_months,
            promo_unread_days=self.settings.promo_unread_days,
        )

    def run(self, now: datetime | None = None) -> RunResult:
        """Execute one run.

        Raises:
            Exception: Whatever aborted the run, after the run is marked Failed.
        """

        now = now or datetime.now(timezone.utc)
        handle: RunHandle | None = None

        try:
            handle = self.tracker.begin(now)

            writer = LogWriter(handle.workbook, self.tz)
            writer.prepare()

            paginator = BatchPaginator(
                self.mail_store,
                writer,
                page_size=self.settings.page_size,
                trash_enabled=self.settings.trash_enabled,
                is_system_label=self.is_system_label,
            )

            results = [
                paginator.run(batch.query, batch.rule_name, batch.decide)
                for batch in self.batches(now)
            ]

            self.tracker.complete(handle)
        except Exception as exc:
            logger.exception(
                "cleanup_run_failed",
                run_id=handle.run_id if handle else None,
                error=str(exc),
            )
            if handle is not None:
                self._mark_failed(handle)
            raise

        logger.info(
            "cleanup_run_completed",
            run_id=handle.run_id,
            processed=sum(r.processed for r in results),
            deleted=sum(r.deleted for r in results),
            failed=sum(r.failed for r in results),
            trash_enabled=self.settings.trash_enabled,
        )
        return RunResult(run_id=handle.run_id, log_name=handle.log_name, batches=tuple(results))

    def _mark_failed(self, handle: RunHandle) -> None:
        try:
            self.tracker.fail(handle)
        except Exception as exc:  # noqa: BLE001
            # The original error is re-raised by the caller.
            logger.error("run_status_update_failed", run_id=handle.run_id, error=str(exc))
