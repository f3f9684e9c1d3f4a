"""Run identity and lifecycle tracking.

Each run gets its own log workbook placed under
`<root>/<debug>/<year>/<month>/`. The workbook id doubles as the run id. A
long-lived overview workbook in `<root>/<debug>/` lists one row per run with
its status: Started when the run opens, then Completed or Failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any

import structlog

from inbox_sweeper.contracts import StorageHierarchy, Workbook
from inbox_sweeper.models import OverviewRow, RunStatus
from inbox_sweeper.timeutils import (
    format_file_timestamp,
    format_log_timestamp,
    localize,
    month_name,
)

logger = structlog.get_logger()

DEFAULT_ROOT_FOLDER_NAME = "Gmail Auto Cleanup Logs"
DEFAULT_DEBUG_FOLDER_NAME = "Debug"
LOG_NAME_PREFIX = "Gmail Cleanup Debug Log"
OVERVIEW_WORKBOOK_NAME = "Gmail Cleanup Debug Overview"
OVERVIEW_TABLE = "Overview"
OVERVIEW_HEADER: tuple[str, ...] = (
    "Run Timestamp",
    "Log File Name",
    "Log File ID",
    "Link to Log",
    "Status",
)

_LOG_ID_COLUMN = OVERVIEW_HEADER.index("Log File ID")
_STATUS_COLUMN = OVERVIEW_HEADER.index("Status")


@dataclass(frozen=True)
class RunHandle:
    """An open run."""

    run_id: str
    started_at: datetime
    log_name: str
    log_url: str
    workbook: Workbook


class RunTracker:
    """Creates runs and records their status in the overview workbook."""

    def __init__(
        self,
        storage: StorageHierarchy,
        *,
        tz: tzinfo | None = timezone.utc,
        root_folder_name: str = DEFAULT_ROOT_FOLDER_NAME,
        debug_folder_name: str = DEFAULT_DEBUG_FOLDER_NAME,
    ) -> None:
        self.storage = storage
        self.tz = tz
        self.root_folder_name = root_folder_name
        self.debug_folder_name = debug_folder_name

    def begin(self, run_timestamp: datetime | None = None) -> RunHandle:
        """Create the run's log workbook and mark the run Started."""

        started_at = run_timestamp or datetime.now(timezone.utc)

        debug_folder = self._debug_folder()
        year_folder = self.storage.get_or_create_folder(
            str(localize(started_at, self.tz).year), debug_folder
        )
        month_folder = self.storage.get_or_create_folder(month_name(started_at, self.tz), year_folder)

        log_name = f"{LOG_NAME_PREFIX} {format_file_timestamp(started_at, self.tz)}"
        workbook = self.storage.create_workbook(log_name, month_folder)

        handle = RunHandle(
            run_id=workbook.id,
            started_at=started_at,
            log_name=workbook.name,
            log_url=workbook.url,
            workbook=workbook,
        )
        logger.info("run_started", run_id=handle.run_id, log_name=handle.log_name)

        self.ensure_overview_entry(handle)
        return handle

    def ensure_overview_entry(self, handle: RunHandle) -> bool:
        """Insert a Started row for the run unless one already exists.

        Returns:
            True if a row was inserted.
        """

        overview = self._open_overview(create=True)
        assert overview is not None

        if self._find_row(overview, handle.run_id) is not None:
            logger.debug("overview_entry_exists", run_id=handle.run_id)
            return False

        overview.append_row(
            OVERVIEW_TABLE,
            [
                format_log_timestamp(handle.started_at, self.tz),
                handle.log_name,
                handle.run_id,
                handle.log_url,
                RunStatus.STARTED.value,
            ],
        )
        logger.info("overview_updated", run_id=handle.run_id, status=RunStatus.STARTED.value)
        return True

    def complete(self, handle: RunHandle) -> None:
        self._set_status(handle.run_id, RunStatus.COMPLETED)

    def fail(self, handle: RunHandle) -> None:
        self._set_status(handle.run_id, RunStatus.FAILED)

    def list_runs(self) -> list[OverviewRow]:
        """Return all overview rows in run-start order."""

        overview = self._open_overview(create=False)
        if overview is None:
            return []

        runs = []
        for cells in overview.read_rows(OVERVIEW_TABLE):
            padded = [str(c) for c in cells] + [""] * (len(OVERVIEW_HEADER) - len(cells))
            runs.append(
                OverviewRow(
                    run_timestamp=padded[0],
                    log_file_name=padded[1],
                    log_file_id=padded[2],
                    link=padded[3],
                    status=padded[4],
                )
            )
        return runs

    def _set_status(self, run_id: str, status: RunStatus) -> None:
        # A missing overview or row must never break the run.
        overview = self._open_overview(create=False)
        if overview is None:
            logger.debug("overview_missing", run_id=run_id, status=status.value)
            return

        row_index = self._find_row(overview, run_id)
        if row_index is None:
            logger.debug("overview_entry_missing", run_id=run_id, status=status.value)
            return

        overview.update_cell(OVERVIEW_TABLE, row_index, _STATUS_COLUMN, status.value)
        logger.info("run_status_updated", run_id=run_id, status=status.value)

    def _debug_folder(self) -> Any:
        root = self.storage.get_or_create_folder(self.root_folder_name, self.storage.root())
        return self.storage.get_or_create_folder(self.debug_folder_name, root)

    def _open_overview(self, *, create: bool) -> Workbook | None:
        debug_folder = self._debug_folder()
        overview = self.storage.find_workbook(OVERVIEW_WORKBOOK_NAME, debug_folder)
        if overview is None:
            if not create:
                return None
            overview = self.storage.create_workbook(OVERVIEW_WORKBOOK_NAME, debug_folder)
            logger.info("overview_created", name=OVERVIEW_WORKBOOK_NAME)

        if create:
            overview.ensure_table(OVERVIEW_TABLE, OVERVIEW_HEADER)
        return overview

    @staticmethod
    def _find_row(overview: Workbook, run_id: str) -> int | None:
        for index, cells in enumerate(overview.read_rows(OVERVIEW_TABLE)):
            if len(cells) > _LOG_ID_COLUMN and cells[_LOG_ID_COLUMN] == run_id:
                return index
        return None
