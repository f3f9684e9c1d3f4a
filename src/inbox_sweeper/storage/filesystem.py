"""Folder hierarchy on the local filesystem.

Folders are plain directories; workbooks are SQLite files named after the
workbook inside them.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from inbox_sweeper.exceptions import StorageError
from inbox_sweeper.storage.workbook import WORKBOOK_SUFFIX, SqliteWorkbook

logger = structlog.get_logger()


class FileSystemStorage:
    """Storage hierarchy rooted at a local directory."""

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir)

    def root(self) -> Path:
        return self._base_dir

    def get_or_create_folder(self, name: str, parent: Path) -> Path:
        """Return the sub-folder `name` of `parent`, creating it if needed."""

        _check_name(name)
        folder = Path(parent) / name
        if folder.is_dir():
            return folder
        if folder.exists():
            raise StorageError(f"Not a folder: {folder}")
        try:
            folder.mkdir(parents=True)
        except OSError as exc:
            raise StorageError(f"Cannot create folder {folder}: {exc}") from exc
        logger.debug("folder_created", path=str(folder))
        return folder

    def create_workbook(self, name: str, folder: Path) -> SqliteWorkbook:
        """Create a workbook named `name` in `folder`.

        Names need not be unique. When `<name>.sqlite3` is taken, the file gets
        a ` (2)`, ` (3)`, ... suffix; the workbook keeps `name` as its name.
        """

        _check_name(name)
        path = self._workbook_path(name, folder)
        copy = 1
        while path.exists():
            copy += 1
            path = self._workbook_path(f"{name} ({copy})", folder)
        if copy > 1:
            logger.info("workbook_name_taken", name=name, path=str(path))
        return SqliteWorkbook.create(path, name)

    def find_workbook(self, name: str, folder: Path) -> SqliteWorkbook | None:
        _check_name(name)
        path = self._workbook_path(name, folder)
        if not path.is_file():
            return None
        return SqliteWorkbook(path)

    @staticmethod
    def _workbook_path(name: str, folder: Path) -> Path:
        return Path(folder) / f"{name}{WORKBOOK_SUFFIX}"


def _check_name(name: str) -> None:
    if not name or name in {".", ".."} or "/" in name or "\\" in name:
        raise StorageError(f"Invalid folder or workbook name: {name!r}")
