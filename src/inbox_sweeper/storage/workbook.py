"""SQLite-backed workbook.

A workbook stands in for a spreadsheet: a file holding several named tables,
each with a header row and append-only data rows. Cells are stored as a JSON
array per row, so tables of any width share one schema.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog

from inbox_sweeper.exceptions import StorageError

logger = structlog.get_logger()


_SCHEMA_VERSION = 1
WORKBOOK_SUFFIX = ".sqlite3"


class SqliteWorkbook:
    """A workbook persisted as a single SQLite database file."""

    def __init__(self, db_path: Path) -> None:
        """Open a workbook.

        Args:
            db_path: Path to the SQLite database file. Call `initialize` before
                first use of a new file.
        """

        self._db_path = Path(db_path)
        self._id: str | None = None
        self._name: str | None = None

    @classmethod
    def create(cls, db_path: Path, name: str) -> SqliteWorkbook:
        """Create a new workbook file with a fresh id."""

        if Path(db_path).exists():
            raise StorageError(f"Workbook already exists: {db_path}")
        workbook = cls(db_path)
        workbook.initialize(name)
        return workbook

    @property
    def path(self) -> Path:
        return self._db_path

    @property
    def id(self) -> str:
        if self._id is None:
            self._load_identity()
        assert self._id is not None
        return self._id

    @property
    def name(self) -> str:
        if self._name is None:
            self._load_identity()
        assert self._name is not None
        return self._name

    @property
    def url(self) -> str:
        return self._db_path.resolve().as_uri()

    def initialize(self, name: str) -> None:
        """Create the schema and assign the workbook identity if missing."""

        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS _schema_meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
                """
            )

            current_version = self._get_meta(conn, "schema_version")
            if current_version is None:
                self._create_schema_v1(conn)
                self._set_meta(conn, "schema_version", str(_SCHEMA_VERSION))
                self._set_meta(conn, "workbook_id", uuid.uuid4().hex)
                self._set_meta(conn, "workbook_name", name)
                self._set_meta(conn, "created_at_iso", datetime.now(timezone.utc).isoformat())
                conn.commit()
                logger.info("workbook_created", path=str(self._db_path), name=name)
                return

            if int(current_version) != _SCHEMA_VERSION:
                raise StorageError(
                    f"Unsupported schema version {current_version}; expected {_SCHEMA_VERSION}"
                )

    def ensure_table(self, table: str, header: Sequence[str]) -> bool:
        """Create a table with the given header unless it exists.

        Returns:
            True if the table was created.
        """

        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM workbook_tables WHERE name = ?", (table,)
            ).fetchone()
            if row is not None:
                return False

            conn.execute(
                "INSERT INTO workbook_tables(name, header_json) VALUES(?, ?)",
                (table, json.dumps(list(header))),
            )
            conn.commit()

        logger.debug("workbook_table_created", workbook=self._db_path.name, table=table)
        return True

    def append_row(self, table: str, cells: Sequence[Any]) -> None:
        """Append a data row after the last row of the table."""

        with self._connect() as conn:
            self._require_header(conn, table)
            conn.execute(
                """
                INSERT INTO workbook_rows(table_name, position, cells_json)
                VALUES (
                    :table_name,
                    (SELECT COALESCE(MAX(position), -1) + 1 FROM workbook_rows WHERE table_name = :table_name),
                    :cells_json
                )
                """,
                {"table_name": table, "cells_json": json.dumps(list(cells), default=str)},
            )
            conn.commit()

    def read_rows(self, table: str) -> list[list[Any]]:
        """Return the data rows of a table in append order (header excluded)."""

        with self._connect() as conn:
            self._require_header(conn, table)
            rows = conn.execute(
                """
                SELECT cells_json
                FROM workbook_rows
                WHERE table_name = ?
                ORDER BY position ASC;
                """,
                (table,),
            ).fetchall()

        return [json.loads(row["cells_json"]) for row in rows]

    def update_cell(self, table: str, row_index: int, column: int, value: Any) -> None:
        """Overwrite one cell of an existing data row.

        Args:
            table: Table name.
            row_index: Zero-based data row index.
            column: Zero-based column index.
            value: New cell value.
        """

        with self._connect() as conn:
            header = self._require_header(conn, table)
            if not 0 <= column < len(header):
                raise StorageError(f"Column {column} out of range for table {table!r}")

            row = conn.execute(
                "SELECT cells_json FROM workbook_rows WHERE table_name = ? AND position = ?",
                (table, row_index),
            ).fetchone()
            if row is None:
                raise StorageError(f"Row {row_index} not found in table {table!r}")

            cells = json.loads(row["cells_json"])
            cells.extend([""] * (column + 1 - len(cells)))
            cells[column] = value
            conn.execute(
                "UPDATE workbook_rows SET cells_json = ? WHERE table_name = ? AND position = ?",
                (json.dumps(cells, default=str), table, row_index),
            )
            conn.commit()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open workbook {self._db_path}: {exc}") from exc
        try:
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as exc:
            raise StorageError(f"Workbook operation failed on {self._db_path}: {exc}") from exc
        finally:
            conn.close()

    def _load_identity(self) -> None:
        with self._connect() as conn:
            workbook_id = self._get_meta(conn, "workbook_id")
            name = self._get_meta(conn, "workbook_name")
        if workbook_id is None or name is None:
            raise StorageError(f"Workbook is not initialized: {self._db_path}")
        self._id = workbook_id
        self._name = name

    def _require_header(self, conn: sqlite3.Connection, table: str) -> list[str]:
        row = conn.execute(
            "SELECT header_json FROM workbook_tables WHERE name = ?", (table,)
        ).fetchone()
        if row is None:
            raise StorageError(f"Table {table!r} does not exist in {self._db_path.name}")
        return json.loads(row["header_json"])

    def _get_meta(self, conn: sqlite3.Connection, key: str) -> str | None:
        row = conn.execute("SELECT value FROM _schema_meta WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return str(row[0])

    def _set_meta(self, conn: sqlite3.Connection, key: str, value: str) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO _schema_meta(key, value) VALUES(?, ?)",
            (key, value),
        )

    def _create_schema_v1(self, conn: sqlite3.Connection) -> None:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS workbook_tables (
                name TEXT PRIMARY KEY,
                header_json TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS workbook_rows (
                rowid INTEGER PRIMARY KEY,
                table_name TEXT NOT NULL REFERENCES workbook_tables(name),
                position INTEGER NOT NULL,
                cells_json TEXT NOT NULL,
                UNIQUE(table_name, position)
            );
            """
        )
