"""Collaborator protocol contracts.

The sweep engine only talks to these interfaces. Concrete implementations live
in `inbox_sweeper.gmail` and `inbox_sweeper.storage`; tests substitute
in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol


class MessageHandle(Protocol):
    @property
    def subject(self) -> str | None: ...

    @property
    def date(self) -> datetime | None: ...

    @property
    def is_unread(self) -> bool: ...


class ThreadHandle(Protocol):
    @property
    def id(self) -> str: ...

    def get_messages(self) -> Sequence[MessageHandle]: ...

    def get_labels(self) -> Sequence[str]: ...

    def move_to_trash(self) -> None: ...


class MailStore(Protocol):
    def search(self, query: str, offset: int, limit: int) -> Sequence[ThreadHandle]: ...


class Workbook(Protocol):
    """A named collection of append-only tables with a header row each."""

    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def url(self) -> str: ...

    def ensure_table(self, table: str, header: Sequence[str]) -> bool: ...

    def append_row(self, table: str, cells: Sequence[Any]) -> None: ...

    def read_rows(self, table: str) -> list[list[Any]]: ...

    def update_cell(self, table: str, row_index: int, column: int, value: Any) -> None: ...


class StorageHierarchy(Protocol):
    def root(self) -> Any: ...

    def get_or_create_folder(self, name: str, parent: Any) -> Any: ...

    def create_workbook(self, name: str, folder: Any) -> Workbook: ...

    def find_workbook(self, name: str, folder: Any) -> Workbook | None: ...


__all__ = ["MailStore", "MessageHandle", "StorageHierarchy", "ThreadHandle", "Workbook"]
