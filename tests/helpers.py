"""In-memory collaborators shared by the unit tests."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


# === In-memory mail store ===


@dataclass
class FakeMessage:
    subject: str | None = "Hello"
    date: datetime | None = field(default_factory=lambda: datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc))
    is_unread: bool = False


class FakeThread:
    """Thread handle with scripted messages, labels and failures."""

    def __init__(
        self,
        thread_id: str,
        messages: list[FakeMessage] | None = None,
        labels: list[str] | None = None,
        *,
        messages_error: Exception | None = None,
        trash_error: Exception | None = None,
    ) -> None:
        self._id = thread_id
        self._messages = messages if messages is not None else [FakeMessage()]
        self._labels = labels or []
        self._messages_error = messages_error
        self._trash_error = trash_error
        self.trashed = False

    @property
    def id(self) -> str:
        return self._id

    def get_messages(self) -> list[FakeMessage]:
        if self._messages_error is not None:
            raise self._messages_error
        return self._messages

    def get_labels(self) -> list[str]:
        return self._labels

    def move_to_trash(self) -> None:
        if self._trash_error is not None:
            raise self._trash_error
        self.trashed = True


class FakeMailStore:
    """Serves per-query thread lists by offset and records every search."""

    def __init__(self, threads_by_query: dict[str, list[FakeThread]] | None = None) -> None:
        self.threads_by_query = threads_by_query or {}
        self.calls: list[tuple[str, int, int]] = []
        self.search_error: Exception | None = None

    def search(self, query: str, offset: int, limit: int) -> list[FakeThread]:
        self.calls.append((query, offset, limit))
        if self.search_error is not None:
            raise self.search_error
        threads = self.threads_by_query.get(query, [])
        return threads[offset : offset + limit]


# === In-memory storage hierarchy ===


class MemoryWorkbook:
    """Workbook keeping tables in dicts.

    `fail_on_append` makes the n-th append (1-based, any table) raise.
    """

    def __init__(self, workbook_id: str, name: str) -> None:
        self._id = workbook_id
        self._name = name
        self.headers: dict[str, list[str]] = {}
        self.tables: dict[str, list[list[Any]]] = {}
        self.appends = 0
        self.fail_on_append: int | None = None

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def url(self) -> str:
        return f"memory://{self._id}"

    def ensure_table(self, table: str, header) -> bool:
        if table in self.headers:
            return False
        self.headers[table] = list(header)
        self.tables[table] = []
        return True

    def append_row(self, table: str, cells) -> None:
        self.appends += 1
        if self.fail_on_append is not None and self.appends >= self.fail_on_append:
            raise OSError("workbook unreachable")
        self.tables[table].append(list(cells))

    def read_rows(self, table: str) -> list[list[Any]]:
        return [list(r) for r in self.tables[table]]

    def update_cell(self, table: str, row_index: int, column: int, value: Any) -> None:
        self.tables[table][row_index][column] = value


class MemoryStorage:
    """Folders are tuples of names; workbooks are keyed by (folder, name)."""

    def __init__(self, ids: list[str] | None = None) -> None:
        self.folders: set[tuple[str, ...]] = {()}
        self.workbooks: dict[tuple[tuple[str, ...], str], MemoryWorkbook] = {}
        self._ids = iter(ids) if ids is not None else (f"wb{n}" for n in itertools.count(1))

    def root(self) -> tuple[str, ...]:
        return ()

    def get_or_create_folder(self, name: str, parent: tuple[str, ...]) -> tuple[str, ...]:
        folder = (*parent, name)
        self.folders.add(folder)
        return folder

    def create_workbook(self, name: str, folder: tuple[str, ...]) -> MemoryWorkbook:
        workbook = MemoryWorkbook(next(self._ids), name)
        self.workbooks[(folder, name)] = workbook
        return workbook

    def find_workbook(self, name: str, folder: tuple[str, ...]) -> MemoryWorkbook | None:
        return self.workbooks.get((folder, name))

    def workbook_named(self, prefix: str) -> MemoryWorkbook:
        matches = [wb for (_, name), wb in self.workbooks.items() if name.startswith(prefix)]
        assert len(matches) == 1, matches
        return matches[0]




# === Mock Gmail API service ===


class MockHttpResponse:
    """Minimal response object accepted by HttpError."""

    def __init__(self, status: int, reason: str = "error") -> None:
        self.status = status
        self.reason = reason


def http_error(status: int) -> Exception:
    from googleapiclient.errors import HttpError

    return HttpError(resp=MockHttpResponse(status), content=b"mock error")


class MockRequest:
    """Stands in for an API request; raises queued errors before returning data."""

    def __init__(self, data: Any = None, errors: list[Exception] | None = None) -> None:
        self._data = data
        self._errors = errors if errors is not None else []

    def execute(self) -> Any:
        if self._errors:
            raise self._errors.pop(0)
        return self._data


class MockGmailService:
    """Gmail service double serving one thread listing, paged by index tokens.

    `list_errors` are raised, in order, by the next threads.list executions.
    """

    def __init__(
        self,
        threads: list[dict] | None = None,
        labels: list[dict] | None = None,
        *,
        list_errors: list[Exception] | None = None,
        fail_trash: set[str] | None = None,
    ) -> None:
        self.thread_data = threads or []
        self.labels_data = labels or []
        self.list_errors = list_errors or []
        self.fail_trash = fail_trash or set()
        self.list_calls: list[dict[str, Any]] = []
        self.get_calls: list[str] = []
        self.label_list_calls = 0
        self.trashed: list[str] = []

    def users(self) -> MockGmailService:
        return self

    def threads(self) -> MockGmailService:
        return self

    def labels(self) -> _MockLabels:
        return _MockLabels(self)

    def list(self, userId: str, q: str | None = None, maxResults: int = 100, pageToken: str | None = None):
        self.list_calls.append({"q": q, "maxResults": maxResults, "pageToken": pageToken})
        start = int(pageToken) if pageToken else 0
        end = min(start + maxResults, len(self.thread_data))
        result: dict[str, Any] = {"threads": [{"id": t["id"]} for t in self.thread_data[start:end]]}
        if end < len(self.thread_data):
            result["nextPageToken"] = str(end)
        return MockRequest(result, self.list_errors)

    def get(self, userId: str, id: str, format: str | None = None, metadataHeaders: list[str] | None = None):
        self.get_calls.append(id)
        by_id = {t["id"]: t for t in self.thread_data}
        return MockRequest(by_id.get(id, {"id": id, "messages": []}))

    def trash(self, userId: str, id: str):
        if id in self.fail_trash:
            return MockRequest(errors=[http_error(404)])
        self.trashed.append(id)
        return MockRequest({"id": id, "labelIds": ["TRASH"]})


class _MockLabels:
    def __init__(self, service: MockGmailService) -> None:
        self._service = service

    def list(self, userId: str):
        self._service.label_list_calls += 1
        return MockRequest({"labels": self._service.labels_data})
