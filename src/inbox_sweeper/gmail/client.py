"""Gmail API mail store.

This module adapts the Gmail REST API to the offset-paged mail store the sweep
engine expects.

Notes:
    users.threads.list pages with opaque tokens, not offsets. The store caches
    the token that starts each offset it has reached, and walks the listing from
    the start when asked for an offset it has not seen.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog
from googleapiclient.errors import HttpError

from inbox_sweeper.config import Settings
from inbox_sweeper.exceptions import AuthenticationError, ConfigurationError, MailStoreError
from inbox_sweeper.gmail.parsing import (
    METADATA_HEADERS,
    GmailMessage,
    message_to_gmail_message,
    thread_label_ids,
)
from inbox_sweeper.utils import call_with_retry

logger = structlog.get_logger()

MAX_PAGE_SIZE = 500
TRANSIENT_STATUSES = frozenset({429, 500, 502, 503, 504})

_EXHAUSTED = object()


def is_transient_error(exc: Exception) -> bool:
    """True for HTTP errors worth retrying (rate limits, server errors)."""

    if not isinstance(exc, HttpError):
        return False
    status = getattr(getattr(exc, "resp", None), "status", None)
    try:
        return int(status) in TRANSIENT_STATUSES
    except (TypeError, ValueError):
        return False


def build_gmail_service(settings: Settings) -> Any:
    """Authenticate with OAuth2 and build a Gmail API service.

    Raises:
        ConfigurationError: If the credentials file is missing.
        AuthenticationError: If the OAuth flow fails.
    """

    credentials_path = Path(settings.gmail_credentials_path)
    token_path = Path(settings.gmail_token_path)
    scope = settings.gmail_scope

    if not credentials_path.exists():
        raise ConfigurationError(
            f"Gmail credentials file not found: {credentials_path}. "
            "Download an OAuth client file from the Google Cloud console."
        )

    logger.info(
        "gmail_authentication_started",
        credentials_path=str(credentials_path),
        token_path=str(token_path),
        scope=scope,
    )

    # Imported lazily to keep import-time cost low and tests fast.
    from google.auth.transport.requests import Request
    from google.oauth2.credentials import Credentials
    from google_auth_oauthlib.flow import InstalledAppFlow
    from googleapiclient.discovery import build

    try:
        creds: Credentials | None = None
        if token_path.exists():
            creds = Credentials.from_authorized_user_file(str(token_path), scopes=[scope])

        if creds is not None and creds.expired and creds.refresh_token:
            creds.refresh(Request())

        if creds is None or not creds.valid:
            flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=[scope])
            creds = flow.run_local_server(port=0)
            token_path.parent.mkdir(parents=True, exist_ok=True)
            token_path.write_text(creds.to_json(), encoding="utf-8")
    except Exception as exc:  # noqa: BLE001
        logger.exception("gmail_authentication_failed", error=str(exc))
        raise AuthenticationError(str(exc)) from exc

    logger.info("gmail_authentication_completed")

    # cache_discovery=False prevents writing discovery docs to disk.
    return build("gmail", "v1", credentials=creds, cache_discovery=False)


class GmailThread:
    """A thread handle; messages are fetched on first access."""

    def __init__(self, store: GmailMailStore, thread_id: str) -> None:
        self._store = store
        self._id = thread_id
        self._messages: list[GmailMessage] | None = None

    @property
    def id(self) -> str:
        return self._id

    def get_messages(self) -> list[GmailMessage]:
        if self._messages is None:
            raw = self._store.fetch_thread(self._id)
            self._messages = [message_to_gmail_message(m) for m in raw.get("messages") or []]
        return self._messages

    def get_labels(self) -> list[str]:
        names = self._store.label_names()
        return [names.get(label_id, label_id) for label_id in thread_label_ids(self.get_messages())]

    def move_to_trash(self) -> None:
        self._store.trash_thread(self._id)

    def __repr__(self) -> str:
        return f"GmailThread({self._id!r})"


class GmailMailStore:
    """Mail store backed by a Gmail API service object."""

    def __init__(
        self,
        service: Any,
        *,
        user_id: str = "me",
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        self._service = service
        self._user_id = user_id
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._page_tokens: dict[tuple[str, int], object] = {}
        self._label_names: dict[str, str] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> GmailMailStore:
        return cls(build_gmail_service(settings), max_retries=settings.max_retries)

    def search(self, query: str, offset: int, limit: int) -> Sequence[GmailThread]:
        """Return up to `limit` threads matching `query`, starting at `offset`.

        Raises:
            MailStoreError: If the API request fails.
        """

        if offset < 0 or limit < 1:
            raise ValueError("offset must be >= 0 and limit >= 1")

        token = self._page_token(query, offset)
        if token is _EXHAUSTED:
            return []

        response = self._list_threads(query, min(limit, MAX_PAGE_SIZE), token)
        thread_ids = [t["id"] for t in response.get("threads") or [] if t.get("id")]

        next_token = response.get("nextPageToken")
        self._page_tokens[(query, offset + len(thread_ids))] = next_token or _EXHAUSTED

        logger.debug("gmail_search_page", query=query, offset=offset, count=len(thread_ids))
        return [GmailThread(self, thread_id) for thread_id in thread_ids]

    def fetch_thread(self, thread_id: str) -> dict[str, Any]:
        request = (
            self._service.users()
            .threads()
            .get(
                userId=self._user_id,
                id=thread_id,
                format="metadata",
                metadataHeaders=list(METADATA_HEADERS),
            )
        )
        return self._execute(request, "gmail_get_thread_failed")

    def label_names(self) -> dict[str, str]:
        """Map label ids to display names (system label ids map to themselves)."""

        if self._label_names is None:
            request = self._service.users().labels().list(userId=self._user_id)
            response = self._execute(request, "gmail_list_labels_failed")
            self._label_names = {
                label["id"]: label.get("name") or label["id"]
                for label in response.get("labels") or []
                if label.get("id")
            }
        return self._label_names

    def trash_thread(self, thread_id: str) -> None:
        request = self._service.users().threads().trash(userId=self._user_id, id=thread_id)
        # Trashing is not idempotent from the caller's view; no retry.
        try:
            request.execute()
        except HttpError as exc:
            logger.error("gmail_trash_thread_failed", thread_id=thread_id, error=str(exc))
            raise MailStoreError(f"Failed to trash thread {thread_id}: {exc}") from exc
        logger.info("gmail_thread_trashed", thread_id=thread_id)

    def _page_token(self, query: str, offset: int) -> object:
        if offset == 0:
            return None

        cached = self._page_tokens.get((query, offset))
        if cached is not None:
            return cached

        position = 0
        token: object = None
        while position < offset:
            response = self._list_threads(query, min(offset - position, MAX_PAGE_SIZE), token)
            count = len(response.get("threads") or [])
            token = response.get("nextPageToken")
            position += count
            if not token or count == 0:
                return _EXHAUSTED
        self._page_tokens[(query, offset)] = token
        return token

    def _list_threads(self, query: str, max_results: int, page_token: object) -> dict[str, Any]:
        request = (
            self._service.users()
            .threads()
            .list(
                userId=self._user_id,
                q=query,
                maxResults=max_results,
                pageToken=page_token,
            )
        )
        return self._execute(request, "gmail_list_threads_failed")

    def _execute(self, request: Any, failure_event: str) -> dict[str, Any]:
        try:
            return call_with_retry(
                request.execute,
                max_retries=self._max_retries,
                delay=self._retry_delay,
                should_retry=is_transient_error,
            )
        except HttpError as exc:
            logger.error(failure_event, error=str(exc))
            raise MailStoreError(str(exc)) from exc
