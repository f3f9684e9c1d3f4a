"""Helpers for parsing Gmail thread metadata into internal models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any

from inbox_sweeper.timeutils import from_epoch_ms

METADATA_HEADERS: tuple[str, ...] = ("Subject", "Date")


@dataclass(frozen=True)
class GmailMessage:
    """The few message attributes a sweep needs."""

    message_id: str
    subject: str | None
    date: datetime | None
    is_unread: bool
    label_ids: tuple[str, ...] = field(default=())


def _header_map(message: dict[str, Any]) -> dict[str, str]:
    payload = message.get("payload") or {}
    headers = payload.get("headers") or []
    result: dict[str, str] = {}
    for h in headers:
        name = h.get("name")
        value = h.get("value")
        if isinstance(name, str) and isinstance(value, str):
            # Gmail can include duplicates; keep the first for now.
            result.setdefault(name.lower(), value)
    return result


def _parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, OverflowError):
        return None


def message_to_gmail_message(message: dict[str, Any]) -> GmailMessage:
    """Convert a Gmail API message (format=metadata) to GmailMessage.

    The message date is Gmail's internalDate when present, falling back to the
    Date header.
    """

    hm = _header_map(message)

    label_ids = message.get("labelIds") or []
    if not isinstance(label_ids, list):
        label_ids = []
    label_ids = [str(x) for x in label_ids if isinstance(x, str)]

    date = from_epoch_ms(message.get("internalDate")) or _parse_date(hm.get("date"))

    return GmailMessage(
        message_id=str(message.get("id") or ""),
        subject=hm.get("subject"),
        date=date,
        is_unread="UNREAD" in label_ids,
        label_ids=tuple(label_ids),
    )


def thread_label_ids(messages: list[GmailMessage]) -> list[str]:
    """Union of message label ids in first-seen order."""

    seen: dict[str, None] = {}
    for m in messages:
        for label_id in m.label_ids:
            seen.setdefault(label_id, None)
    return list(seen)
