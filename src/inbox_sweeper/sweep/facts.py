"""Derive ThreadFacts from a mail store thread."""

from __future__ import annotations

from inbox_sweeper.contracts import ThreadHandle
from inbox_sweeper.exceptions import ThreadProcessingError
from inbox_sweeper.models import ThreadFacts
from inbox_sweeper.rules.labels import SystemLabelPredicate, primary_category


def extract_facts(
    thread: ThreadHandle,
    is_system_label: SystemLabelPredicate | None = None,
) -> ThreadFacts:
    """Snapshot the attributes rules need.

    The representative message is the first unread message if there is one,
    otherwise the first message. Its subject and date are the ones logged.

    Raises:
        ThreadProcessingError: If the thread has no messages.
    """

    predicate = is_system_label or SystemLabelPredicate()

    messages = list(thread.get_messages())
    if not messages:
        raise ThreadProcessingError(f"Thread {thread.id} has no messages")

    unread = [m for m in messages if m.is_unread]
    representative = unread[0] if unread else messages[0]

    labels = [str(label) for label in thread.get_labels()]

    return ThreadFacts(
        thread_id=thread.id,
        subject=representative.subject or "",
        date=representative.date,
        labels=tuple(labels),
        custom_labels=tuple(predicate.custom_labels(labels)),
        category=primary_category(labels),
        unread_count=len(unread),
        message_count=len(messages),
    )
