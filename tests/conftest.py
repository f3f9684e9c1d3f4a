"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from tests.helpers import MemoryStorage


# === Fixtures ===


@pytest.fixture
def mock_settings():
    """Provide settings isolated from the environment and .env files."""
    from inbox_sweeper.config import Settings

    return Settings(_env_file=None, timezone="UTC", log_level="DEBUG", debug=True)


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 31, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_thread_data() -> dict:
    """Gmail API thread (format=metadata) with one read and one unread message."""
    return {
        "id": "thread789",
        "messages": [
            {
                "id": "msg1",
                "threadId": "thread789",
                "labelIds": ["INBOX", "CATEGORY_UPDATES"],
                "internalDate": "1735725600000",
                "payload": {
                    "headers": [
                        {"name": "Subject", "value": "Weekly Digest - January"},
                        {"name": "Date", "value": "Wed, 1 Jan 2025 10:00:00 +0000"},
                    ]
                },
            },
            {
                "id": "msg2",
                "threadId": "thread789",
                "labelIds": ["INBOX", "UNREAD", "CATEGORY_UPDATES", "Label_42"],
                "internalDate": "1736330400000",
                "payload": {
                    "headers": [
                        {"name": "Subject", "value": "Re: Weekly Digest - January"},
                        {"name": "Date", "value": "Wed, 8 Jan 2025 10:00:00 +0000"},
                    ]
                },
            },
        ],
    }
