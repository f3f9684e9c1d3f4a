"""Data models for Inbox Sweeper.

This module contains Pydantic models for data validation and serialization.
"""

from .run_log import FallbackRow, LogRow, OverviewRow, RunStatus, ThreadAction
from .thread import Decision, Delete, Skip, ThreadFacts

__all__ = [
    "Decision",
    "Delete",
    "FallbackRow",
    "LogRow",
    "OverviewRow",
    "RunStatus",
    "Skip",
    "ThreadAction",
    "ThreadFacts",
]
