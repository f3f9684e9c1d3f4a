"""Run lifecycle and log row models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class RunStatus(str, Enum):
    """Lifecycle status of a run as shown in the overview."""

    STARTED = "Started"
    COMPLETED = "Completed"
    FAILED = "Failed"


class ThreadAction(str, Enum):
    """Action recorded for a classified thread."""

    MOVE_TO_BIN = "Move To Bin"
    SKIPPED = "Skipped"


class LogRow(BaseModel):
    """One classified thread in the run log."""

    timestamp: datetime = Field(description="When the thread was processed")
    rule_name: str = Field(description="Label of the rule/query that produced the row")
    subject: str = Field(default="", description="Subject of the representative message")
    email_date: datetime | None = Field(default=None, description="Date of the representative message")
    reason: str = Field(default="", description="Decision reason")
    unread_count: int = Field(default=0, description="Unread messages in the thread")
    custom_labels: list[str] = Field(default_factory=list, description="User labels")
    labels: list[str] = Field(default_factory=list, description="All labels")
    category: str = Field(default="", description="Category label, e.g. CATEGORY_UPDATES")
    action: ThreadAction = Field(description="Action taken for the thread")
    thread_id: str = Field(description="Mail store thread ID")


class FallbackRow(BaseModel):
    """A thread that could not be processed."""

    timestamp: datetime = Field(description="When the failure happened")
    issue: str = Field(description="Short failure tag, e.g. ThreadException")
    subject: str = Field(default="", description="Subject, if it was known")
    thread_id: str = Field(default="", description="Mail store thread ID, if it was known")
    details: str = Field(default="", description="Raw error detail")


class OverviewRow(BaseModel):
    """One run as listed in the overview workbook."""

    run_timestamp: str
    log_file_name: str
    log_file_id: str
    link: str
    status: str
