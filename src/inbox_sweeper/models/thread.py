"""Per-thread facts and the decisions rules make about them.

A decision is a tagged variant: a thread is either deleted (with a reason) or
skipped (optionally with a reason). There is no third state and no way to set
both.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ThreadFacts(BaseModel):
    """Read-only snapshot of the thread attributes rules look at."""

    model_config = ConfigDict(frozen=True)

    thread_id: str = Field(description="Mail store thread ID")
    subject: str = Field(default="", description="Subject of the representative message")
    date: datetime | None = Field(default=None, description="Date of the representative message")
    labels: tuple[str, ...] = Field(default=(), description="All label names on the thread")
    custom_labels: tuple[str, ...] = Field(default=(), description="Labels applied by the user")
    category: str = Field(default="", description="Primary category label, e.g. CATEGORY_PROMOTIONS")
    unread_count: int = Field(default=0, ge=0, description="Number of unread messages")
    message_count: int = Field(default=0, ge=0, description="Number of messages in the thread")


class Delete(BaseModel):
    """Move the thread to the bin."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["delete"] = "delete"
    reason: str


class Skip(BaseModel):
    """Leave the thread alone."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["skip"] = "skip"
    reason: str | None = None


Decision = Annotated[Union[Delete, Skip], Field(discriminator="kind")]
