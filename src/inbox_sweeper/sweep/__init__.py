"""Batch classification and run tracking."""

from .facts import extract_facts
from .paginator import BatchPaginator, BatchStats
from .runner import CleanupRunner, RuleBatch, RunResult, build_default_batches
from .tracker import RunHandle, RunTracker
from .writer import LogWriter

__all__ = [
    "BatchPaginator",
    "BatchStats",
    "CleanupRunner",
    "LogWriter",
    "RuleBatch",
    "RunHandle",
    "RunResult",
    "RunTracker",
    "build_default_batches",
    "extract_facts",
]
