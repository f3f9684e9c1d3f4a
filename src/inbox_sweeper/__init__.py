"""Inbox Sweeper - rule-based bulk cleanup of a Gmail inbox.

This package classifies mail threads with configurable rules, records every
decision in a per-run log workbook, and tracks each run's status in an
overview workbook.
"""

__version__ = "0.1.0"

from inbox_sweeper.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
