"""Local storage for run logs and the run overview.

This package contains a spreadsheet-like workbook persisted in SQLite and a
folder hierarchy on the local filesystem that places those workbooks.
"""

from .filesystem import FileSystemStorage
from .workbook import SqliteWorkbook

__all__ = ["FileSystemStorage", "SqliteWorkbook"]
