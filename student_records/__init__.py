"""
Student Records Manager - a command-driven store of student records.

Records (id, name, programme, mark) live in an in-memory table mutated by line
commands and persisted as:

- a tab-separated database file (OPEN / SAVE / BACKUP)
- CSV files for spreadsheet import and export
- SQL dumps with CREATE TABLE and INSERT statements

The package keeps parsing, storage, querying and file formats in separate
layers; the Typer CLI in `student_records.main` is a thin shell around
`CommandDispatcher`.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from student_records.config import Settings, get_settings
from student_records.dispatcher import CommandDispatcher, CommandResult, Session
from student_records.domain.models import Record
from student_records.parsing.commands import parse_command
from student_records.query import SearchField, SortDirection, SortField, find, sorted_view
from student_records.store import RecordStore
from student_records.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Core
    "Record",
    "RecordStore",
    "parse_command",
    # Queries
    "SearchField",
    "SortDirection",
    "SortField",
    "find",
    "sorted_view",
    # Dispatch
    "CommandDispatcher",
    "CommandResult",
    "Session",
    # Logging
    "configure_logging",
    "get_logger",
]
