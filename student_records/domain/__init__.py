"""
Domain package for the student records manager.

Exports the Record model and the error taxonomy used across the store,
parsers, and dispatcher. Keep this package focused on data definitions and
validation concerns.
"""

from student_records.domain.errors import (
    CapacityOverflowError,
    DuplicateIdError,
    EmptySearchError,
    InvalidNumberError,
    InvalidTextError,
    MalformedRowError,
    MissingKeyError,
    OpenFailedError,
    ParseError,
    RecordNotFoundError,
    RecordsError,
    StorageError,
    UnterminatedQuoteError,
    WriteFailedError,
)
from student_records.domain.models import TEXT_MAX_BYTES, Record, format_mark

__all__ = [
    "Record",
    "TEXT_MAX_BYTES",
    "format_mark",
    # Errors
    "CapacityOverflowError",
    "DuplicateIdError",
    "EmptySearchError",
    "InvalidNumberError",
    "InvalidTextError",
    "MalformedRowError",
    "MissingKeyError",
    "OpenFailedError",
    "ParseError",
    "RecordNotFoundError",
    "RecordsError",
    "StorageError",
    "UnterminatedQuoteError",
    "WriteFailedError",
]
