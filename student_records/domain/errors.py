"""
Exception taxonomy for the student records manager.

Everything except CapacityOverflowError is recoverable: the dispatcher turns
it into a one-line status message and the shell keeps running.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union


class RecordsError(Exception):
    """Base error for this package."""


class DuplicateIdError(RecordsError):
    """Raised when inserting a record whose id is already stored."""

    def __init__(self, record_id: int) -> None:
        super().__init__(f"The record with ID={record_id} already exists.")
        self.record_id = record_id


class RecordNotFoundError(RecordsError):
    """Raised when a query, update or delete names an id that is not stored."""

    def __init__(self, record_id: int) -> None:
        super().__init__(f"The record with ID={record_id} does not exist.")
        self.record_id = record_id


class ParseError(RecordsError):
    """Raised when command text or a file row cannot be parsed."""


class MissingKeyError(ParseError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Missing {key}=")
        self.key = key


class InvalidNumberError(ParseError):
    def __init__(self, field: str, text: str) -> None:
        super().__init__(f"Invalid {field}.")
        self.field = field
        self.text = text


class InvalidTextError(ParseError):
    """Raised for an empty Name or Programme, or one containing a tab."""

    def __init__(self, field: str, text: str) -> None:
        super().__init__(f"Invalid {field}: must be non-empty and contain no tabs.")
        self.field = field
        self.text = text


class UnterminatedQuoteError(ParseError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Unterminated quote in {key}=")
        self.key = key


class MalformedRowError(ParseError):
    """Raised by the CSV codec; loaders skip the row and continue."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"Malformed row ({reason}): {line!r}")
        self.line = line
        self.reason = reason


class EmptySearchError(ParseError):
    def __init__(self) -> None:
        super().__init__("Please provide a search string.")


class StorageError(RecordsError):
    """Base class for file I/O failures."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = str(path)
        self.reason = reason


class OpenFailedError(StorageError):
    pass


class WriteFailedError(StorageError):
    pass


class CapacityOverflowError(RecordsError):
    """Storage could not grow. Not recoverable; the process must stop."""


__all__ = [
    "RecordsError",
    "DuplicateIdError",
    "RecordNotFoundError",
    "ParseError",
    "MissingKeyError",
    "InvalidNumberError",
    "InvalidTextError",
    "UnterminatedQuoteError",
    "MalformedRowError",
    "EmptySearchError",
    "StorageError",
    "OpenFailedError",
    "WriteFailedError",
    "CapacityOverflowError",
]
