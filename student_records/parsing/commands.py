"""
Command-line parser: raw text in, typed command value out.

Verbs are matched on whole words, case-insensitively, so `SHOW ALLOCATE` is an
unknown command rather than a `SHOW ALL`. Argument errors raise ParseError
subclasses whose message is the status line shown to the user.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union, get_args

from student_records.domain.errors import InvalidTextError, MissingKeyError, ParseError
from student_records.domain.models import TEXT_MAX_BYTES, is_storable_text
from student_records.parsing.tokenizer import extract_value, parse_float, parse_int
from student_records.query import SearchField, SortDirection, SortField

SHOW_ALL_USAGE = "Usage: SHOW ALL [SORT BY ID|MARK [ASC|DESC]]"


@dataclass(frozen=True)
class OpenCommand:
    path: str


@dataclass(frozen=True)
class SaveCommand:
    path: Optional[str] = None


@dataclass(frozen=True)
class ShowAllCommand:
    field: SortField = SortField.NONE
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class ShowSummaryCommand:
    pass


@dataclass(frozen=True)
class InsertCommand:
    record_id: int
    name: str
    programme: str
    mark: float


@dataclass(frozen=True)
class QueryCommand:
    record_id: int


@dataclass(frozen=True)
class UpdateCommand:
    record_id: int
    name: Optional[str] = None
    programme: Optional[str] = None
    mark: Optional[float] = None


@dataclass(frozen=True)
class DeleteCommand:
    record_id: int


@dataclass(frozen=True)
class FindCommand:
    field: SearchField
    needle: str


@dataclass(frozen=True)
class ImportCsvCommand:
    path: str


@dataclass(frozen=True)
class ExportCsvCommand:
    path: str


@dataclass(frozen=True)
class ExportSqlCommand:
    path: str


@dataclass(frozen=True)
class BackupCommand:
    pass


@dataclass(frozen=True)
class HelpCommand:
    pass


@dataclass(frozen=True)
class ExitCommand:
    pass


@dataclass(frozen=True)
class UnknownCommand:
    line: str


Command = Union[
    OpenCommand,
    SaveCommand,
    ShowAllCommand,
    ShowSummaryCommand,
    InsertCommand,
    QueryCommand,
    UpdateCommand,
    DeleteCommand,
    FindCommand,
    ImportCsvCommand,
    ExportCsvCommand,
    ExportSqlCommand,
    BackupCommand,
    HelpCommand,
    ExitCommand,
    UnknownCommand,
]

COMMAND_TYPES = get_args(Command)


def _remainder(line: str, words: int) -> str:
    """Text after the first `words` words, trimmed, with one layer of quotes removed."""
    match = re.match(r"\s*" + r"\S+\s*" * words, line)
    rest = line[match.end():].strip() if match else ""
    if rest.startswith('"'):
        rest = rest[1:]
        closing = rest.rfind('"')
        if closing != -1:
            rest = rest[:closing]
    return rest


def _require(line: str, key: str, max_bytes: Optional[int] = None) -> str:
    value = extract_value(line, key, max_bytes)
    if value is None:
        raise MissingKeyError(key)
    return value


def _checked_text(key: str, value: Optional[str]) -> Optional[str]:
    if value is not None and not is_storable_text(value):
        raise InvalidTextError(key, value)
    return value


def _path_argument(line: str, words: int, message: str) -> str:
    path = _remainder(line, words)
    if not path:
        raise ParseError(message)
    return path


def _parse_show_all(words: list[str]) -> ShowAllCommand:
    clause = [word.upper() for word in words[2:]]
    if not clause:
        return ShowAllCommand()
    if len(clause) not in (3, 4) or clause[:2] != ["SORT", "BY"]:
        raise ParseError(SHOW_ALL_USAGE)
    try:
        field = SortField(clause[2].lower())
        direction = SortDirection(clause[3].lower()) if len(clause) == 4 else SortDirection.ASC
    except ValueError as exc:
        raise ParseError(SHOW_ALL_USAGE) from exc
    if field is SortField.NONE:
        raise ParseError(SHOW_ALL_USAGE)
    return ShowAllCommand(field=field, direction=direction)


def _parse_insert(line: str) -> InsertCommand:
    id_text = _require(line, "ID")
    name = _checked_text("Name", _require(line, "Name", TEXT_MAX_BYTES))
    programme = _checked_text("Programme", _require(line, "Programme", TEXT_MAX_BYTES))
    mark_text = _require(line, "Mark")
    return InsertCommand(
        record_id=parse_int(id_text, "ID"),
        name=name,
        programme=programme,
        mark=parse_float(mark_text, "Mark"),
    )


def _parse_update(line: str) -> UpdateCommand:
    record_id = parse_int(_require(line, "ID"), "ID")
    name = _checked_text("Name", extract_value(line, "Name", TEXT_MAX_BYTES))
    programme = _checked_text("Programme", extract_value(line, "Programme", TEXT_MAX_BYTES))
    mark_text = extract_value(line, "Mark")
    mark = parse_float(mark_text, "Mark") if mark_text is not None else None
    return UpdateCommand(record_id=record_id, name=name, programme=programme, mark=mark)


def parse_command(line: str) -> Command:
    """
    Parse one command line.

    Raises
    ------
    ParseError
        If the verb is recognised but its arguments are missing or invalid.
    """
    words = line.split()
    if not words:
        return UnknownCommand(line)

    verb = words[0].upper()
    second = words[1].upper() if len(words) > 1 else ""

    if verb in ("EXIT", "QUIT"):
        return ExitCommand() if len(words) == 1 else UnknownCommand(line)
    if verb == "HELP":
        return HelpCommand()
    if verb == "OPEN":
        return OpenCommand(_path_argument(line, 1, "Please provide a filename."))
    if verb == "SAVE":
        return SaveCommand(_remainder(line, 1) or None)
    if verb == "SHOW" and second == "ALL":
        return _parse_show_all(words)
    if verb == "SHOW" and second == "SUMMARY" and len(words) == 2:
        return ShowSummaryCommand()
    if verb == "INSERT":
        return _parse_insert(line)
    if verb == "QUERY":
        return QueryCommand(parse_int(_require(line, "ID"), "ID"))
    if verb == "UPDATE":
        return _parse_update(line)
    if verb == "DELETE":
        return DeleteCommand(parse_int(_require(line, "ID"), "ID"))
    if verb == "FIND" and second in ("NAME", "PROGRAMME"):
        return FindCommand(SearchField(second.lower()), _remainder(line, 2))
    if verb == "IMPORT" and second == "CSV":
        return ImportCsvCommand(_path_argument(line, 2, "Please provide CSV filename."))
    if verb == "EXPORT" and second == "CSV":
        return ExportCsvCommand(_path_argument(line, 2, "Please provide CSV filename."))
    if verb == "EXPORT" and second == "SQL":
        return ExportSqlCommand(_path_argument(line, 2, "Please provide SQL filename."))
    if verb == "BACKUP":
        return BackupCommand()
    return UnknownCommand(line)


__all__ = [
    "COMMAND_TYPES",
    "BackupCommand",
    "Command",
    "DeleteCommand",
    "ExitCommand",
    "ExportCsvCommand",
    "ExportSqlCommand",
    "FindCommand",
    "HelpCommand",
    "ImportCsvCommand",
    "InsertCommand",
    "OpenCommand",
    "QueryCommand",
    "SaveCommand",
    "ShowAllCommand",
    "ShowSummaryCommand",
    "UnknownCommand",
    "UpdateCommand",
    "parse_command",
]
