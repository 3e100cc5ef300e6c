"""
Textual persistence formats for the StudentRecords table.

- TSV database file (OPEN / SAVE / BACKUP): `id<TAB>name<TAB>programme<TAB>mark`
- CSV import/export: header `ID,Name,Programme,Mark`, rows per the CSV codec
- SQL export: a DROP/CREATE preamble followed by one INSERT per record

Readers skip malformed lines instead of failing the whole file. Nothing here
touches a RecordStore except `import_csv`, which inserts through the store API.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from student_records.config import Settings
from student_records.domain.errors import (
    DuplicateIdError,
    MalformedRowError,
    OpenFailedError,
    ParseError,
)
from student_records.domain.models import Record, format_mark, is_storable_text
from student_records.infrastructure.file_factory import read_lines, write_lines
from student_records.parsing.csv_codec import CSV_HEADER, format_row, is_header, split_row
from student_records.parsing.tokenizer import parse_float, parse_int
from student_records.store import RecordStore
from student_records.utils.logging import get_logger

log = get_logger(__name__)

TABLE_NAME = "StudentRecords"

SQL_PREAMBLE = (
    "-- SQL dump generated by CMS",
    f"DROP TABLE IF EXISTS {TABLE_NAME};",
    f"CREATE TABLE {TABLE_NAME} (",
    "  id INTEGER PRIMARY KEY,",
    "  name TEXT NOT NULL,",
    "  programme TEXT NOT NULL,",
    "  mark REAL NOT NULL",
    ");",
)


@dataclass(frozen=True)
class LoadResult:
    path: Path
    records: List[Record]
    skipped: int


@dataclass(frozen=True)
class ImportReport:
    path: Path
    added: int
    skipped: int


def _record_from_fields(line: str, fields: Sequence[str]) -> Record:
    for key, value in (("Name", fields[1]), ("Programme", fields[2])):
        if not is_storable_text(value):
            raise MalformedRowError(line, f"invalid {key}")
    try:
        return Record(
            id=parse_int(fields[0], "ID"),
            name=fields[1],
            programme=fields[2],
            mark=parse_float(fields[3], "Mark"),
        )
    except ParseError as exc:
        raise MalformedRowError(line, str(exc)) from exc


# TSV database file


def parse_tsv_line(line: str) -> Optional[Record]:
    """
    Parse one database line. Blank lines yield None.

    Empty tab-separated tokens are discarded, so consecutive tabs count as one
    separator. Tokens beyond the fourth are ignored.
    """
    stripped = line.strip()
    if not stripped:
        return None
    tokens = [token for token in stripped.split("\t") if token]
    if len(tokens) < 4:
        raise MalformedRowError(line, f"expected 4 tab-separated fields, got {len(tokens)}")
    return _record_from_fields(line, tokens[:4])


def format_tsv_line(record: Record) -> str:
    return f"{record.id}\t{record.name}\t{record.programme}\t{format_mark(record.mark)}"


def load_tsv(name: str, settings: Optional[Settings] = None) -> LoadResult:
    """
    Read a database file. The caller decides whether to replace its store.

    Raises
    ------
    OpenFailedError
        If the file cannot be opened.
    """
    path, lines = read_lines(name, settings)
    records: List[Record] = []
    skipped = 0
    for number, line in enumerate(lines, start=1):
        try:
            record = parse_tsv_line(line)
        except MalformedRowError as exc:
            skipped += 1
            log.debug(
                "Skipping malformed database line",
                extra={"line_no": number, "reason": exc.reason},
            )
            continue
        if record is not None:
            records.append(record)
    log.info(
        "Database loaded",
        extra={"path": str(path), "records": len(records), "skipped": skipped},
    )
    return LoadResult(path=path, records=records, skipped=skipped)


def save_tsv(records: Sequence[Record], name: str, settings: Optional[Settings] = None) -> Path:
    path = write_lines(name, (format_tsv_line(record) for record in records), settings)
    log.info("Database saved", extra={"path": str(path), "records": len(records)})
    return path


# CSV import / export


def read_csv_records(lines: Sequence[str]) -> Tuple[List[Record], int]:
    """
    Parse CSV lines into records, skipping blank lines and header rows.

    Returns the records and the number of malformed rows skipped.
    """
    records: List[Record] = []
    malformed = 0
    for number, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped:
            continue
        try:
            fields = split_row(stripped)
            if is_header(fields):
                continue
            records.append(_record_from_fields(stripped, fields))
        except MalformedRowError as exc:
            malformed += 1
            log.debug("Skipping malformed CSV row", extra={"line_no": number, "reason": exc.reason})
    return records, malformed


def import_csv(store: RecordStore, name: str, settings: Optional[Settings] = None) -> ImportReport:
    """
    Insert the rows of a CSV file into `store`.

    Rows whose id already exists are skipped; existing records are never
    overwritten.

    Raises
    ------
    OpenFailedError
        If the file cannot be opened or is empty.
    """
    path, lines = read_lines(name, settings)
    if not lines:
        raise OpenFailedError(name, "file is empty")

    records, skipped = read_csv_records(lines)
    added = 0
    for record in records:
        try:
            store.insert(record)
        except DuplicateIdError:
            skipped += 1
            log.debug("Skipping CSV row with existing id", extra={"record_id": record.id})
            continue
        added += 1

    log.info("CSV imported", extra={"path": str(path), "added": added, "skipped": skipped})
    return ImportReport(path=path, added=added, skipped=skipped)


def export_csv(records: Sequence[Record], name: str, settings: Optional[Settings] = None) -> Path:
    lines = [CSV_HEADER]
    lines.extend(format_row(record) for record in records)
    path = write_lines(name, lines, settings)
    log.info("CSV exported", extra={"path": str(path), "records": len(records)})
    return path


# SQL export


def _sql_literal(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def render_sql(records: Sequence[Record]) -> List[str]:
    lines = list(SQL_PREAMBLE)
    for record in records:
        lines.append(
            f"INSERT INTO {TABLE_NAME}(id,name,programme,mark) "
            f"VALUES({record.id},{_sql_literal(record.name)},"
            f"{_sql_literal(record.programme)},{format_mark(record.mark)});"
        )
    return lines


def export_sql(records: Sequence[Record], name: str, settings: Optional[Settings] = None) -> Path:
    path = write_lines(name, render_sql(records), settings)
    log.info("SQL exported", extra={"path": str(path), "records": len(records)})
    return path


# Backup


def backup_file_name(database_name: str, now: Optional[datetime] = None) -> str:
    """`db/P10-4-CMS.txt` -> `P10-4-CMS.bak-20251125-153012.txt`."""
    base = database_name.replace("\\", "/").rsplit("/", 1)[-1]
    dot = base.rfind(".")
    stem = base[:dot] if dot != -1 else base
    timestamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return f"{stem}.bak-{timestamp}.txt"


def backup(
    records: Sequence[Record],
    database_name: str,
    settings: Optional[Settings] = None,
    now: Optional[datetime] = None,
) -> Path:
    """Write a timestamped TSV copy of `records` named after the current database file."""
    return save_tsv(records, backup_file_name(database_name, now), settings)


__all__ = [
    "ImportReport",
    "LoadResult",
    "SQL_PREAMBLE",
    "TABLE_NAME",
    "backup",
    "backup_file_name",
    "export_csv",
    "export_sql",
    "format_tsv_line",
    "import_csv",
    "load_tsv",
    "parse_tsv_line",
    "read_csv_records",
    "render_sql",
    "save_tsv",
]
