"""
CSV codec for the four-column student table.

Rows look like:

    ID,Name,Programme,Mark
    2301234,"Goh, Brian","Digital ""Supply"" Chain",88.8

Quoted fields may contain commas; a doubled quote inside a quoted field is a
literal quote. Rows with text after a closing quote or the wrong number of
fields are rejected so that the importer can skip them; the stdlib `csv`
reader would accept both.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from student_records.domain.errors import MalformedRowError
from student_records.domain.models import Record, format_mark

FIELD_COUNT = 4
HEADER_FIELDS: Tuple[str, str, str, str] = ("ID", "Name", "Programme", "Mark")
CSV_HEADER = ",".join(HEADER_FIELDS)

_BLANKS = " \t"
_LINE_END = "\r\n"


def split_row(line: str) -> Tuple[str, str, str, str]:
    """
    Split one CSV line into exactly four raw field values.

    Raises
    ------
    MalformedRowError
        On a missing separator, an unterminated quoted field, text between a
        closing quote and the next comma, or trailing text after field four.
    """
    fields = []
    pos = 0
    length = len(line)

    for col in range(FIELD_COUNT):
        while pos < length and line[pos] in _BLANKS:
            pos += 1

        if pos < length and line[pos] == '"':
            pos += 1
            chars = []
            closed = False
            while pos < length:
                char = line[pos]
                if char == '"':
                    if pos + 1 < length and line[pos + 1] == '"':
                        chars.append('"')
                        pos += 2
                        continue
                    pos += 1
                    closed = True
                    break
                chars.append(char)
                pos += 1
            if not closed:
                raise MalformedRowError(line, f"unterminated quote in field {col + 1}")
            while pos < length and line[pos] in _BLANKS:
                pos += 1
            value = "".join(chars)
        else:
            start = pos
            while pos < length and line[pos] != "," and line[pos] not in _LINE_END:
                pos += 1
            value = line[start:pos]

        if col < FIELD_COUNT - 1:
            if pos >= length or line[pos] != ",":
                raise MalformedRowError(line, f"expected ',' after field {col + 1}")
            pos += 1
        fields.append(value)

    while pos < length and (line[pos] in _BLANKS or line[pos] in _LINE_END):
        pos += 1
    if pos != length:
        raise MalformedRowError(line, "unexpected text after field 4")

    return fields[0], fields[1], fields[2], fields[3]


def is_header(fields: Sequence[str]) -> bool:
    """True when `fields` spell `ID, Name, Programme, Mark`, ignoring case."""
    return len(fields) == FIELD_COUNT and all(
        value.lower() == expected.lower() for value, expected in zip(fields, HEADER_FIELDS)
    )


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def format_row(record: Record) -> str:
    """Render `record` as `id,"name","programme",mark` (no line terminator)."""
    return ",".join(
        (str(record.id), _quote(record.name), _quote(record.programme), format_mark(record.mark))
    )


__all__ = [
    "CSV_HEADER",
    "FIELD_COUNT",
    "HEADER_FIELDS",
    "format_row",
    "is_header",
    "split_row",
]
