"""
Key/value extraction from free-form command text.

    INSERT ID=2301234 Name="Brian Goh" Programme="Digital Supply Chain" Mark=88.8

`extract_value(line, "name")` returns "Brian Goh". Keys match case-insensitively
and only at a word start, so `ID` is never found inside `VALID=`. Quoted values
run to the next double quote; there is no escape for a quote inside a value.
"""

from __future__ import annotations

import math
import re
from typing import Optional

from student_records.domain.errors import InvalidNumberError, UnterminatedQuoteError
from student_records.domain.models import INT32_MAX, INT32_MIN, to_float32, truncate_utf8

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _skip_whitespace(line: str, pos: int) -> int:
    while pos < len(line) and line[pos].isspace():
        pos += 1
    return pos


def _find_key(line: str, key: str, start: int) -> int:
    wanted = key.lower()
    width = len(key)
    for pos in range(start, len(line) - width + 1):
        if line[pos : pos + width].lower() == wanted:
            return pos
    return -1


def extract_value(line: str, key: str, max_bytes: Optional[int] = None) -> Optional[str]:
    """
    Locate the value bound to `key` in `line`.

    Returns None when no `key=` occurrence is found. An unquoted value that is
    empty (key and `=` at the end of the line) also counts as not found.

    Raises
    ------
    UnterminatedQuoteError
        If the value opens with a double quote that is never closed.
    """
    pos = _find_key(line, key, 0)
    while pos != -1:
        if pos > 0 and not line[pos - 1].isspace():
            pos = _find_key(line, key, pos + 1)
            continue

        cursor = _skip_whitespace(line, pos + len(key))
        if cursor >= len(line) or line[cursor] != "=":
            pos = _find_key(line, key, pos + 1)
            continue

        cursor = _skip_whitespace(line, cursor + 1)
        if cursor < len(line) and line[cursor] == '"':
            end = line.find('"', cursor + 1)
            if end == -1:
                raise UnterminatedQuoteError(key)
            value = line[cursor + 1 : end]
        else:
            end = cursor
            while end < len(line) and not line[end].isspace():
                end += 1
            value = line[cursor:end]
            if not value:
                return None

        if max_bytes is not None:
            value = truncate_utf8(value, max_bytes)
        return value

    return None


def parse_int(text: str, field: str = "ID") -> int:
    """
    Parse the leading integer of `text`; trailing characters are ignored.

    Raises InvalidNumberError when there is no digit run or the value does not
    fit in 32 bits.
    """
    match = _INT_PREFIX.match(text)
    if not match:
        raise InvalidNumberError(field, text)
    value = int(match.group(1))
    if not INT32_MIN <= value <= INT32_MAX:
        raise InvalidNumberError(field, text)
    return value


def parse_float(text: str, field: str = "Mark") -> float:
    """
    Parse the leading decimal number of `text`; trailing characters are ignored.

    Values that overflow single precision are rejected.
    """
    match = _FLOAT_PREFIX.match(text)
    if not match:
        raise InvalidNumberError(field, text)
    value = float(match.group(1))
    if not math.isfinite(to_float32(value)):
        raise InvalidNumberError(field, text)
    return value


__all__ = ["extract_value", "parse_float", "parse_int"]
