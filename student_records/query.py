"""
Read-only views over the record store: sorting, searching, summary statistics.

None of these functions mutate their input; they work on the sequence handed
in (normally `RecordStore.snapshot()`).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from student_records.domain.errors import EmptySearchError
from student_records.domain.models import Record


class SortField(str, enum.Enum):
    NONE = "none"
    ID = "id"
    MARK = "mark"


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class SearchField(str, enum.Enum):
    NAME = "name"
    PROGRAMME = "programme"


_SORT_KEYS: Dict[SortField, Callable[[Record], float]] = {
    SortField.ID: lambda record: record.id,
    SortField.MARK: lambda record: record.mark,
}

_SEARCH_FIELDS: Dict[SearchField, Callable[[Record], str]] = {
    SearchField.NAME: lambda record: record.name,
    SearchField.PROGRAMME: lambda record: record.programme,
}


def sorted_view(
    records: Sequence[Record],
    field: SortField = SortField.NONE,
    direction: SortDirection = SortDirection.ASC,
) -> List[Record]:
    """
    Return a reordered copy of `records`.

    The ascending sort is stable. Descending reverses the ascending result as a
    whole, so records with equal keys come out in reverse store order.
    `SortField.NONE` keeps store order and ignores `direction`.
    """
    if field is SortField.NONE:
        return list(records)
    ordered = sorted(records, key=_SORT_KEYS[field])
    if direction is SortDirection.DESC:
        ordered.reverse()
    return ordered


def find(records: Sequence[Record], field: SearchField, needle: str) -> List[Record]:
    """
    Case-insensitive substring search over one text field, in store order.

    Raises
    ------
    EmptySearchError
        If `needle` is empty; an empty needle never means "match everything".
    """
    if not needle:
        raise EmptySearchError()
    wanted = needle.casefold()
    accessor = _SEARCH_FIELDS[field]
    return [record for record in records if wanted in accessor(record).casefold()]


@dataclass(frozen=True)
class Summary:
    total: int
    average: float
    highest: Record
    lowest: Record


def summarize(records: Sequence[Record]) -> Optional[Summary]:
    """Count and mean mark, plus the first record holding the highest and lowest mark."""
    if not records:
        return None
    highest = lowest = records[0]
    for record in records[1:]:
        if record.mark > highest.mark:
            highest = record
        if record.mark < lowest.mark:
            lowest = record
    average = sum(record.mark for record in records) / len(records)
    return Summary(total=len(records), average=average, highest=highest, lowest=lowest)


__all__ = [
    "SearchField",
    "SortDirection",
    "SortField",
    "Summary",
    "find",
    "sorted_view",
    "summarize",
]
