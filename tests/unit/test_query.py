from typing import List

import pytest

from student_records.domain.errors import EmptySearchError
from student_records.domain.models import Record
from student_records.query import (
    SearchField,
    SortDirection,
    SortField,
    find,
    sorted_view,
    summarize,
)


def _ids(records: List[Record]) -> List[int]:
    return [record.id for record in records]


@pytest.mark.parametrize(
    ("field", "direction", "expected"),
    [
        (SortField.NONE, SortDirection.ASC, [3, 1, 2, 4]),
        (SortField.NONE, SortDirection.DESC, [3, 1, 2, 4]),
        (SortField.ID, SortDirection.ASC, [1, 2, 3, 4]),
        (SortField.ID, SortDirection.DESC, [4, 3, 2, 1]),
        # Equal marks (ids 1 and 4) keep store order ascending, reverse it descending.
        (SortField.MARK, SortDirection.ASC, [1, 4, 3, 2]),
        (SortField.MARK, SortDirection.DESC, [2, 3, 4, 1]),
    ],
)
def test_sorted_view(sample_records, field, direction, expected):
    assert _ids(sorted_view(sample_records, field, direction)) == expected


def test_sorted_view_does_not_reorder_input(sample_records):
    before = list(sample_records)
    sorted_view(sample_records, SortField.ID, SortDirection.DESC)
    assert sample_records == before


def test_find_is_case_insensitive_substring(sample_records):
    assert _ids(find(sample_records, SearchField.NAME, "BRI")) == [3, 4]
    assert _ids(find(sample_records, SearchField.PROGRAMME, "science")) == [1, 4]


def test_find_without_matches_returns_empty(sample_records):
    assert find(sample_records, SearchField.NAME, "zed") == []


def test_find_rejects_empty_needle(sample_records):
    with pytest.raises(EmptySearchError):
        find(sample_records, SearchField.NAME, "")


def test_summarize(sample_records):
    summary = summarize(sample_records)
    assert summary.total == 4
    assert summary.average == pytest.approx((88.8 + 70.0 + 95.5 + 70.0) / 4, abs=1e-4)
    assert summary.highest.id == 2
    # Two records share the lowest mark; the first in store order is reported.
    assert summary.lowest.id == 1


def test_summarize_empty_returns_none():
    assert summarize([]) is None


@pytest.mark.parametrize("name", ["brian", "BRIAN", "Brianna"])
def test_find_matches_regardless_of_case(name):
    records = [Record(id=1, name=name, programme="CS", mark=50.0)]
    assert find(records, SearchField.NAME, "BRI") == records
