"""
In-memory record store.

The store owns the ordered collection of records and is the only place that
mutates it. Insertion order is the canonical order: insert appends, update
replaces in place, delete closes the gap by shifting later records left.
Sorting never happens here; see `student_records.query`.

Usage:
    store = RecordStore()
    store.insert(Record(id=1, name="Ann", programme="CS", mark=70.0))
    store.update(1, mark=72.5)
    store.delete(1)
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Set

from student_records.domain.errors import (
    CapacityOverflowError,
    DuplicateIdError,
    RecordNotFoundError,
)
from student_records.domain.models import Record
from student_records.utils.logging import get_logger

log = get_logger(__name__)


class RecordStore:
    """
    Ordered collection of Records with unique ids.

    Records are immutable, so `get` and `snapshot` hand out values that stay
    valid regardless of later mutations.
    """

    def __init__(self, records: Optional[Iterable[Record]] = None) -> None:
        self._records: List[Record] = []
        self._ids: Set[int] = set()
        if records is not None:
            self.replace_all(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records))

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids

    def _index_of(self, record_id: int) -> int:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return -1

    def insert(self, record: Record) -> Record:
        """
        Append a record.

        Raises
        ------
        DuplicateIdError
            If a record with the same id is already stored. The store is unchanged.
        """
        if record.id in self._ids:
            raise DuplicateIdError(record.id)
        try:
            self._records.append(record)
        except MemoryError as exc:
            raise CapacityOverflowError(
                f"Out of memory when expanding student table ({len(self._records)} records)."
            ) from exc
        self._ids.add(record.id)
        return record

    def get(self, record_id: int) -> Optional[Record]:
        index = self._index_of(record_id)
        return None if index == -1 else self._records[index]

    def update(
        self,
        record_id: int,
        name: Optional[str] = None,
        programme: Optional[str] = None,
        mark: Optional[float] = None,
    ) -> Record:
        """
        Overwrite only the supplied fields of the record with `record_id`.

        The replacement is fully validated before it is stored, so either every
        supplied field is applied or none is.
        """
        index = self._index_of(record_id)
        if index == -1:
            raise RecordNotFoundError(record_id)
        updated = self._records[index].with_changes(name=name, programme=programme, mark=mark)
        self._records[index] = updated
        return updated

    def delete(self, record_id: int) -> Record:
        index = self._index_of(record_id)
        if index == -1:
            raise RecordNotFoundError(record_id)
        removed = self._records.pop(index)
        self._ids.discard(record_id)
        return removed

    def clear(self) -> None:
        self._records.clear()
        self._ids.clear()

    def replace_all(self, records: Iterable[Record]) -> int:
        """
        Discard current contents and store `records` in order.

        Later duplicates of an id are skipped; the first occurrence wins.
        Returns the number of records stored.
        """
        self.clear()
        for record in records:
            if record.id in self._ids:
                log.debug("Skipping duplicate id on load", extra={"record_id": record.id})
                continue
            self.insert(record)
        return len(self._records)

    def snapshot(self) -> List[Record]:
        """Records in store order, as a new list."""
        return list(self._records)


__all__ = ["RecordStore"]
