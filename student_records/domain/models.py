"""
Domain models for the student records manager.

A Record is one row of the StudentRecords table. Text fields are bounded and
marks are held at single precision, so the values that reach storage are
exactly the values that get written back to disk.
"""
from __future__ import annotations

import math
import struct
from typing import Optional

from pydantic import BaseModel, Field, field_validator

TEXT_MAX_BYTES = 127
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def truncate_utf8(text: str, max_bytes: int) -> str:
    """Cut `text` to at most `max_bytes` of UTF-8 without splitting a character."""
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    return encoded[:max_bytes].decode("utf-8", errors="ignore")


def to_float32(value: float) -> float:
    """Round a float to the nearest IEEE-754 single-precision value."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def format_mark(mark: float) -> str:
    return f"{mark:.1f}"


def is_storable_text(text: str) -> bool:
    """Non-empty and free of tabs and line breaks, so a database line reads back intact."""
    return bool(text) and not any(char in text for char in "\t\r\n")


class Record(BaseModel):
    """
    Representation of a single student record.
    """

    id: int = Field(..., ge=INT32_MIN, le=INT32_MAX, description="Unique student ID.")
    name: str = Field(..., description=f"Student name, at most {TEXT_MAX_BYTES} bytes.")
    programme: str = Field(..., description=f"Programme, at most {TEXT_MAX_BYTES} bytes.")
    mark: float = Field(..., description="Mark, single precision, no range enforced.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @field_validator("name", "programme")
    @classmethod
    def _bound_text(cls, value: str) -> str:
        return truncate_utf8(value, TEXT_MAX_BYTES)

    @field_validator("mark")
    @classmethod
    def _single_precision(cls, value: float) -> float:
        value = to_float32(value)
        if not math.isfinite(value):
            raise ValueError("mark must be a finite single-precision number")
        return value

    def with_changes(
        self,
        name: Optional[str] = None,
        programme: Optional[str] = None,
        mark: Optional[float] = None,
    ) -> "Record":
        """Return a validated copy with only the supplied fields replaced."""
        data = self.model_dump()
        if name is not None:
            data["name"] = name
        if programme is not None:
            data["programme"] = programme
        if mark is not None:
            data["mark"] = mark
        return Record.model_validate(data)


__all__ = [
    "INT32_MAX",
    "INT32_MIN",
    "Record",
    "TEXT_MAX_BYTES",
    "format_mark",
    "is_storable_text",
    "to_float32",
    "truncate_utf8",
]
