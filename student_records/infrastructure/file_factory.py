"""
File access helpers for the student records manager.

Centralizes how user-supplied file names become paths and how text files are
read and written. Writes go to a temporary sibling that replaces the target
only on success; a failed write leaves the previous file intact.

Includes retry logic for PermissionError on write using tenacity. A
spreadsheet holding an exported CSV open raises it until the file is released.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from student_records.config import Settings, get_settings
from student_records.domain.errors import OpenFailedError, WriteFailedError
from student_records.utils.logging import get_logger

log = get_logger(__name__)


def _reason(exc: OSError) -> str:
    return exc.strerror or str(exc)


def read_candidates(name: str, settings: Optional[Settings] = None) -> List[Path]:
    """
    Paths tried, in order, when reading `name`.

    The name as given comes first; a relative name is also tried under the
    configured data directory.
    """
    settings = settings or get_settings()
    path = Path(name)
    candidates = [path]
    if not path.is_absolute() and settings.data_dir is not None:
        candidates.append(settings.data_dir / path)
    return candidates


def resolve_write_path(name: str, settings: Optional[Settings] = None) -> Path:
    """Relative names are written under the data directory when one is configured."""
    settings = settings or get_settings()
    path = Path(name)
    if path.is_absolute() or settings.data_dir is None:
        return path
    return settings.data_dir / path


def read_lines(name: str, settings: Optional[Settings] = None) -> Tuple[Path, List[str]]:
    """
    Read a text file and return the path actually used together with its lines.

    Raises
    ------
    OpenFailedError
        If none of the candidate paths can be opened.
    """
    last_error: Optional[OSError] = None
    for candidate in read_candidates(name, settings):
        try:
            with candidate.open("r", encoding="utf-8-sig", errors="replace") as f:
                lines = f.read().splitlines()
        except OSError as exc:
            last_error = exc
            continue
        log.debug("File read", extra={"path": str(candidate), "lines": len(lines)})
        return candidate, lines

    assert last_error is not None
    raise OpenFailedError(name, _reason(last_error)) from last_error


def _replace_file(target: Path, lines: List[str]) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            for line in lines:
                f.write(line)
                f.write("\n")
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def write_lines(
    name: str, lines: Iterable[str], settings: Optional[Settings] = None
) -> Path:
    """
    Write `lines` (newline-terminated) to the file named `name`.

    Retries on PermissionError with exponential backoff, up to
    `settings.write_retries` attempts.

    Raises
    ------
    WriteFailedError
        If the file cannot be written.
    """
    settings = settings or get_settings()
    target = resolve_write_path(name, settings)
    if settings.data_dir is not None and target.parent == settings.data_dir:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
    materialized = list(lines)

    retrying = Retrying(
        stop=stop_after_attempt(settings.write_retries),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception_type(PermissionError),
        before_sleep=before_sleep_log(log, logging.WARNING),
        reraise=True,
    )
    try:
        for attempt in retrying:
            with attempt:
                _replace_file(target, materialized)
    except OSError as exc:
        raise WriteFailedError(target, _reason(exc)) from exc

    log.debug("File written", extra={"path": str(target), "lines": len(materialized)})
    return target


__all__ = ["read_candidates", "read_lines", "resolve_write_path", "write_lines"]
