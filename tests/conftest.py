"""
Pytest configuration for the student records manager.

Provides fixtures for:
- Settings pointed at a per-test data directory
- A small, known set of records and a store/session holding them
- A dispatcher that auto-confirms deletes
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Generator, List

import pytest

from student_records.config import Settings, get_settings
from student_records.dispatcher import CommandDispatcher, Session
from student_records.domain.models import Record
from student_records.store import RecordStore


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """
    get_settings() is cached; tests that change the environment need a fresh read.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Run each test from an empty directory so relative names and .env never leak in.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """
    Drop the stream handler configure_logging() installs; it holds a captured stderr.
    """
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def test_settings(data_dir: Path) -> Settings:
    """
    Settings with relative file names resolved under a temporary directory.
    """
    return Settings(data_dir=data_dir, log_level="DEBUG", write_retries=1)


@pytest.fixture
def sample_records() -> List[Record]:
    return [
        Record(id=3, name="Brian Goh", programme="Digital Supply Chain", mark=88.8),
        Record(id=1, name="Ann Lee", programme="Computing Science", mark=70.0),
        Record(id=2, name="Bo Tan", programme="Electrical Engineering", mark=95.5),
        Record(id=4, name="brianna Ng", programme="Computing Science", mark=70.0),
    ]


@pytest.fixture
def store(sample_records: List[Record]) -> RecordStore:
    return RecordStore(sample_records)


@pytest.fixture
def session(store: RecordStore) -> Session:
    return Session(store=store)


@pytest.fixture
def dispatcher(test_settings: Settings) -> CommandDispatcher:
    return CommandDispatcher(test_settings, confirm=lambda prompt: True)
