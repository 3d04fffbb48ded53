"""
Pytest configuration og shared fixtures.
"""

import asyncio
from typing import Dict, List, Optional

import pytest

from hdfs_wait.core.clock import Clock
from hdfs_wait.core.exceptions import PathNotFoundError
from hdfs_wait.models import DirectoryEntry
from hdfs_wait.services.listers.base import DirectoryLister

START_MS = 1_700_000_000_000


class FakeClock(Clock):
    """Virtual clock: sleeping advances time instantly."""

    def __init__(self, start_ms: int = START_MS):
        self._now_ms = start_ms
        self.sleeps: List[int] = []

    def now_ms(self) -> int:
        return self._now_ms

    def advance(self, duration_ms: int) -> None:
        self._now_ms += duration_ms

    async def sleep(self, duration_ms: int, stop_event: Optional[asyncio.Event] = None) -> bool:
        self.sleeps.append(duration_ms)
        if stop_event is not None and stop_event.is_set():
            return True
        self._now_ms += duration_ms
        return False


class InMemoryLister(DirectoryLister):
    """Directory tree kept in a dict of path -> children."""

    def __init__(self):
        self.directories: Dict[str, List[DirectoryEntry]] = {}
        self.list_calls: List[str] = []

    def add_directory(self, path: str, modified_time_ms: int = START_MS) -> DirectoryEntry:
        self.directories.setdefault(path, [])
        parent, _, name = path.rstrip("/").rpartition("/")
        entry = DirectoryEntry(
            name=name, path=path, is_directory=True, modified_time_ms=modified_time_ms
        )
        if parent in self.directories:
            self.directories[parent].append(entry)
        return entry

    def add_file(self, path: str, modified_time_ms: int = START_MS) -> DirectoryEntry:
        parent, _, name = path.rpartition("/")
        entry = DirectoryEntry(
            name=name, path=path, is_directory=False, modified_time_ms=modified_time_ms
        )
        self.directories.setdefault(parent, []).append(entry)
        return entry

    async def list_children(self, path: str) -> List[DirectoryEntry]:
        self.list_calls.append(path)
        if path not in self.directories:
            raise PathNotFoundError(path)
        return list(self.directories[path])

    async def exists(self, path: str) -> bool:
        if path in self.directories:
            return True
        return any(
            entry.path == path for entries in self.directories.values() for entry in entries
        )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def lister() -> InMemoryLister:
    return InMemoryLister()


@pytest.fixture
def test_job_tree(lister: InMemoryLister, fake_clock: FakeClock) -> InMemoryLister:
    """/testJob containing the folder /testJob/test, last modified 5 seconds ago."""
    lister.add_directory("/testJob", modified_time_ms=fake_clock.now_ms() - 5_000)
    lister.add_directory("/testJob/test", modified_time_ms=fake_clock.now_ms() - 5_000)
    return lister
