import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from notepadzilla.errors import StorageUnavailable
from notepadzilla.repository import NoteRepository
from notepadzilla.storage import MemoryKeyValueStore


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FlakyStore(MemoryKeyValueStore):
    """
    Memory store whose writes can be switched to fail, counting writes per key.
    `fail_keys` fails writes to the named keys only.
    """

    def __init__(self):
        super().__init__()
        self.fail_writes = False
        self.fail_keys = set()
        self.writes = []

    async def set(self, key, value):
        if self.fail_writes or key in self.fail_keys:
            raise StorageUnavailable("disk full")
        self.writes.append(key)
        await super().set(key, value)


class GatedStore(FlakyStore):
    """Writes block until `gate` is set, so a save can be held in flight."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()

    async def set(self, key, value):
        await self.gate.wait()
        await super().set(key, value)


async def settle_loop(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return FlakyStore()


@pytest.fixture
def repository(store, clock):
    return NoteRepository(store, clock=clock)
