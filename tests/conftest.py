"""
Shared fixtures for waitlist tests
"""

import asyncio

import pytest

from app.services.repositories import InMemoryWaitlistRepo
from app.services.waitlist_service import WaitlistService


class FakeClock:
    """Monotonic clock whose sleep advances time instead of waiting"""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class RecordingRepo(InMemoryWaitlistRepo):
    """In-memory repo that counts backend calls and yields to the loop on each"""

    def __init__(self):
        super().__init__()
        self.loads = 0
        self.saves = 0

    async def load_for_update(self):
        self.loads += 1
        await asyncio.sleep(0)
        return await super().load_for_update()

    async def save(self, table):
        self.saves += 1
        await asyncio.sleep(0)
        await super().save(table)


@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def memory_repo():
    return InMemoryWaitlistRepo()

@pytest.fixture
def recording_repo():
    return RecordingRepo()

@pytest.fixture
def service(memory_repo):
    return WaitlistService(memory_repo)
