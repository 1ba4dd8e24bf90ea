"""Shared test fixtures."""

import asyncio
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from temperature.adapters.memory_store import InMemoryProfileStore  # noqa: E402
from temperature.adapters.protocol import ProfileStoreError  # noqa: E402
from temperature.domain.models import StoredProfile, WritePayload  # noqa: E402
from temperature.session import ProfileSession  # noqa: E402

STORED_PROFILE = {
    "bedTime": "23:15:00",
    "wakeupTime": "07:45:00.000000",
    "timezoneTZ": "Europe/Berlin",
    "initialSleepLevel": -30,
    "midStageSleepLevel": 20,
    "finalSleepLevel": 100,
}


class FailingProfileStore:
    """Store whose every call fails, as an unreachable profile API would."""

    store_name = "failing"

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def fetch(self) -> StoredProfile | None:
        self.calls.append("fetch")
        raise ProfileStoreError("fetch", "HTTP 500: boom")

    async def write(self, payload: WritePayload) -> None:
        self.calls.append("write")
        raise ProfileStoreError("write", "HTTP 500: boom")

    async def delete(self) -> None:
        self.calls.append("delete")
        raise ProfileStoreError("delete", "HTTP 500: boom")


class GatedProfileStore(InMemoryProfileStore):
    """In-memory store whose write/delete block until the test releases them."""

    store_name = "gated"

    def __init__(self, profile: StoredProfile | None = None) -> None:
        super().__init__(profile)
        self.release = asyncio.Event()
        self.entered = asyncio.Event()
        self.writes: list[WritePayload] = []

    async def write(self, payload: WritePayload) -> None:
        self.entered.set()
        await self.release.wait()
        self.writes.append(payload)
        await super().write(payload)

    async def delete(self) -> None:
        self.entered.set()
        await self.release.wait()
        await super().delete()


@pytest.fixture
def stored_profile() -> StoredProfile:
    return StoredProfile.model_validate(STORED_PROFILE)


@pytest.fixture
def memory_store(stored_profile) -> InMemoryProfileStore:
    return InMemoryProfileStore(stored_profile)


@pytest.fixture
def empty_store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def session(memory_store) -> ProfileSession:
    return ProfileSession(memory_store)
