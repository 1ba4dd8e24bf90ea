"""In-memory profile store for local development and tests (no HTTP)."""

from temperature.domain.models import StoredProfile, WritePayload


class InMemoryProfileStore:
    """Holds at most one profile record for the process lifetime."""

    store_name = "memory"

    def __init__(self, profile: StoredProfile | None = None) -> None:
        self._profile = profile

    async def fetch(self) -> StoredProfile | None:
        return self._profile

    async def write(self, payload: WritePayload) -> None:
        self._profile = StoredProfile.model_validate(payload.model_dump())

    async def delete(self) -> None:
        self._profile = None
