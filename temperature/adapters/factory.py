"""Profile store factory: returns the in-memory or remote store based on config.

Both implement the same ProfileStore protocol.
"""

from shared.config import settings
from temperature.adapters.protocol import ProfileStore


def get_profile_store(mode: str | None = None) -> ProfileStore:
    """Return the profile store for the given mode (defaults to settings.store_mode).

    - memory: process-local store, nothing persisted
    - remote: authenticated HTTP profile API
    """
    mode = mode or settings.store_mode
    if mode == "remote":
        from temperature.adapters.remote_store import RemoteProfileStore

        return RemoteProfileStore()
    if mode == "memory":
        from temperature.adapters.memory_store import InMemoryProfileStore

        return InMemoryProfileStore()
    raise ValueError(f"Unsupported store mode: {mode}. Must be one of: ['memory', 'remote']")
