"""Profile store protocol.

Both the in-memory and remote stores implement this interface.
The session layer depends only on the protocol, never on concrete stores.
"""

from typing import Protocol, runtime_checkable

from temperature.domain.models import StoredProfile, WritePayload


class ProfileStoreError(Exception):
    """A profile store call failed. Local editable state is left untouched."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        super().__init__(f"profile {operation} failed: {detail}" if detail else f"profile {operation} failed")


@runtime_checkable
class ProfileStore(Protocol):
    """Durable home of the user's temperature profile."""

    store_name: str

    async def fetch(self) -> StoredProfile | None:
        """Return the stored profile, or None if the user has none yet.

        Raises:
            ProfileStoreError: the store could not be reached or answered garbage.
        """
        ...

    async def write(self, payload: WritePayload) -> None:
        """Create or replace the stored profile."""
        ...

    async def delete(self) -> None:
        """Remove the stored profile."""
        ...
