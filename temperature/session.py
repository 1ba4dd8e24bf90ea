"""Profile session: editable temperature profile state for one user.

Coordinates the pure core (schedule evaluation, codec, reconciliation) with an
injected ProfileStore:

- load: fetch -> decode, falling back to defaults when absent or failing
- update / adjust_level: edit form state; validity is recomputed on every read
- submit: fail fast on an invalid window, then write (one write at a time)
- delete: remove the stored profile, then reset to defaults (one delete at a time)

Store failures never corrupt local state. A failed write leaves the form
dirty and resubmittable; a failed fetch yields defaults.
"""

import asyncio
from typing import Any

import pydantic
import structlog

from shared.exceptions import (
    InvalidScheduleError,
    OperationInFlightError,
    ProfileStoreUnavailableError,
)
from temperature.adapters.protocol import ProfileStore, ProfileStoreError
from temperature.codec import step_level
from temperature.domain.models import EditableProfile, SleepStage
from temperature.domain.schedule import InvalidSchedule, ScheduleValidity, recompute
from temperature.reconciliation import default_profile, from_stored, reset_after_delete, to_write_payload

logger = structlog.get_logger()


class ProfileSession:
    def __init__(self, store: ProfileStore):
        self._store = store
        self._write_lock = asyncio.Lock()
        self._delete_lock = asyncio.Lock()
        self.profile: EditableProfile = default_profile()
        self.dirty = False
        self.loaded = False

    @property
    def validity(self) -> ScheduleValidity:
        return recompute(self.profile.bed_time, self.profile.wakeup_time)

    @property
    def write_pending(self) -> bool:
        return self._write_lock.locked()

    @property
    def delete_pending(self) -> bool:
        return self._delete_lock.locked()

    @property
    def can_submit(self) -> bool:
        return self.dirty and self.validity.is_valid and not self.write_pending

    async def load(self) -> EditableProfile:
        """Replace editable state with the stored profile, or defaults if there is none."""
        try:
            stored = await self._store.fetch()
            profile = from_stored(stored) if stored is not None else None
        except (ProfileStoreError, pydantic.ValidationError) as exc:
            logger.warning("profile_fetch_failed_using_defaults", error=str(exc))
            profile = None

        if profile is None:
            self.profile = default_profile()
        else:
            self.profile = profile
            logger.info("profile_loaded", timezone=profile.timezone)
        self.dirty = False
        self.loaded = True
        return self.profile

    def update(self, **changes: Any) -> EditableProfile:
        """Apply field edits. Raises pydantic.ValidationError and leaves state unchanged on bad input."""
        if not changes:
            return self.profile
        merged = {**self.profile.model_dump(), **changes}
        self.profile = EditableProfile.model_validate(merged)
        self.dirty = True
        return self.profile

    def adjust_level(self, stage: SleepStage, delta: int) -> int | float:
        """Step one sleep level by delta, clamped to [-10, 10]."""
        value = step_level(self.profile.level(stage), delta)
        self.update(**{stage.field_name: value})
        logger.debug("sleep_level_adjusted", stage=stage.value, value=value)
        return value

    async def submit(self) -> EditableProfile:
        """Write the current profile to the store.

        Raises:
            InvalidScheduleError: the window fails the minimum-duration rule (no I/O attempted).
            OperationInFlightError: a write or delete is still outstanding.
            ProfileStoreUnavailableError: the store rejected or failed the write.
        """
        validity = self.validity
        if isinstance(validity, InvalidSchedule):
            logger.info("profile_write_rejected", reason=validity.reason)
            raise InvalidScheduleError(validity.reason)
        if self.write_pending:
            raise OperationInFlightError("update")
        if self.delete_pending:
            raise OperationInFlightError("delete")

        async with self._write_lock:
            submitted = self.profile
            payload = to_write_payload(submitted, validity)
            try:
                await self._store.write(payload)
            except ProfileStoreError as exc:
                logger.error("profile_write_failed", error=str(exc))
                raise ProfileStoreUnavailableError("update", exc.detail) from exc

            # edits made while the write was in flight keep the form dirty
            if self.profile == submitted:
                self.dirty = False
            self.profile = self.profile.model_copy(update={"is_existing": True})
            logger.info(
                "profile_written",
                bed_time=payload.bed_time,
                wakeup_time=payload.wakeup_time,
                timezone=payload.timezone_tz,
            )
        return self.profile

    async def delete(self) -> EditableProfile:
        """Delete the stored profile and reset editable state to defaults.

        Confirmation is the caller's concern. Rejected while a write or
        another delete is outstanding.
        """
        if self.delete_pending:
            raise OperationInFlightError("delete")
        if self.write_pending:
            raise OperationInFlightError("update")

        async with self._delete_lock:
            try:
                await self._store.delete()
            except ProfileStoreError as exc:
                logger.error("profile_delete_failed", error=str(exc))
                raise ProfileStoreUnavailableError("delete", exc.detail) from exc

            self.profile = reset_after_delete()
            self.dirty = False
            logger.info("profile_deleted")
        return self.profile
