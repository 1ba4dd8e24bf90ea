"""Translate between stored temperature profiles and editable form state.

Inbound: fetched record -> EditableProfile (decode levels, truncate times).
Outbound: EditableProfile -> WritePayload (encode levels, format times), only
when the sleep window passes the minimum-duration check.
"""

from shared.config import settings
from shared.exceptions import InvalidScheduleError
from temperature.codec import decode_level, encode_level, format_wire_time, truncate_wire_time
from temperature.domain.models import EditableProfile, StoredProfile, WritePayload
from temperature.domain.schedule import InvalidSchedule, ScheduleValidity, recompute


def default_profile() -> EditableProfile:
    """Form defaults used when no profile is stored, and after delete."""
    return EditableProfile(timezone=settings.default_timezone, is_existing=False)


def from_stored(profile: StoredProfile) -> EditableProfile:
    return EditableProfile(
        bed_time=truncate_wire_time(profile.bed_time),
        wakeup_time=truncate_wire_time(profile.wakeup_time),
        timezone=profile.timezone_tz,
        initial_sleep_level=decode_level(profile.initial_sleep_level),
        mid_stage_sleep_level=decode_level(profile.mid_stage_sleep_level),
        final_sleep_level=decode_level(profile.final_sleep_level),
        is_existing=True,
    )


def to_write_payload(
    state: EditableProfile, validity: ScheduleValidity | None = None
) -> WritePayload:
    """Build the outbound record. Raises InvalidScheduleError for a rejected window.

    validity is recomputed from state when the caller does not pass one.
    """
    if validity is None:
        validity = recompute(state.bed_time, state.wakeup_time)
    if isinstance(validity, InvalidSchedule):
        raise InvalidScheduleError(validity.reason)

    return WritePayload(
        bed_time=format_wire_time(state.bed_time),
        wakeup_time=format_wire_time(state.wakeup_time),
        timezone_tz=state.timezone,
        initial_sleep_level=encode_level(state.initial_sleep_level),
        mid_stage_sleep_level=encode_level(state.mid_stage_sleep_level),
        final_sleep_level=encode_level(state.final_sleep_level),
    )


def reset_after_delete() -> EditableProfile:
    """State the caller must adopt once a delete succeeds. Does not touch the codec."""
    return default_profile()
