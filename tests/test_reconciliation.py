"""Tests for stored profile <-> editable state reconciliation."""

import pydantic
import pytest

from shared.config import settings
from shared.exceptions import InvalidScheduleError
from temperature.domain.models import EditableProfile, StoredProfile, WritePayload
from temperature.domain.schedule import recompute
from temperature.reconciliation import (
    default_profile,
    from_stored,
    reset_after_delete,
    to_write_payload,
)
from tests.conftest import STORED_PROFILE


class TestFromStored:
    def test_decodes_levels_and_truncates_times(self, stored_profile):
        state = from_stored(stored_profile)
        assert state.bed_time == "23:15"
        assert state.wakeup_time == "07:45"
        assert state.timezone == "Europe/Berlin"
        assert state.initial_sleep_level == -3
        assert state.mid_stage_sleep_level == 2
        assert state.final_sleep_level == 10
        assert state.is_existing is True

    def test_accepts_stored_record_without_fraction(self):
        record = {**STORED_PROFILE, "bedTime": "21:00", "wakeupTime": "05:30:15"}
        state = from_stored(StoredProfile.model_validate(record))
        assert state.bed_time == "21:00"
        assert state.wakeup_time == "05:30"

    def test_out_of_range_stored_time_rejected(self):
        record = StoredProfile.model_validate({**STORED_PROFILE, "bedTime": "25:00:00"})
        with pytest.raises(pydantic.ValidationError):
            from_stored(record)


class TestStoredProfileModel:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"initialSleepLevel": 110},
            {"finalSleepLevel": -101},
            {"wakeupTime": "7:45"},
            {"bedTime": "23:15:00.0000001"},
        ],
        ids=["level_above_range", "level_below_range", "short_time", "long_fraction"],
    )
    def test_rejects_out_of_contract_records(self, overrides):
        with pytest.raises(pydantic.ValidationError):
            StoredProfile.model_validate({**STORED_PROFILE, **overrides})

    def test_populates_by_field_name(self):
        profile = StoredProfile(
            bed_time="22:00:00",
            wakeup_time="06:00:00",
            timezone_tz="UTC",
            initial_sleep_level=0,
            mid_stage_sleep_level=0,
            final_sleep_level=0,
        )
        assert profile.timezone_tz == "UTC"


class TestToWritePayload:
    def test_encodes_levels_and_formats_times(self):
        state = EditableProfile(
            bed_time="22:00",
            wakeup_time="06:00",
            timezone="America/Los_Angeles",
            initial_sleep_level=-10,
            mid_stage_sleep_level=0,
            final_sleep_level=4,
        )
        payload = to_write_payload(state)
        assert payload.model_dump(by_alias=True) == {
            "bedTime": "22:00:00.000000",
            "wakeupTime": "06:00:00.000000",
            "timezoneTZ": "America/Los_Angeles",
            "initialSleepLevel": -100,
            "midStageSleepLevel": 0,
            "finalSleepLevel": 40,
        }

    def test_invalid_window_raises_before_building_payload(self):
        state = EditableProfile(bed_time="23:30", wakeup_time="02:00", timezone="UTC")
        with pytest.raises(InvalidScheduleError) as exc_info:
            to_write_payload(state)
        assert exc_info.value.detail == "Sleep duration must be at least 4 hours."
        assert exc_info.value.status == 422

    def test_uses_supplied_validity(self):
        state = EditableProfile(timezone="UTC")
        payload = to_write_payload(state, recompute(state.bed_time, state.wakeup_time))
        assert isinstance(payload, WritePayload)

    def test_stored_round_trip(self, stored_profile):
        payload = to_write_payload(from_stored(stored_profile))
        assert payload.initial_sleep_level == stored_profile.initial_sleep_level
        assert payload.mid_stage_sleep_level == stored_profile.mid_stage_sleep_level
        assert payload.final_sleep_level == stored_profile.final_sleep_level
        assert payload.bed_time == "23:15:00.000000"
        assert payload.wakeup_time == "07:45:00.000000"


class TestDefaults:
    def test_default_profile(self):
        state = default_profile()
        assert state.bed_time == "22:00"
        assert state.wakeup_time == "06:00"
        assert state.timezone == settings.default_timezone == "America/New_York"
        assert (state.initial_sleep_level, state.mid_stage_sleep_level, state.final_sleep_level) == (0, 0, 0)
        assert state.is_existing is False

    def test_reset_after_delete_is_defaults(self):
        assert reset_after_delete() == default_profile()


class TestEditableProfile:
    @pytest.mark.parametrize(
        "overrides",
        [{"bed_time": "25:00"}, {"wakeup_time": "6:00"}, {"initial_sleep_level": 11}, {"final_sleep_level": -10.5}],
    )
    def test_rejects_invalid_fields(self, overrides):
        with pytest.raises(pydantic.ValidationError):
            EditableProfile(timezone="UTC", **overrides)

    def test_assignment_is_validated(self):
        state = default_profile()
        with pytest.raises(pydantic.ValidationError):
            state.bed_time = "noon"
