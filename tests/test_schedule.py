"""Tests for sleep window duration, the 4-hour minimum, and stage transition times."""

from pathlib import Path

import pytest

import temperature.domain.schedule as schedule_module
from temperature.domain.schedule import (
    FINAL_STAGE_LEAD_MINUTES,
    MID_STAGE_OFFSET_MINUTES,
    MIN_DURATION_REASON,
    MIN_SLEEP_MINUTES,
    InvalidSchedule,
    SleepWindow,
    ValidSchedule,
    evaluate,
    recompute,
    schedule_stages,
)
from temperature.domain.time_of_day import TimeOfDay, TimeParseError, parse_time_of_day

# Every 15 minutes around the clock keeps the exhaustive checks quick
_QUARTER_HOURS = [TimeOfDay(m) for m in range(0, 1440, 15)]


class TestScenarios:
    def test_standard_night(self):
        result = recompute("22:00", "06:00")
        assert isinstance(result, ValidSchedule)
        assert result.duration_minutes == 480
        assert result.duration_label == "8 hours 0 minutes"
        assert result.mid_stage_time.hhmm == "23:00"
        assert result.final_stage_time.hhmm == "04:00"

    def test_short_night_after_midnight_rejected(self):
        window = SleepWindow(parse_time_of_day("23:30"), parse_time_of_day("02:00"))
        assert window.wake_is_next_day
        assert window.duration_minutes == 150

        result = recompute("23:30", "02:00")
        assert result == InvalidSchedule(MIN_DURATION_REASON)

    def test_same_bed_and_wake_time_is_zero_length(self):
        window = SleepWindow(parse_time_of_day("08:00"), parse_time_of_day("08:00"))
        assert window.wake_is_next_day
        assert window.duration_minutes == 0
        assert isinstance(recompute("08:00", "08:00"), InvalidSchedule)

    def test_same_day_window(self):
        result = recompute("01:00", "09:30")
        assert isinstance(result, ValidSchedule)
        assert result.duration_minutes == 510
        assert result.duration_label == "8 hours 30 minutes"
        assert result.mid_stage_time.hhmm == "02:00"
        assert result.final_stage_time.hhmm == "07:30"

    def test_final_stage_before_midnight(self):
        # wake at 01:00 next day -> final stage 23:00 the previous evening
        result = recompute("18:00", "01:00")
        assert isinstance(result, ValidSchedule)
        assert result.final_stage_time.hhmm == "23:00"
        assert result.mid_stage_time.hhmm == "19:00"

    def test_mid_stage_after_midnight(self):
        result = recompute("23:30", "08:00")
        assert isinstance(result, ValidSchedule)
        assert result.mid_stage_time.hhmm == "00:30"


@pytest.mark.parametrize(
    "bed, wake, valid",
    [
        ("22:00", "01:59", False),  # 3h59m
        ("22:00", "02:00", True),  # exactly 4h
        ("00:00", "04:00", True),
        ("00:01", "04:00", False),
        ("06:00", "05:59", True),  # 23h59m
    ],
)
def test_minimum_duration_boundary(bed, wake, valid):
    assert recompute(bed, wake).is_valid is valid


def test_minimum_exceeds_stage_offsets():
    assert MIN_SLEEP_MINUTES > MID_STAGE_OFFSET_MINUTES + FINAL_STAGE_LEAD_MINUTES


def test_import_fails_when_minimum_does_not_exceed_offsets():
    source = Path(schedule_module.__file__).read_text()
    broken = source.replace("MIN_SLEEP_MINUTES = 240", "MIN_SLEEP_MINUTES = 180")
    assert broken != source
    with pytest.raises(RuntimeError, match="combined stage offsets"):
        exec(compile(broken, schedule_module.__file__, "exec"), {"__name__": "schedule_copy"})


def test_rollover_duration_for_all_windows():
    for bed in _QUARTER_HOURS:
        for wake in _QUARTER_HOURS:
            window = SleepWindow(bed, wake)
            assert 0 <= window.duration_minutes < 1440
            if wake.minutes < bed.minutes:
                assert window.wake_is_next_day
                assert window.duration_minutes == wake.minutes - bed.minutes + 1440
            elif wake.minutes > bed.minutes:
                assert not window.wake_is_next_day
                assert window.duration_minutes == wake.minutes - bed.minutes


def test_stage_times_for_all_valid_windows():
    for bed in _QUARTER_HOURS:
        for wake in _QUARTER_HOURS:
            result = evaluate(bed, wake)
            window = SleepWindow(bed, wake)
            if window.duration_minutes < MIN_SLEEP_MINUTES:
                assert isinstance(result, InvalidSchedule)
                continue

            assert isinstance(result, ValidSchedule)
            assert result.duration_minutes == window.duration_minutes
            assert result.mid_stage_time.minutes == (bed.minutes + 60) % 1440
            assert result.final_stage_time.minutes == (window.adjusted_wake_minutes - 120) % 1440
            assert (wake.minutes - result.final_stage_time.minutes) % 1440 == 120
            # mid stage never comes after the final stage within the window
            mid_offset = (result.mid_stage_time.minutes - bed.minutes) % 1440
            final_offset = (result.final_stage_time.minutes - bed.minutes) % 1440
            assert mid_offset < final_offset


def test_schedule_stages_without_rollover():
    stages = schedule_stages(parse_time_of_day("01:00"), parse_time_of_day("09:00"), False)
    assert stages.mid_stage_time.hhmm == "02:00"
    assert stages.final_stage_time.hhmm == "07:00"


def test_evaluate_is_deterministic():
    bed, wake = parse_time_of_day("22:30"), parse_time_of_day("06:45")
    assert evaluate(bed, wake) == evaluate(bed, wake)


def test_recompute_propagates_parse_errors():
    with pytest.raises(TimeParseError):
        recompute("22:00", "6am")
