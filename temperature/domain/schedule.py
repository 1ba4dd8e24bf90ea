"""Sleep window duration, minimum-duration policy, and stage transition times.

Given a bed time and a wake time:
- wake <= bed means the wake instant falls on the following day (rollover)
- windows shorter than 4 hours are rejected and block submission
- the mid stage starts 60 minutes after bed time
- the final stage starts 120 minutes before wake time

The minimum duration must stay above the sum of the two stage offsets so the
mid-stage transition always precedes the final-stage one.
"""

from dataclasses import dataclass

from temperature.domain.time_of_day import MINUTES_PER_DAY, TimeOfDay, parse_time_of_day

MIN_SLEEP_MINUTES = 240
MID_STAGE_OFFSET_MINUTES = 60
FINAL_STAGE_LEAD_MINUTES = 120

MIN_DURATION_REASON = "Sleep duration must be at least 4 hours."

if MIN_SLEEP_MINUTES <= MID_STAGE_OFFSET_MINUTES + FINAL_STAGE_LEAD_MINUTES:
    raise RuntimeError(
        "MIN_SLEEP_MINUTES must exceed the combined stage offsets "
        f"({MID_STAGE_OFFSET_MINUTES} + {FINAL_STAGE_LEAD_MINUTES})"
    )


@dataclass(frozen=True)
class SleepWindow:
    bed: TimeOfDay
    wake: TimeOfDay

    @property
    def wake_is_next_day(self) -> bool:
        return self.wake.minutes <= self.bed.minutes

    @property
    def adjusted_wake_minutes(self) -> int:
        """Wake instant in minutes from the bed-time midnight, after rollover."""
        if self.wake_is_next_day:
            return self.wake.minutes + MINUTES_PER_DAY
        return self.wake.minutes

    @property
    def duration_minutes(self) -> int:
        # bed == wake collapses to a zero-length window rather than a full day
        return (self.adjusted_wake_minutes - self.bed.minutes) % MINUTES_PER_DAY


@dataclass(frozen=True)
class StageTimes:
    mid_stage_time: TimeOfDay
    final_stage_time: TimeOfDay


@dataclass(frozen=True)
class ValidSchedule:
    duration_minutes: int
    mid_stage_time: TimeOfDay
    final_stage_time: TimeOfDay

    is_valid = True

    @property
    def duration_label(self) -> str:
        hours, minutes = divmod(self.duration_minutes, 60)
        return f"{hours} hours {minutes} minutes"


@dataclass(frozen=True)
class InvalidSchedule:
    reason: str

    is_valid = False


ScheduleValidity = ValidSchedule | InvalidSchedule


def schedule_stages(bed: TimeOfDay, wake: TimeOfDay, wake_is_next_day: bool) -> StageTimes:
    """Clock times of the mid-stage and final-stage transitions."""
    wake_minutes = wake.minutes + MINUTES_PER_DAY if wake_is_next_day else wake.minutes
    return StageTimes(
        mid_stage_time=TimeOfDay.from_minutes(bed.minutes + MID_STAGE_OFFSET_MINUTES),
        final_stage_time=TimeOfDay.from_minutes(wake_minutes - FINAL_STAGE_LEAD_MINUTES),
    )


def evaluate(bed: TimeOfDay, wake: TimeOfDay) -> ScheduleValidity:
    """Compute duration and stage times, or the reason the window is rejected."""
    window = SleepWindow(bed, wake)
    duration = window.duration_minutes
    if duration < MIN_SLEEP_MINUTES:
        return InvalidSchedule(MIN_DURATION_REASON)

    stages = schedule_stages(bed, wake, window.wake_is_next_day)
    return ValidSchedule(
        duration_minutes=duration,
        mid_stage_time=stages.mid_stage_time,
        final_stage_time=stages.final_stage_time,
    )


def recompute(bed_time: str, wakeup_time: str) -> ScheduleValidity:
    """Parse both form fields and evaluate them. Called on every change to either.

    Raises TimeParseError if either field is malformed.
    """
    return evaluate(parse_time_of_day(bed_time), parse_time_of_day(wakeup_time))
