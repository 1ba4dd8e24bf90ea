"""Temperature profile models.

Three shapes of the same profile:
- StoredProfile: the record the profile store returns (camelCase, x10 levels,
  "HH:MM:SS[.ffffff]" times)
- WritePayload: the record sent back to the store on create/update
- EditableProfile: the transient form state (HH:MM times, -10..10 levels)

The store is the only durable copy. EditableProfile is rebuilt from a fetched
record, edited in place by the session, and reset to defaults after delete.
"""

from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from temperature.domain.time_of_day import parse_time_of_day

MIN_SLEEP_LEVEL = -10
MAX_SLEEP_LEVEL = 10

# Whole steps from the +/- controls stay ints; decoded non-multiples of 10 are floats
SleepLevel = (
    Annotated[int, Field(ge=MIN_SLEEP_LEVEL, le=MAX_SLEEP_LEVEL)]
    | Annotated[float, Field(ge=MIN_SLEEP_LEVEL, le=MAX_SLEEP_LEVEL)]
)
StoredSleepLevel = Annotated[int, Field(ge=MIN_SLEEP_LEVEL * 10, le=MAX_SLEEP_LEVEL * 10)]

_WIRE_TIME_PATTERN = r"^\d{2}:\d{2}(:\d{2}(\.\d{1,6})?)?$"


class SleepStage(StrEnum):
    INITIAL = "initial"
    MID_STAGE = "mid_stage"
    FINAL = "final"

    @property
    def field_name(self) -> str:
        return f"{self.value}_sleep_level"


class StoredProfile(BaseModel):
    """Temperature profile as persisted by the remote profile store."""

    model_config = ConfigDict(populate_by_name=True)

    bed_time: str = Field(alias="bedTime", pattern=_WIRE_TIME_PATTERN)
    wakeup_time: str = Field(alias="wakeupTime", pattern=_WIRE_TIME_PATTERN)
    timezone_tz: str = Field(alias="timezoneTZ")
    initial_sleep_level: StoredSleepLevel = Field(alias="initialSleepLevel")
    mid_stage_sleep_level: StoredSleepLevel = Field(alias="midStageSleepLevel")
    final_sleep_level: StoredSleepLevel = Field(alias="finalSleepLevel")


class WritePayload(StoredProfile):
    """Outbound create/update request. Times are always "HH:MM:00.000000"."""


class EditableProfile(BaseModel):
    """Form state for one user's temperature profile."""

    model_config = ConfigDict(validate_assignment=True)

    bed_time: str = "22:00"
    wakeup_time: str = "06:00"
    timezone: str
    initial_sleep_level: SleepLevel = 0
    mid_stage_sleep_level: SleepLevel = 0
    final_sleep_level: SleepLevel = 0
    is_existing: bool = False

    @field_validator("bed_time", "wakeup_time")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        parse_time_of_day(v)
        return v

    def level(self, stage: SleepStage) -> int | float:
        return getattr(self, stage.field_name)
