"""FastAPI router for the temperature profile domain.

Endpoints:
- GET    /api/v1/schedule/evaluate
- GET    /api/v1/temperature-profile
- PATCH  /api/v1/temperature-profile
- POST   /api/v1/temperature-profile/levels/{level}/{direction}
- PUT    /api/v1/temperature-profile
- DELETE /api/v1/temperature-profile
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from enum import StrEnum
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, field_validator

from shared.config import settings
from shared.exceptions import InvalidTimeFormatError, UnknownSleepLevelError
from shared.metrics import (
    api_requests_total,
    api_response_duration_seconds,
    schedule_evaluations_total,
)
from shared.middleware import request_id_var
from temperature.adapters.factory import get_profile_store
from temperature.domain.models import SleepLevel, SleepStage
from temperature.domain.schedule import ScheduleValidity, ValidSchedule, recompute
from temperature.domain.time_of_day import TimeParseError, parse_time_of_day
from temperature.session import ProfileSession

router = APIRouter(prefix="/api/v1")


@lru_cache
def get_profile_session() -> ProfileSession:
    """Process-wide session bound to the configured profile store."""
    return ProfileSession(get_profile_store())


# --- Request models ---


class LevelDirection(StrEnum):
    INCREMENT = "increment"
    DECREMENT = "decrement"


class ProfileUpdateRequest(BaseModel):
    """Partial edit of the editable profile. Omitted fields are left as they are."""

    bed_time: str | None = None
    wakeup_time: str | None = None
    timezone: str | None = None
    initial_sleep_level: SleepLevel | None = None
    mid_stage_sleep_level: SleepLevel | None = None
    final_sleep_level: SleepLevel | None = None

    @field_validator("bed_time", "wakeup_time")
    @classmethod
    def validate_hhmm(cls, v: str | None) -> str | None:
        if v is not None:
            parse_time_of_day(v)
        return v


# --- Response helpers ---


def _meta() -> dict[str, Any]:
    return {
        "request_id": request_id_var.get(""),
        "timestamp": datetime.now(UTC).isoformat(),
        "api_version": settings.api_version,
    }


def _schedule_to_dict(validity: ScheduleValidity) -> dict[str, Any]:
    if isinstance(validity, ValidSchedule):
        return {
            "valid": True,
            "duration_minutes": validity.duration_minutes,
            "duration": validity.duration_label,
            "mid_stage_time": validity.mid_stage_time.hhmm,
            "final_stage_time": validity.final_stage_time.hhmm,
            "reason": None,
        }
    return {
        "valid": False,
        "duration_minutes": None,
        "duration": None,
        "mid_stage_time": None,
        "final_stage_time": None,
        "reason": validity.reason,
    }


def _session_to_dict(session: ProfileSession) -> dict[str, Any]:
    return {
        "profile": session.profile.model_dump(),
        "schedule": _schedule_to_dict(session.validity),
        "dirty": session.dirty,
        "can_submit": session.can_submit,
    }


def _observe(endpoint: str, method: str, status_code: int, start_time: float) -> None:
    api_requests_total.labels(endpoint=endpoint, method=method, status_code=str(status_code)).inc()
    api_response_duration_seconds.labels(endpoint=endpoint).observe(time.monotonic() - start_time)


# --- Endpoints ---


@router.get("/schedule/evaluate")
async def evaluate_schedule(
    bed_time: str = Query(..., examples=["22:00"]),
    wakeup_time: str = Query(..., examples=["06:00"]),
):
    """Derive sleep duration and stage transition times for a bed/wake pair.

    A window under 4 hours is not an HTTP error: it comes back with
    valid=false and the reason, for display as a banner.
    """
    start_time = time.monotonic()
    for field, value in (("bed_time", bed_time), ("wakeup_time", wakeup_time)):
        try:
            parse_time_of_day(value)
        except TimeParseError:
            raise InvalidTimeFormatError(field, value) from None

    validity = recompute(bed_time, wakeup_time)
    schedule_evaluations_total.labels(outcome="valid" if validity.is_valid else "invalid").inc()
    _observe("evaluate", "GET", 200, start_time)
    return {"data": _schedule_to_dict(validity), "meta": _meta()}


@router.get("/temperature-profile")
async def get_profile(
    refresh: bool = Query(False),
    session: ProfileSession = Depends(get_profile_session),
):
    """Current editable profile. Loads from the store on first access or when refresh=true."""
    start_time = time.monotonic()
    if refresh or not session.loaded:
        await session.load()
    _observe("profile", "GET", 200, start_time)
    return {"data": _session_to_dict(session), "meta": _meta()}


@router.patch("/temperature-profile")
async def update_profile(
    body: ProfileUpdateRequest,
    session: ProfileSession = Depends(get_profile_session),
):
    """Edit form fields. The schedule in the response reflects the edited times."""
    start_time = time.monotonic()
    session.update(**body.model_dump(exclude_none=True))
    _observe("profile", "PATCH", 200, start_time)
    return {"data": _session_to_dict(session), "meta": _meta()}


@router.post("/temperature-profile/levels/{level}/{direction}")
async def adjust_level(
    level: str,
    direction: LevelDirection,
    session: ProfileSession = Depends(get_profile_session),
):
    """Step one sleep level by +/-1, clamped to [-10, 10]."""
    start_time = time.monotonic()
    try:
        stage = SleepStage(level)
    except ValueError:
        raise UnknownSleepLevelError(level, tuple(s.value for s in SleepStage)) from None

    value = session.adjust_level(stage, 1 if direction is LevelDirection.INCREMENT else -1)
    _observe("level", "POST", 200, start_time)
    return {
        "data": {"level": stage.value, "value": value, **_session_to_dict(session)},
        "meta": _meta(),
    }


@router.put("/temperature-profile")
async def submit_profile(session: ProfileSession = Depends(get_profile_session)):
    """Create or update the stored profile from the current editable state.

    HTTP status codes:
    - 200: profile written
    - 409: a write or delete is already in flight
    - 422: sleep window shorter than 4 hours (nothing sent to the store)
    - 502: the profile store failed; the form stays dirty
    """
    start_time = time.monotonic()
    await session.submit()
    _observe("profile", "PUT", 200, start_time)
    return {"data": _session_to_dict(session), "meta": _meta()}


@router.delete("/temperature-profile")
async def delete_profile(session: ProfileSession = Depends(get_profile_session)):
    """Delete the stored profile and reset the form to defaults."""
    start_time = time.monotonic()
    await session.delete()
    _observe("profile", "DELETE", 200, start_time)
    return {"data": _session_to_dict(session), "meta": _meta()}
