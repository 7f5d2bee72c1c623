"""Weekly availability windows and the candidate slots derived from them."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from meetslot.utils import WALL_CLOCK_PATTERN, minutes_between


class WeeklyAvailabilityWindow(BaseModel):
    """A recurring block of time a host accepts meetings on one weekday.

    ``day_of_week`` counts from Sunday (0) to Saturday (6). Times are
    zero-padded ``HH:MM`` wall-clock strings, so lexicographic comparison
    matches chronological order within a day.
    """
    id: str
    host_id: str
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_wall_clock(cls, value: str) -> str:
        value = value.strip()
        if not WALL_CLOCK_PATTERN.match(value):
            raise ValueError(f"expected zero-padded HH:MM, got {value!r}")
        return value

    @model_validator(mode="after")
    def _check_order(self) -> "WeeklyAvailabilityWindow":
        if self.start_time >= self.end_time:
            raise ValueError("end time must be after start time")
        return self


class CandidateSlot(BaseModel):
    """A bookable ``[start_time, end_time)`` interval. Never persisted."""
    model_config = ConfigDict(frozen=True)

    start_time: datetime
    end_time: datetime

    @property
    def duration_minutes(self) -> int:
        return minutes_between(self.start_time, self.end_time)
