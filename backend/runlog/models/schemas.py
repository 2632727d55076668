"""Request schemas."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from runlog.models.activity import ActivityType
from runlog.services.normalize import hms_to_milliseconds, parse_duration, to_kilometers


class ActivityCreate(BaseModel):
    """Raw activity input as entered by the user.

    Duration is given either as an hour/minute/second split or as an
    ``H:M:S`` string in ``duration``; the string wins when both are set.
    """

    date: datetime
    activity_type: ActivityType = ActivityType.RUNNING
    distance: float = Field(0.0, ge=0)
    unit: Literal["km", "mi"] = "km"
    hours: int = Field(0, ge=0)
    minutes: int = Field(0, ge=0, le=59)
    seconds: int = Field(0, ge=0, le=59)
    duration: Optional[str] = None
    note: str = ""

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            parse_duration(value)
        return value

    def distance_km(self) -> float:
        return to_kilometers(self.distance, self.unit)

    def duration_ms(self) -> int:
        if self.duration is not None:
            return parse_duration(self.duration)
        return hms_to_milliseconds(self.hours, self.minutes, self.seconds)
