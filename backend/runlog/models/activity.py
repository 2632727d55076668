"""Activity models."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from runlog.models.base import BaseModel


class ActivityType(str, Enum):
    """Kinds of logged activity. Only running feeds pace and distance."""

    RUNNING = "running"
    CYCLING = "cycling"
    SWIMMING = "swimming"
    WALKING = "walking"
    OTHER = "other"


class Activity(BaseModel):
    """A single exercise log entry."""

    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)

    activity_type: Mapped[str] = mapped_column(String(50), index=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    # Distance in kilometers, duration in milliseconds
    distance: Mapped[float] = mapped_column(Float, default=0.0)
    duration: Mapped[int] = mapped_column(Integer, default=0)

    note: Mapped[str] = mapped_column(Text, default="")

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, type={self.activity_type}, date={self.date})>"
