"""Database models for runlog."""

from runlog.models.activity import Activity, ActivityType

__all__ = [
    "Activity",
    "ActivityType",
]
