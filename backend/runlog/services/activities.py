"""Activity store: window queries, creation and mock data."""

import logging
import random
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from runlog.models.activity import Activity, ActivityType
from runlog.models.schemas import ActivityCreate
from runlog.services.normalize import hms_to_milliseconds
from runlog.services.window import WindowSpec

logger = logging.getLogger(__name__)

MOCK_RUN_DAYS = (1, 3, 6)  # Tuesday, Thursday, Sunday
MOCK_RUN_NOTES = ("Easy run", "Tempo", "Long run", "Recovery jog", "")


def to_utc(value: datetime, default_tz: tzinfo = timezone.utc) -> datetime:
    """Normalise a datetime to UTC; naive values are read in ``default_tz``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=default_tz)
    return value.astimezone(timezone.utc)


async def list_activities_in_window(
    db: AsyncSession,
    user_id: int,
    window: WindowSpec,
) -> list[Activity]:
    """List a user's activities inside a window, oldest first.

    Args:
        db: Database session.
        user_id: Owner of the activities.
        window: Window with inclusive start and exclusive end.

    Returns:
        Activities sorted by date ascending.
    """
    query = (
        select(Activity)
        .where(
            Activity.user_id == user_id,
            Activity.date >= to_utc(window.start_date),
            Activity.date < to_utc(window.end_date),
        )
        .order_by(Activity.date.asc(), Activity.id.asc())
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_activity(
    db: AsyncSession,
    user_id: int,
    payload: ActivityCreate,
    tz: tzinfo = timezone.utc,
) -> Activity:
    """Normalise and persist a new activity.

    Args:
        db: Database session.
        user_id: Owner of the activity.
        payload: Raw input.
        tz: Timezone for naive input dates.

    Returns:
        The stored activity.
    """
    activity = Activity(
        user_id=user_id,
        activity_type=payload.activity_type.value,
        date=to_utc(payload.date, tz),
        distance=payload.distance_km(),
        duration=payload.duration_ms(),
        note=payload.note,
    )
    db.add(activity)
    await db.commit()
    await db.refresh(activity)

    logger.info(
        "Created activity %s for user %s (%s, %.2f km)",
        activity.id,
        user_id,
        activity.activity_type,
        activity.distance,
    )
    return activity


def generate_mock_activities(
    user_id: int,
    now: datetime,
    weeks: int = 8,
    seed: Optional[int] = None,
) -> list[Activity]:
    """Build sample activities for the ``weeks`` weeks before ``now``.

    Each week gets three runs and one bike ride. The same seed always gives
    the same data.
    """
    rng = random.Random(seed)
    this_monday = now.date() - timedelta(days=now.weekday())
    activities = []

    for week in range(weeks, 0, -1):
        monday = this_monday - timedelta(weeks=week)

        for day in MOCK_RUN_DAYS:
            distance = round(rng.uniform(5.0, 15.0), 2)
            pace_seconds = rng.randint(270, 390)  # 4:30 - 6:30 min/km
            total_seconds = int(distance * pace_seconds)
            activities.append(
                Activity(
                    user_id=user_id,
                    activity_type=ActivityType.RUNNING.value,
                    date=datetime.combine(
                        monday + timedelta(days=day), time(7, 0), tzinfo=now.tzinfo
                    ),
                    distance=distance,
                    duration=hms_to_milliseconds(seconds=total_seconds),
                    note=rng.choice(MOCK_RUN_NOTES),
                )
            )

        activities.append(
            Activity(
                user_id=user_id,
                activity_type=ActivityType.CYCLING.value,
                date=datetime.combine(
                    monday + timedelta(days=5), time(9, 30), tzinfo=now.tzinfo
                ),
                distance=round(rng.uniform(20.0, 60.0), 2),
                duration=hms_to_milliseconds(minutes=rng.randint(45, 150)),
                note="Bike ride",
            )
        )

    for activity in activities:
        activity.date = to_utc(activity.date)
    return activities


async def seed_mock_activities(
    db: AsyncSession,
    user_id: int,
    now: datetime,
    *,
    weeks: int = 8,
    seed: Optional[int] = None,
) -> list[Activity]:
    """Insert mock activities for a user.

    Returns:
        The inserted activities.
    """
    activities = generate_mock_activities(user_id, now, weeks=weeks, seed=seed)
    db.add_all(activities)
    await db.commit()

    logger.info("Seeded %d mock activities for user %s", len(activities), user_id)
    return activities
