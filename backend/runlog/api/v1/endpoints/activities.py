"""Activity endpoints."""

import math
from collections import Counter
from datetime import datetime
from functools import partial
from typing import Annotated, Any, Iterable
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from runlog.api.deps import get_current_user_id, get_now, get_timezone
from runlog.core.config import Settings, get_settings
from runlog.core.database import get_db
from runlog.models.schemas import ActivityCreate
from runlog.observability import ServiceMetrics, get_metrics
from runlog.services.activities import (
    create_activity,
    list_activities_in_window,
    seed_mock_activities,
)
from runlog.services.report import ActivityReport, ChartModel, build_report, format_date_label
from runlog.services.window import WindowSpec, resolve_window

router = APIRouter()


# -------------------------------------------------------------------------
# Response Models
# -------------------------------------------------------------------------


class WindowResponse(BaseModel):
    """Displayed date range and navigation offsets."""

    start_date: datetime
    end_date: datetime
    previous_offset: int
    next_offset: int
    offset: int | None


class ActivityItem(BaseModel):
    """Activity row with display-ready duration and pace."""

    id: int
    date: datetime
    activity_type: str
    distance: float
    duration_minutes: float
    pace: float | None  # min/km, running only; null when undefined
    note: str
    label: str | None  # chart category, running only


class ChartResponse(BaseModel):
    """Chart series aligned by index, plus chart options."""

    categories: list[str]
    distance_series: list[float]
    pace_series: list[float | None]
    options: dict[str, Any]


class ActivityPageResponse(BaseModel):
    """One page of activity history."""

    window: WindowResponse
    previous_link: str
    next_link: str
    activities: list[ActivityItem]
    average_pace_minutes: float | None
    average_pace_seconds: float | None
    total_time_minutes: float
    total_distance: float
    chart: ChartResponse


class ActivityResponse(BaseModel):
    """Stored activity."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    activity_type: str
    date: datetime
    distance: float
    duration: int
    note: str


class MockSeedResponse(BaseModel):
    """Result of seeding mock data."""

    created: int


# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------


def _finite(value: float) -> float | None:
    """Map inf/nan to None so the value survives JSON encoding."""
    return value if math.isfinite(value) else None


def _finite_list(values: Iterable[float]) -> list[float | None]:
    return [_finite(v) for v in values]


def _week_link(offset: int) -> str:
    return f"?week={offset}"


def _chart_response(chart: ChartModel) -> ChartResponse:
    pace_series = _finite_list(chart.pace_series)
    options = chart.to_options()
    options["series"][1]["data"] = pace_series
    return ChartResponse(
        categories=chart.categories,
        distance_series=chart.distance_series,
        pace_series=pace_series,
        options=options,
    )


def _page_response(window: WindowSpec, report: ActivityReport) -> ActivityPageResponse:
    return ActivityPageResponse(
        window=WindowResponse(
            start_date=window.start_date,
            end_date=window.end_date,
            previous_offset=window.previous_offset,
            next_offset=window.next_offset,
            offset=window.offset,
        ),
        previous_link=_week_link(window.previous_offset),
        next_link=_week_link(window.next_offset),
        activities=[
            ActivityItem(
                id=view.id,
                date=view.date,
                activity_type=view.activity_type,
                distance=view.distance,
                duration_minutes=view.duration_minutes,
                pace=_finite(view.pace) if view.pace is not None else None,
                note=view.note,
                label=view.label,
            )
            for view in report.activities
        ],
        average_pace_minutes=_finite(report.average_pace_minutes),
        average_pace_seconds=_finite(report.average_pace_seconds),
        total_time_minutes=report.total_time_minutes,
        total_distance=report.total_distance,
        chart=_chart_response(report.chart),
    )


# -------------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------------


@router.get("", response_model=ActivityPageResponse)
async def list_activities(
    user_id: Annotated[int, Depends(get_current_user_id)],
    now: Annotated[datetime, Depends(get_now)],
    tz: Annotated[ZoneInfo, Depends(get_timezone)],
    settings: Annotated[Settings, Depends(get_settings)],
    metrics: Annotated[ServiceMetrics, Depends(get_metrics)],
    db: AsyncSession = Depends(get_db),
    week: str | None = Query(None, description="Week offset from the current week"),
) -> ActivityPageResponse:
    """List one week of activities with totals and chart data.

    Without a valid ``week`` the whole history is returned, while the
    navigation links still point at weeks -1 and 1.

    Args:
        user_id: Caller.
        now: Current time.
        tz: Display timezone.
        settings: Application settings.
        metrics: Service metrics.
        db: Database session.
        week: Raw week offset.

    Returns:
        Activity page.
    """
    window = resolve_window(
        week,
        now,
        anchor=settings.history_anchor_date,
        weeks_ahead=settings.default_window_weeks,
    )
    activities = await list_activities_in_window(db, user_id, window)
    report = build_report(activities, label_format=partial(format_date_label, tz=tz))
    metrics.observe_report(window, report)
    return _page_response(window, report)


@router.post("", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
async def add_activity(
    payload: ActivityCreate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    tz: Annotated[ZoneInfo, Depends(get_timezone)],
    metrics: Annotated[ServiceMetrics, Depends(get_metrics)],
    db: AsyncSession = Depends(get_db),
) -> ActivityResponse:
    """Create an activity from raw input (miles and H:M:S are normalised)."""
    activity = await create_activity(db, user_id, payload, tz)
    metrics.observe_created(activity.activity_type)
    return ActivityResponse.model_validate(activity)


@router.post("/mock", response_model=MockSeedResponse, status_code=status.HTTP_201_CREATED)
async def add_mock_activities(
    user_id: Annotated[int, Depends(get_current_user_id)],
    now: Annotated[datetime, Depends(get_now)],
    settings: Annotated[Settings, Depends(get_settings)],
    metrics: Annotated[ServiceMetrics, Depends(get_metrics)],
    db: AsyncSession = Depends(get_db),
) -> MockSeedResponse:
    """Fill the caller's log with sample activities."""
    activities = await seed_mock_activities(db, user_id, now, weeks=settings.mock_weeks)
    for activity_type, count in Counter(a.activity_type for a in activities).items():
        metrics.observe_created(activity_type, source="mock", count=count)
    return MockSeedResponse(created=len(activities))
