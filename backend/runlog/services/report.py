"""Activity report aggregation.

Turns a chronologically sorted list of activity records into derived
per-entry views, totals, an average pace and a chart series model.

Degenerate divisions (zero distance) follow float semantics: the result is
``inf`` or ``nan`` and is carried through to the report instead of raising.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any, Callable, Optional, Protocol, Sequence, Union

from runlog.models.activity import ActivityType

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60_000

MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

Number = Union[int, float]


class ActivityLike(Protocol):
    """Fields the aggregator reads from an activity record."""

    id: Any
    date: datetime
    activity_type: str
    distance: float
    duration: int
    note: str


@dataclass(frozen=True)
class ActivityView:
    """Display view of one activity. Records themselves are never modified."""

    id: Any
    date: datetime
    activity_type: str
    distance: float
    duration_minutes: float
    pace: Optional[float]  # min/km, running only
    note: str
    label: Optional[str] = None  # chart category, running only


@dataclass
class ChartModel:
    """Category/series triple for a distance-and-pace chart.

    ``categories[i]``, ``distance_series[i]`` and ``pace_series[i]`` describe
    the same running entry.
    """

    categories: list[str] = field(default_factory=list)
    distance_series: list[float] = field(default_factory=list)
    pace_series: list[float] = field(default_factory=list)

    title: str = "Distance by Date"
    y_axis_title: str = "Kilometer (km)"
    distance_series_name: str = "Distance (km)"
    pace_series_name: str = "Pace"
    distance_tooltip: str = "{x} <br>You have run {y:.2f} km"
    pace_tooltip: str = "{x} <br>Your pace is {y:.2f} min/km"

    def append(self, label: str, distance: float, pace: float) -> None:
        self.categories.append(label)
        self.distance_series.append(distance)
        self.pace_series.append(pace)

    def to_options(self) -> dict:
        """Render as a Highcharts-style options dict."""
        return {
            "title": {"text": self.title, "x": -20},
            "xAxis": {"categories": list(self.categories)},
            "yAxis": {
                "title": {"text": self.y_axis_title},
                "plotLines": [{"value": 0, "width": 1, "color": "#808080"}],
            },
            "tooltip": {
                "shared": False,
                "templates": {
                    self.distance_series_name: self.distance_tooltip,
                    self.pace_series_name: self.pace_tooltip,
                },
            },
            "legend": {
                "layout": "vertical",
                "align": "right",
                "verticalAlign": "middle",
                "borderWidth": 0,
            },
            "series": [
                {"name": self.distance_series_name, "data": list(self.distance_series)},
                {"name": self.pace_series_name, "data": list(self.pace_series)},
            ],
        }


@dataclass
class ActivityReport:
    """Aggregated totals and chart data for a window of activities."""

    activities: list[ActivityView]
    average_pace_minutes: Number
    average_pace_seconds: Number
    total_time_minutes: float
    total_distance: float
    chart: ChartModel


def format_date_label(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Format a date as ``"Jan 5, 2024"``.

    Args:
        value: Date to format. Naive values are taken as UTC when ``tz`` is set.
        tz: Optional timezone to convert into before formatting.

    Returns:
        Medium-length English date label.
    """
    if tz is not None:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(tz)
    return f"{MONTH_ABBR[value.month - 1]} {value.day}, {value.year}"


def divide(numerator: float, denominator: float) -> float:
    """Float division that yields inf/nan on a zero denominator."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def round_half_up(value: float, ndigits: int = 2) -> float:
    """Scale, round half up, descale. Non-finite values pass through."""
    if not math.isfinite(value):
        return value
    scale = 10**ndigits
    return math.floor(value * scale + 0.5) / scale


def floor_or_passthrough(value: float) -> Number:
    """Floor finite values, return non-finite values unchanged."""
    if not math.isfinite(value):
        return value
    return math.floor(value)


def split_pace(total_minutes: float, total_distance: float) -> tuple[Number, Number]:
    """Split an average pace into whole minutes and whole seconds per km."""
    pace = divide(total_minutes, total_distance)
    if not math.isfinite(pace):
        return pace, math.nan
    return math.floor(pace), math.floor(math.fmod(pace, 1) * 60)


def running_pace(minutes: float, distance: float) -> float:
    """Pace in min/km rounded to two decimals."""
    return round_half_up(divide(minutes, distance))


def build_report(
    records: Sequence[ActivityLike],
    *,
    label_format: Callable[[datetime], str] = format_date_label,
) -> ActivityReport:
    """Aggregate activity records into a report.

    Records must already be sorted by date; their order is kept in the
    chart series.

    Args:
        records: Activities inside the displayed window.
        label_format: Formatter for chart category labels.

    Returns:
        ActivityReport with derived views, totals and chart data.
    """
    chart = ChartModel()
    views: list[ActivityView] = []
    total_time = 0.0
    total_distance = 0.0

    for record in records:
        minutes = record.duration / MS_PER_MINUTE
        pace: Optional[float] = None
        label: Optional[str] = None

        if record.activity_type == ActivityType.RUNNING.value:
            pace = running_pace(minutes, record.distance)
            total_distance += record.distance
            label = label_format(record.date)
            chart.append(label, record.distance, pace)

        total_time += minutes
        views.append(
            ActivityView(
                id=record.id,
                date=record.date,
                activity_type=record.activity_type,
                distance=record.distance,
                duration_minutes=minutes,
                pace=pace,
                note=record.note,
                label=label,
            )
        )

    average_minutes, average_seconds = split_pace(total_time, total_distance)
    if not math.isfinite(average_minutes):
        logger.debug(
            "Average pace undefined (total_time=%.2f, total_distance=%.2f)",
            total_time,
            total_distance,
        )

    return ActivityReport(
        activities=views,
        average_pace_minutes=average_minutes,
        average_pace_seconds=average_seconds,
        total_time_minutes=total_time,
        total_distance=total_distance,
        chart=chart,
    )
