"""Tests for activity report aggregation."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from runlog.services.report import (
    build_report,
    divide,
    format_date_label,
    round_half_up,
    split_pace,
)


@dataclass
class Record:
    id: int
    date: datetime
    activity_type: str
    distance: float
    duration: int
    note: str = ""


def run(day: int, distance: float, duration: int, record_id: int = 0) -> Record:
    return Record(
        id=record_id or day,
        date=datetime(2024, 1, day, 7, 0, tzinfo=timezone.utc),
        activity_type="running",
        distance=distance,
        duration=duration,
    )


def ride(day: int, distance: float, duration: int) -> Record:
    return Record(
        id=100 + day,
        date=datetime(2024, 1, day, 18, 0, tzinfo=timezone.utc),
        activity_type="cycling",
        distance=distance,
        duration=duration,
    )


class TestBuildReport:
    """Tests for build_report."""

    def test_pace_of_single_run(self):
        report = build_report([run(5, 10.0, 3_000_000)])

        assert report.chart.pace_series == [5.0]
        assert report.activities[0].pace == 5.0
        assert report.activities[0].duration_minutes == 50.0

    def test_two_runs_totals_and_average(self):
        report = build_report([run(5, 5.0, 1_500_000), run(6, 5.0, 1_500_000)])

        assert report.total_distance == 10
        assert report.total_time_minutes == 50
        assert report.average_pace_minutes == 5
        assert report.average_pace_seconds == 0

    def test_average_pace_seconds(self):
        # 52.5 minutes over 10 km -> 5:15 min/km
        report = build_report([run(5, 10.0, 3_150_000)])

        assert report.average_pace_minutes == 5
        assert report.average_pace_seconds == 15

    def test_series_aligned_with_running_entries(self):
        records = [
            run(1, 5.0, 1_500_000),
            ride(2, 30.0, 3_600_000),
            run(3, 8.0, 2_880_000),
            ride(4, 20.0, 2_400_000),
            run(5, 12.0, 3_960_000),
        ]
        report = build_report(records)
        chart = report.chart

        assert len(chart.categories) == len(chart.distance_series) == len(chart.pace_series) == 3
        assert chart.categories == ["Jan 1, 2024", "Jan 3, 2024", "Jan 5, 2024"]
        assert chart.distance_series == [5.0, 8.0, 12.0]
        assert chart.pace_series == [5.0, 6.0, 5.5]
        assert len(report.activities) == 5
        assert [v.label for v in report.activities] == [
            "Jan 1, 2024",
            None,
            "Jan 3, 2024",
            None,
            "Jan 5, 2024",
        ]

    def test_non_running_counts_towards_time_only(self):
        report = build_report([run(1, 10.0, 3_000_000), ride(2, 40.0, 6_000_000)])

        assert report.total_distance == 10.0
        assert report.total_time_minutes == 150.0
        assert report.chart.distance_series == [10.0]
        assert report.activities[1].pace is None
        assert report.activities[1].duration_minutes == 100.0
        assert report.average_pace_minutes == 15

    def test_total_distance_independent_of_order(self):
        records = [run(1, 5.0, 1_500_000), run(2, 7.5, 2_700_000), run(3, 3.2, 1_000_000)]

        forward = build_report(records)
        backward = build_report(list(reversed(records)))

        assert forward.total_distance == pytest.approx(backward.total_distance)
        assert forward.chart.distance_series == [5.0, 7.5, 3.2]
        assert backward.chart.distance_series == [3.2, 7.5, 5.0]

    def test_pace_rounded_to_two_decimals(self):
        report = build_report([run(1, 3.0, 960_000), run(2, 7.0, 2_400_000)])

        # 16 min / 3 km, 40 min / 7 km
        assert report.chart.pace_series == [5.33, 5.71]

    def test_empty_input(self):
        report = build_report([])

        assert report.activities == []
        assert report.chart.categories == []
        assert report.chart.distance_series == []
        assert report.chart.pace_series == []
        assert report.total_distance == 0
        assert report.total_time_minutes == 0
        assert math.isnan(report.average_pace_minutes)
        assert math.isnan(report.average_pace_seconds)

    def test_only_non_running_gives_infinite_average(self):
        report = build_report([ride(1, 20.0, 1_800_000)])

        assert report.total_distance == 0
        assert report.total_time_minutes == 30
        assert report.average_pace_minutes == math.inf
        assert math.isnan(report.average_pace_seconds)

    def test_zero_distance_run_has_non_finite_pace(self):
        report = build_report([run(1, 0.0, 1_200_000), run(2, 0.0, 0), run(3, 10.0, 3_000_000)])

        paces = report.chart.pace_series
        assert paces[0] == math.inf
        assert math.isnan(paces[1])
        assert paces[2] == 5.0
        assert report.chart.categories == ["Jan 1, 2024", "Jan 2, 2024", "Jan 3, 2024"]
        assert report.total_distance == 10.0

    def test_records_are_not_mutated(self):
        record = run(1, 10.0, 3_000_000)
        build_report([record])

        assert record.duration == 3_000_000
        assert record.distance == 10.0
        assert record.activity_type == "running"
        assert not hasattr(record, "pace")

    def test_custom_label_format(self):
        report = build_report(
            [run(5, 10.0, 3_000_000)],
            label_format=lambda value: value.strftime("%Y-%m-%d"),
        )

        assert report.chart.categories == ["2024-01-05"]

    def test_chart_options(self):
        report = build_report([run(5, 10.0, 3_000_000)])
        options = report.chart.to_options()

        assert options["title"]["text"] == "Distance by Date"
        assert options["yAxis"]["title"]["text"] == "Kilometer (km)"
        assert options["xAxis"]["categories"] == ["Jan 5, 2024"]
        assert [s["name"] for s in options["series"]] == ["Distance (km)", "Pace"]
        assert options["series"][0]["data"] == [10.0]
        assert options["series"][1]["data"] == [5.0]
        assert "Distance (km)" in options["tooltip"]["templates"]


class TestFormatDateLabel:
    """Tests for chart labels."""

    def test_medium_english_form(self):
        assert format_date_label(datetime(2024, 1, 5)) == "Jan 5, 2024"
        assert format_date_label(datetime(2023, 12, 25, 18, 0)) == "Dec 25, 2023"

    def test_converts_to_timezone(self):
        value = datetime(2024, 1, 5, 23, 30, tzinfo=timezone.utc)

        assert format_date_label(value, tz=ZoneInfo("Asia/Seoul")) == "Jan 6, 2024"

    def test_naive_values_read_as_utc(self):
        value = datetime(2024, 1, 5, 2, 0)

        assert format_date_label(value, tz=ZoneInfo("America/New_York")) == "Jan 4, 2024"


class TestNumericHelpers:
    """Tests for division and rounding helpers."""

    def test_divide(self):
        assert divide(10.0, 4.0) == 2.5
        assert divide(1.0, 0.0) == math.inf
        assert math.isnan(divide(0.0, 0.0))

    @pytest.mark.parametrize(
        "value,expected",
        [(5.0, 5.0), (5.333333, 5.33), (5.716, 5.72), (0.0, 0.0)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_round_half_up_passes_non_finite(self):
        assert round_half_up(math.inf) == math.inf
        assert math.isnan(round_half_up(math.nan))

    def test_split_pace(self):
        assert split_pace(63.0, 12.0) == (5, 15)
        minutes, seconds = split_pace(0.0, 0.0)
        assert math.isnan(minutes)
        assert math.isnan(seconds)
