"""Service layer for runlog.

Services contain the window resolution, report aggregation and the
activity store.
"""

from runlog.services.report import ActivityReport, ChartModel, build_report
from runlog.services.window import WindowSpec, parse_week_offset, resolve_window

__all__ = [
    "ActivityReport",
    "ChartModel",
    "build_report",
    "WindowSpec",
    "parse_week_offset",
    "resolve_window",
]
