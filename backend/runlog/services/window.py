"""Week window resolver.

Maps a relative week offset (``?week=<n>``) to the date range shown on the
activity page, plus the offsets used for the previous/next navigation links.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

logger = logging.getLogger(__name__)

HISTORY_ANCHOR = date(1990, 12, 25)
DEFAULT_WEEKS_AHEAD = 52

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class WindowSpec:
    """Date range for one page of activity history.

    ``start_date`` is inclusive and ``end_date`` exclusive. ``offset`` is the
    validated week offset, or None when the default (all history) window was
    used.
    """

    start_date: datetime
    end_date: datetime
    previous_offset: int
    next_offset: int
    offset: Optional[int] = None

    @property
    def is_default(self) -> bool:
        return self.offset is None


def parse_week_offset(value: Union[str, int, float, None]) -> Optional[int]:
    """Validate a week offset.

    The value is accepted only if it parses as a finite number that equals
    its own truncation to a signed 32-bit integer.

    Args:
        value: Raw offset (query string, number or None).

    Returns:
        The offset as int, or None if absent or invalid.
    """
    if value is None or isinstance(value, bool):
        return None
    # float() also takes digit separators and non-ASCII digits
    if isinstance(value, str) and (not value.isascii() or "_" in value):
        return None

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None

    if not math.isfinite(number) or number != math.trunc(number):
        return None
    if not INT32_MIN <= number <= INT32_MAX:
        return None
    return int(number)


def iso_week_bounds(moment: datetime) -> tuple[datetime, datetime]:
    """Return Monday 00:00 of the ISO week containing ``moment`` and the next Monday."""
    monday = moment.date() - timedelta(days=moment.weekday())
    start = datetime.combine(monday, time.min, tzinfo=moment.tzinfo)
    return start, start + timedelta(weeks=1)


def default_window(
    now: datetime,
    anchor: date = HISTORY_ANCHOR,
    weeks_ahead: int = DEFAULT_WEEKS_AHEAD,
) -> WindowSpec:
    """Window spanning the history anchor through ``weeks_ahead`` weeks from now.

    Pagination still behaves as if week 0 were displayed.
    """
    return WindowSpec(
        start_date=datetime.combine(anchor, time.min, tzinfo=now.tzinfo),
        end_date=now + timedelta(weeks=weeks_ahead),
        previous_offset=-1,
        next_offset=1,
    )


def resolve_window(
    week: Union[str, int, float, None],
    now: datetime,
    *,
    anchor: date = HISTORY_ANCHOR,
    weeks_ahead: int = DEFAULT_WEEKS_AHEAD,
) -> WindowSpec:
    """Resolve a week offset into a concrete window.

    Args:
        week: Raw week offset relative to the current week.
        now: Current time; its timezone defines week boundaries.
        anchor: Start of the default window.
        weeks_ahead: Length of the default window past ``now``.

    Returns:
        The calendar week containing ``now + week`` weeks, or the default
        window when the offset is absent or invalid.
    """
    offset = parse_week_offset(week)
    if offset is None:
        return default_window(now, anchor, weeks_ahead)

    try:
        start, end = iso_week_bounds(now + timedelta(weeks=offset))
    except OverflowError:
        logger.debug("Week offset %s is outside the supported calendar", offset)
        return default_window(now, anchor, weeks_ahead)

    return WindowSpec(
        start_date=start,
        end_date=end,
        previous_offset=offset - 1,
        next_offset=offset + 1,
        offset=offset,
    )
