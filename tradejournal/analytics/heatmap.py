"""Calendar heatmap layout.

Lays daily contributions onto a GitHub-style grid: seven rows (Sunday
first) by N week columns. This is pure calendar geometry over the output
of :func:`tradejournal.analytics.breakdown.daily_contribution`; colouring
is left to the renderer.
"""

from datetime import date as date_type
from datetime import timedelta
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from tradejournal.models import DailyContribution

TRAILING_WEEKS = 53
DAY_LABELS = ["S", "M", "T", "W", "T", "F", "S"]


class HeatmapWindow(str, Enum):
    """Date range covered by the grid."""

    TRAILING = "trailing"
    CALENDAR_YEAR = "year"


class HeatmapCell(BaseModel):
    """One day in the grid."""

    date: date_type = Field(..., description="Calendar day")
    contribution: Optional[DailyContribution] = Field(
        default=None, description="Activity for the day, if any"
    )

    model_config = {"frozen": True}


class MonthLabel(BaseModel):
    """Month caption placed above a week column."""

    week: int = Field(..., ge=0, description="Column index")
    label: str = Field(..., description="Abbreviated month name")

    model_config = {"frozen": True}


class HeatmapGrid(BaseModel):
    """A 7 x ``weeks`` grid of cells.

    ``rows[weekday][week]`` is ``None`` for days outside the window (or
    hidden weekends).
    """

    start: date_type = Field(..., description="Sunday shown in column 0, row 0")
    weeks: int = Field(..., ge=1, description="Number of week columns")
    rows: list[list[Optional[HeatmapCell]]]
    month_labels: list[MonthLabel] = Field(default_factory=list)

    model_config = {"frozen": True}

    def cells(self) -> list[HeatmapCell]:
        """All non-empty cells, column by column."""
        return [
            self.rows[weekday][week]
            for week in range(self.weeks)
            for weekday in range(7)
            if self.rows[weekday][week] is not None
        ]


def week_start(day: date_type) -> date_type:
    """Return the Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _window_bounds(
    window: HeatmapWindow, today: date_type, year: Optional[int]
) -> tuple[date_type, date_type, date_type, int]:
    if window == HeatmapWindow.CALENDAR_YEAR:
        year = year or today.year
        range_start = date_type(year, 1, 1)
        range_end = date_type(year, 12, 31)
        start = week_start(range_start)
        weeks = (range_end - start).days // 7 + 1
        return start, range_start, range_end, weeks

    # Last column is the week holding today
    start = week_start(today) - timedelta(weeks=TRAILING_WEEKS - 1)
    return start, start, today, TRAILING_WEEKS


def build_heatmap(
    daily: Iterable[DailyContribution],
    window: HeatmapWindow = HeatmapWindow.TRAILING,
    today: Optional[date_type] = None,
    year: Optional[int] = None,
    show_weekends: bool = True,
) -> HeatmapGrid:
    """Lay out daily contributions on a week grid.

    The trailing window always ends with the week holding ``today`` and
    reaches back 52 more weeks, rather than counting a fixed number of
    days back and aligning that start to a Sunday.

    Args:
        daily: Per-day aggregates keyed by ``YYYY-MM-DD``.
        window: Trailing 53 weeks ending at ``today``, or one calendar year.
        today: Reference day, defaults to the local date.
        year: Calendar year for ``HeatmapWindow.CALENDAR_YEAR``; defaults
            to the year of ``today``.
        show_weekends: When False, Sunday and Saturday rows are blank.

    Returns:
        The populated grid with one label per month.
    """
    today = today or date_type.today()
    start, range_start, range_end, weeks = _window_bounds(window, today, year)
    by_day = {d.date: d for d in daily}

    rows: list[list[Optional[HeatmapCell]]] = [[] for _ in range(7)]
    seen_months: set[tuple[int, int]] = set()
    month_labels = []

    for week in range(weeks):
        for weekday in range(7):
            day = start + timedelta(days=week * 7 + weekday)
            if not range_start <= day <= range_end:
                rows[weekday].append(None)
                continue

            month_key = (day.year, day.month)
            if day.day == 1 and month_key not in seen_months:
                seen_months.add(month_key)
                month_labels.append(MonthLabel(week=week, label=day.strftime("%b")))

            if not show_weekends and weekday in (0, 6):
                rows[weekday].append(None)
                continue

            contribution = by_day.get(day.isoformat()) if day <= today else None
            rows[weekday].append(HeatmapCell(date=day, contribution=contribution))

    return HeatmapGrid(start=start, weeks=weeks, rows=rows, month_labels=month_labels)
