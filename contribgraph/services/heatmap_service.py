import logging
from bisect import bisect_right
from collections.abc import Callable
from collections.abc import Iterable
from datetime import date
from datetime import timedelta

from contribgraph.clients.git_client import read_commit_dates
from contribgraph.schemas.calendar import CalendarGrid
from contribgraph.schemas.calendar import DayCell
from contribgraph.schemas.calendar import MonthLabel


logger = logging.getLogger(__name__)

HistoryReader = Callable[[str, str, str], Iterable[str]]

BAND_THRESHOLDS = (1, 4, 7, 11, 16)
PALETTE = (
    "#ebedf0",
    "#c6e48b",
    "#7bc96f",
    "#40c463",
    "#239a3b",
    "#196127",
)


def build_histogram(commit_dates: Iterable[str]) -> dict[str, int]:
    """Count commits per ISO date string."""

    histogram: dict[str, int] = {}
    for raw_day in commit_dates:
        day = raw_day.strip()
        if not day:
            continue
        histogram[day] = histogram.get(day, 0) + 1
    return histogram


def fetch_year_histogram(
    repo_path: str,
    year: int,
    reader: HistoryReader = read_commit_dates,
) -> dict[str, int]:
    """Read one year of non-merge commit dates and count them per day."""

    since = f"{year}-01-01 00:00:00"
    until = f"{year}-12-31 23:59:59"
    histogram = build_histogram(reader(repo_path, since, until))
    logger.info(
        "Built histogram for %s in %d: %d active days", repo_path, year, len(histogram)
    )
    return histogram


def contribution_band(count: int) -> int:
    """Map a daily commit count to a band index in range 0..5."""

    if count < 0:
        raise ValueError("count must be non-negative")
    return bisect_right(BAND_THRESHOLDS, count)


def band_color(count: int) -> str:
    return PALETTE[contribution_band(count)]


def weekday_row(day: date) -> int:
    """Sunday-first weekday index: Sunday = 0 .. Saturday = 6."""

    return (day.weekday() + 1) % 7


def week_start(day: date) -> date:
    return day - timedelta(days=weekday_row(day))


def week_column(grid_start: date, day: date) -> int:
    return (week_start(day) - grid_start).days // 7


def year_bounds(year: int) -> tuple[date, date]:
    """Return `[Jan 1, Jan 1 of next year)` for the year."""

    return date(year, 1, 1), date(year + 1, 1, 1)


def grid_bounds(year: int) -> tuple[date, date]:
    """Return the whole-week range that covers the year.

    Starts on the Sunday on/before January 1 and ends (exclusive) on the
    Sunday on/after January 1 of the following year.
    """

    year_start, year_end = year_bounds(year)
    start = week_start(year_start)
    end = week_start(year_end)
    if end < year_end:
        end += timedelta(days=7)
    return start, end


def build_calendar_grid(year: int, histogram: dict[str, int]) -> CalendarGrid:
    """Lay out every day of the year's weeks with its count."""

    year_start, year_end = year_bounds(year)
    start, end = grid_bounds(year)

    days: list[DayCell] = []
    total = 0
    current_day = start
    while current_day < end:
        in_year = year_start <= current_day < year_end
        count = histogram.get(current_day.isoformat(), 0) if in_year else 0
        total += count
        days.append(DayCell(date=current_day, count=count, in_year=in_year))
        current_day += timedelta(days=1)

    week_count = (end - start).days // 7
    weeks = [start + timedelta(days=7 * index) for index in range(week_count)]

    months = [
        MonthLabel(date=first, column=week_column(start, first))
        for first in (date(year, month, 1) for month in range(1, 13))
    ]

    return CalendarGrid(
        year=year,
        start=start,
        end=end,
        days=days,
        weeks=weeks,
        months=months,
        total=total,
    )
