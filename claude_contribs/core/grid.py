"""
Week-major grid layout for contribution maps.

Columns are weeks starting on Sunday, rows are weekdays. A grid covers one
12-month window: a calendar year, or a rolling year starting at any month.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from .intensity import contribution_level
from claude_contribs.storage.models import DailyUsage
from claude_contribs.utils.dates import MONTH_ABBREVIATIONS, format_date, month_name

# GitHub-style maps never show more than 53 week columns
MAX_WEEKS = 53
DAYS_PER_WEEK = 7

# The first week of year 1 would start before date.min; year + 1 must exist
MIN_YEAR = 2
MAX_YEAR = 9998


@dataclass(frozen=True)
class ContributionDay:
    """One cell of the grid."""
    date: str
    tokens: int
    level: int


@dataclass(frozen=True)
class ContributionWeek:
    """One column of the grid: seven days, Sunday first."""
    days: Tuple[ContributionDay, ...]

    def __post_init__(self):
        if len(self.days) != DAYS_PER_WEEK:
            raise ValueError(f"a week must have {DAYS_PER_WEEK} days, got {len(self.days)}")


@dataclass(frozen=True)
class ContributionGrid:
    """Visualization-ready contribution map."""
    year: int
    start_month: int
    end_month: int
    date_range: str
    range_start: date
    range_end: date
    weeks: Tuple[ContributionWeek, ...]
    total_tokens: int
    max_daily_tokens: int


def _validate_month(start_month: int) -> None:
    if start_month < 1 or start_month > 12:
        raise ValueError(f"start_month must be 1-12, got {start_month}")


def _validate_year(year: int) -> None:
    if year < MIN_YEAR or year > MAX_YEAR:
        raise ValueError(f"year must be {MIN_YEAR}-{MAX_YEAR}, got {year}")


def week_start(day: date) -> date:
    """Sunday on or before day."""
    # isoweekday: Monday=1 .. Sunday=7
    return day - timedelta(days=day.isoweekday() % 7)


def usage_window(year: int, start_month: int = 1) -> Tuple[date, date]:
    """First and last day of the 12-month window starting at start_month.

    For January this is the calendar year; otherwise it runs from the 1st
    of start_month to the last day of the preceding month a year later.
    """
    _validate_year(year)
    _validate_month(start_month)
    start = date(year, start_month, 1)
    end = date(year + 1, start_month, 1) - timedelta(days=1)
    return start, end


def _week_anchors(start: date, end: date) -> List[date]:
    anchors = []
    current = week_start(start)
    while current <= end and len(anchors) < MAX_WEEKS:
        anchors.append(current)
        current += timedelta(days=DAYS_PER_WEEK)
    return anchors


def weeks_in_year(year: int) -> List[date]:
    """Sunday anchors of every week touching the calendar year, capped at 53."""
    _validate_year(year)
    return _week_anchors(date(year, 1, 1), date(year, 12, 31))


def weeks_in_custom_year(year: int, start_month: int = 1) -> List[date]:
    """Sunday anchors of every week touching the window, capped at 53."""
    return _week_anchors(*usage_window(year, start_month))


def days_in_week(anchor: date) -> List[date]:
    """The seven days of the week starting at anchor."""
    return [anchor + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def date_range_label(year: int, start_month: int = 1) -> str:
    """Header label: "2024" or "July 2024 - June 2025"."""
    if start_month == 1:
        return str(year)
    _, end = usage_window(year, start_month)
    return f"{month_name(start_month)} {year} - {month_name(end.month)} {end.year}"


def build_contribution_grid(
    daily_usage: Iterable[DailyUsage],
    year: int,
    start_month: int = 1
) -> ContributionGrid:
    """Build the contribution grid for a window.

    daily_usage is expected to be aggregated over the same window. Days
    without a row become zero cells. Intensity is relative to the peak
    day among the supplied rows.

    Args:
        daily_usage: Aggregated rows, one per date
        year: Year the window starts in
        start_month: First month of the window (1 = calendar year)

    Returns:
        ContributionGrid with at most 53 weeks of 7 days each
    """
    _validate_year(year)
    _validate_month(start_month)
    usage_by_date: Dict[str, int] = {}
    for usage in daily_usage:
        usage_by_date[usage.date] = usage.total_tokens

    total_tokens = sum(usage_by_date.values())
    max_daily_tokens = max(usage_by_date.values(), default=0)

    anchors = weeks_in_year(year) if start_month == 1 else weeks_in_custom_year(year, start_month)

    weeks = []
    for anchor in anchors:
        days = []
        for day in days_in_week(anchor):
            date_key = format_date(day)
            tokens = usage_by_date.get(date_key, 0)
            days.append(ContributionDay(
                date=date_key,
                tokens=tokens,
                level=contribution_level(tokens, max_daily_tokens)
            ))
        weeks.append(ContributionWeek(days=tuple(days)))

    range_start, range_end = usage_window(year, start_month)

    return ContributionGrid(
        year=year,
        start_month=start_month,
        end_month=range_end.month,
        date_range=date_range_label(year, start_month),
        range_start=range_start,
        range_end=range_end,
        weeks=tuple(weeks),
        total_tokens=total_tokens,
        max_daily_tokens=max_daily_tokens
    )


def month_label_columns(start_month: int = 1, weeks_per_month: float = 4) -> List[Tuple[str, float]]:
    """Month abbreviations in window order with an approximate week column.

    Columns are spaced a fixed weeks_per_month apart. This is a display
    approximation and does not track where each month actually begins.
    """
    _validate_month(start_month)
    labels = []
    for offset in range(12):
        month_index = (start_month - 1 + offset) % 12
        labels.append((MONTH_ABBREVIATIONS[month_index], offset * weeks_per_month))
    return labels
