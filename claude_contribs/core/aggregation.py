"""
Daily aggregation of usage entries.

Folds deduplicated entries into one DailyUsage per calendar date. The date
of an entry is taken in one explicit timezone so results do not depend on
the host's local time unless asked to.
"""

from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Dict, Iterable, List, Optional

from .pricing import estimate_entry_cost
from claude_contribs.storage.models import DailyUsage, UsageEntry
from claude_contribs.utils.dates import format_date


@dataclass
class _DayAccumulator:
    total_tokens: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0
    total_cost: float = 0.0
    entry_count: int = 0


def entry_date(entry: UsageEntry, tz: tzinfo = timezone.utc) -> str:
    """Calendar date (YYYY-MM-DD) of an entry's timestamp in tz."""
    return format_date(entry.timestamp.astimezone(tz))


def in_date_range(date_key: str, date_from: Optional[str], date_to: Optional[str]) -> bool:
    """Inclusive range test on normalized YYYY-MM-DD strings."""
    if date_from and date_key < date_from:
        return False
    if date_to and date_key > date_to:
        return False
    return True


def filter_by_date_range(
    entries: Iterable[UsageEntry],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    tz: tzinfo = timezone.utc
) -> List[UsageEntry]:
    """Entries whose calendar date falls within [date_from, date_to]."""
    return [
        entry for entry in entries
        if in_date_range(entry_date(entry, tz), date_from, date_to)
    ]


def aggregate_by_day(
    entries: Iterable[UsageEntry],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    tz: tzinfo = timezone.utc,
    include_cache: bool = False
) -> List[DailyUsage]:
    """Aggregate entries into per-day usage rows.
    
    Args:
        entries: Deduplicated usage entries
        date_from: Optional inclusive lower bound (YYYY-MM-DD)
        date_to: Optional inclusive upper bound (YYYY-MM-DD)
        tz: Timezone used to turn timestamps into calendar dates
        include_cache: Add cache creation/read tokens to total_tokens
        
    Returns:
        One DailyUsage per date, sorted ascending by date
    """
    days: Dict[str, _DayAccumulator] = {}

    for entry in entries:
        date_key = entry_date(entry, tz)
        if not in_date_range(date_key, date_from, date_to):
            continue

        day = days.get(date_key)
        if day is None:
            day = days[date_key] = _DayAccumulator()

        day.total_tokens += entry.usage.total(include_cache)
        day.input_tokens += entry.input_tokens
        day.output_tokens += entry.output_tokens
        day.cache_creation_tokens += entry.cache_creation_tokens
        day.cache_read_tokens += entry.cache_read_tokens
        day.total_cost += estimate_entry_cost(entry)
        day.entry_count += 1

    return [
        DailyUsage(
            date=date_key,
            total_tokens=day.total_tokens,
            input_tokens=day.input_tokens,
            output_tokens=day.output_tokens,
            cache_creation_tokens=day.cache_creation_tokens,
            cache_read_tokens=day.cache_read_tokens,
            total_cost=day.total_cost,
            entry_count=day.entry_count
        )
        for date_key, day in sorted(days.items())
    ]
