"""
Usage statistics for the stats command.

Summarizes token consumption, cost, model mix and daily patterns over an
optional date range.
"""

from dataclasses import asdict, dataclass
from datetime import timezone, tzinfo
from typing import Any, Dict, Iterable, List, Optional

from .aggregation import aggregate_by_day, filter_by_date_range
from .pricing import estimate_entry_cost
from claude_contribs.storage.models import DailyUsage, UsageEntry

UNKNOWN_MODEL = "unknown"


@dataclass(frozen=True)
class ModelUsage:
    """Token and entry totals for one model."""
    model: str
    entries: int
    tokens: int
    percentage: float


@dataclass(frozen=True)
class UsageStatistics:
    """Aggregate usage figures for a date range."""
    total_entries: int
    input_tokens: int
    output_tokens: int
    cache_creation_tokens: int
    cache_read_tokens: int
    total_tokens: int
    total_cost: float
    include_cache: bool
    first_date: Optional[str]
    last_date: Optional[str]
    active_days: int
    avg_daily_tokens: float
    max_daily_tokens: int
    max_daily_date: Optional[str]
    models: List[ModelUsage]

    @property
    def avg_daily_cost(self) -> float:
        return self.total_cost / max(self.active_days, 1)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form for JSON output."""
        data = asdict(self)
        data["avg_daily_cost"] = self.avg_daily_cost
        return data


def _peak_day(daily_usage: List[DailyUsage]) -> Optional[DailyUsage]:
    peak = None
    for day in daily_usage:
        # strict > keeps the earliest date on ties
        if peak is None or day.total_tokens > peak.total_tokens:
            peak = day
    return peak


def compute_usage_statistics(
    entries: Iterable[UsageEntry],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    tz: tzinfo = timezone.utc,
    include_cache: bool = True
) -> UsageStatistics:
    """Compute statistics for entries within an inclusive date range.

    Args:
        entries: Deduplicated usage entries
        date_from: Optional inclusive lower bound (YYYY-MM-DD)
        date_to: Optional inclusive upper bound (YYYY-MM-DD)
        tz: Timezone used to turn timestamps into calendar dates
        include_cache: Count cache creation/read tokens in the totals

    Returns:
        UsageStatistics; total_entries is 0 when nothing falls in range
    """
    # Apply the date range before any totals
    selected = filter_by_date_range(entries, date_from, date_to, tz)
    daily_usage = aggregate_by_day(selected, tz=tz, include_cache=include_cache)

    input_tokens = sum(e.input_tokens for e in selected)
    output_tokens = sum(e.output_tokens for e in selected)
    cache_creation_tokens = sum(e.cache_creation_tokens for e in selected)
    cache_read_tokens = sum(e.cache_read_tokens for e in selected)
    total_tokens = input_tokens + output_tokens
    if include_cache:
        total_tokens += cache_creation_tokens + cache_read_tokens

    # Group by model; entries without one share a bucket
    model_totals: Dict[str, List[int]] = {}
    for entry in selected:
        totals = model_totals.setdefault(entry.model or UNKNOWN_MODEL, [0, 0])
        totals[0] += 1
        totals[1] += entry.usage.total(include_cache)

    models = [
        ModelUsage(
            model=model,
            entries=count,
            tokens=tokens,
            percentage=(tokens / total_tokens * 100) if total_tokens else 0.0
        )
        for model, (count, tokens) in model_totals.items()
    ]
    models.sort(key=lambda m: (-m.tokens, m.model))

    peak = _peak_day(daily_usage)

    return UsageStatistics(
        total_entries=len(selected),
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cache_creation_tokens=cache_creation_tokens,
        cache_read_tokens=cache_read_tokens,
        total_tokens=total_tokens,
        total_cost=sum(estimate_entry_cost(e) for e in selected),
        include_cache=include_cache,
        first_date=daily_usage[0].date if daily_usage else None,
        last_date=daily_usage[-1].date if daily_usage else None,
        active_days=len(daily_usage),
        avg_daily_tokens=(total_tokens / len(daily_usage)) if daily_usage else 0.0,
        max_daily_tokens=peak.total_tokens if peak else 0,
        max_daily_date=peak.date if peak else None,
        models=models
    )
