"""
Unit tests for daily aggregation.

Tests per-day folding, date range filtering and timezone handling.
"""

from datetime import timedelta, timezone

import pytest

from claude_contribs.core.aggregation import (
    aggregate_by_day,
    entry_date,
    filter_by_date_range,
)
from claude_contribs.storage.models import UsageEntry
from claude_contribs.utils.dates import parse_timestamp


def create_test_entry(timestamp, input_tokens, output_tokens, cache_creation=0, cache_read=0,
                      model=None, cost_usd=None):
    """Create a test usage entry."""
    return UsageEntry(
        timestamp=parse_timestamp(timestamp),
        raw_timestamp=timestamp,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cache_creation_tokens=cache_creation,
        cache_read_tokens=cache_read,
        model=model,
        cost_usd=cost_usd
    )


class TestEntryDate:
    """Test timestamp to calendar date conversion."""

    def test_utc_default(self):
        entry = create_test_entry("2024-06-01T23:30:00Z", 1, 1)
        assert entry_date(entry) == "2024-06-01"

    def test_explicit_timezone_shifts_date(self):
        """Test a late UTC timestamp lands on the next day further east."""
        entry = create_test_entry("2024-06-01T23:30:00Z", 1, 1)
        plus_two = timezone(timedelta(hours=2))
        assert entry_date(entry, plus_two) == "2024-06-02"

    def test_offsets_normalized_to_one_timezone(self):
        """Test timestamps with different offsets merge into the same day."""
        first = create_test_entry("2024-06-01T10:00:00+02:00", 1, 1)
        second = create_test_entry("2024-06-01T20:00:00-03:00", 1, 1)

        assert entry_date(first) == "2024-06-01"
        assert entry_date(second) == "2024-06-01"


class TestAggregateByDay:
    """Test per-day folding."""

    def test_sums_per_day(self):
        """Test totals equal input + output of the day's entries."""
        entries = [
            create_test_entry("2024-06-01T10:00:00Z", 40, 10),
            create_test_entry("2024-06-01T12:00:00Z", 30, 20),
            create_test_entry("2024-06-02T09:00:00Z", 300, 100),
        ]

        result = aggregate_by_day(entries)

        assert [d.date for d in result] == ["2024-06-01", "2024-06-02"]
        june_1, june_2 = result
        assert june_1.total_tokens == 100
        assert june_1.input_tokens == 70
        assert june_1.output_tokens == 30
        assert june_1.entry_count == 2
        assert june_2.total_tokens == 400
        assert june_2.entry_count == 1

    def test_sorted_ascending(self):
        """Test output is sorted by date regardless of input order."""
        entries = [
            create_test_entry("2024-12-31T10:00:00Z", 1, 1),
            create_test_entry("2024-01-05T10:00:00Z", 1, 1),
            create_test_entry("2024-06-15T10:00:00Z", 1, 1),
        ]

        result = aggregate_by_day(entries)

        assert [d.date for d in result] == ["2024-01-05", "2024-06-15", "2024-12-31"]

    def test_one_row_per_date(self):
        entries = [create_test_entry(f"2024-06-01T{h:02d}:00:00Z", 1, 1) for h in range(24)]
        result = aggregate_by_day(entries)
        assert len(result) == 1
        assert result[0].entry_count == 24

    def test_cache_excluded_from_total_by_default(self):
        """Test cache tokens are tracked but not counted in total_tokens."""
        entries = [create_test_entry("2024-06-01T10:00:00Z", 10, 5, cache_creation=100, cache_read=1000)]

        day = aggregate_by_day(entries)[0]

        assert day.total_tokens == 15
        assert day.cache_creation_tokens == 100
        assert day.cache_read_tokens == 1000

    def test_cache_included_on_request(self):
        entries = [create_test_entry("2024-06-01T10:00:00Z", 10, 5, cache_creation=100, cache_read=1000)]
        day = aggregate_by_day(entries, include_cache=True)[0]
        assert day.total_tokens == 1115

    def test_inclusive_date_range(self):
        """Test both bounds are inclusive and compared as date strings."""
        entries = [
            create_test_entry("2024-05-31T23:59:59Z", 1, 0),
            create_test_entry("2024-06-01T00:00:00Z", 2, 0),
            create_test_entry("2024-06-30T23:59:59Z", 4, 0),
            create_test_entry("2024-07-01T00:00:00Z", 8, 0),
        ]

        result = aggregate_by_day(entries, date_from="2024-06-01", date_to="2024-06-30")

        assert [d.date for d in result] == ["2024-06-01", "2024-06-30"]
        assert sum(d.total_tokens for d in result) == 6

    def test_reported_cost_summed(self):
        entries = [
            create_test_entry("2024-06-01T10:00:00Z", 1, 1, cost_usd=0.5),
            create_test_entry("2024-06-01T11:00:00Z", 1, 1, cost_usd=0.25),
        ]
        assert aggregate_by_day(entries)[0].total_cost == pytest.approx(0.75)

    def test_estimated_cost_for_known_model(self):
        """Test cost falls back to the pricing table."""
        entries = [create_test_entry("2024-06-01T10:00:00Z", 1_000_000, 0, model="claude-sonnet-4-20250514")]
        assert aggregate_by_day(entries)[0].total_cost == pytest.approx(3.0)

    def test_unknown_model_costs_nothing(self):
        entries = [create_test_entry("2024-06-01T10:00:00Z", 1_000_000, 0, model="<synthetic>")]
        assert aggregate_by_day(entries)[0].total_cost == 0.0

    def test_empty(self):
        assert aggregate_by_day([]) == []


class TestFilterByDateRange:
    """Test entry-level range filtering."""

    def test_open_bounds(self):
        entries = [
            create_test_entry("2024-01-01T00:00:00Z", 1, 1),
            create_test_entry("2024-12-31T00:00:00Z", 1, 1),
        ]
        assert len(filter_by_date_range(entries)) == 2
        assert len(filter_by_date_range(entries, date_from="2024-06-01")) == 1
        assert len(filter_by_date_range(entries, date_to="2024-06-01")) == 1

    def test_timezone_applies_to_bounds(self):
        """Test the range is checked on the converted local date."""
        entry = create_test_entry("2024-06-30T23:00:00Z", 1, 1)
        plus_two = timezone(timedelta(hours=2))

        assert filter_by_date_range([entry], date_to="2024-06-30") == [entry]
        assert filter_by_date_range([entry], date_to="2024-06-30", tz=plus_two) == []
