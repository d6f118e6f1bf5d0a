"""
Data models for usage records.

Defines the parsed log entry and the per-day aggregate.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from claude_contribs.core.token_counter import TokenUsage


@dataclass(frozen=True)
class UsageEntry:
    """Immutable record parsed from one Claude Code log line.

    Created while a source file is parsed and discarded once the
    entries have been aggregated.
    """
    timestamp: datetime
    raw_timestamp: str
    input_tokens: int
    output_tokens: int
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0
    request_id: Optional[str] = None
    message_id: Optional[str] = None
    session_id: Optional[str] = None
    model: Optional[str] = None
    entry_type: Optional[str] = None
    version: Optional[str] = None
    cost_usd: Optional[float] = None

    @property
    def usage(self) -> TokenUsage:
        return TokenUsage(
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
            cache_creation_tokens=self.cache_creation_tokens,
            cache_read_tokens=self.cache_read_tokens
        )

    @property
    def total_tokens(self) -> int:
        """Input plus output tokens."""
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class DailyUsage:
    """Usage totals for one calendar day (YYYY-MM-DD)."""
    date: str
    total_tokens: int
    input_tokens: int
    output_tokens: int
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0
    total_cost: float = 0.0
    entry_count: int = 0
