"""
Token counting for usage records.

Groups the four token counters a Claude usage block reports.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenUsage:
    """Token counts from a single usage block.

    Cache counters default to zero because older log lines omit them.
    """
    input_tokens: int
    output_tokens: int
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        """Input plus output tokens, the figure used for the heatmap."""
        return self.input_tokens + self.output_tokens

    @property
    def cache_tokens(self) -> int:
        """Cache creation plus cache read tokens."""
        return self.cache_creation_tokens + self.cache_read_tokens

    @property
    def total_with_cache(self) -> int:
        """All four counters combined."""
        return self.total_tokens + self.cache_tokens

    def total(self, include_cache: bool = False) -> int:
        return self.total_with_cache if include_cache else self.total_tokens
