"""
Intensity levels for the contribution heatmap.

Maps a day's token count to a level 0-4 relative to the peak day, the way
GitHub shades its contribution graph.
"""

from typing import Tuple

MAX_LEVEL = 4

# (minimum ratio to the peak day, level), checked top-down, inclusive
LEVEL_THRESHOLDS: Tuple[Tuple[float, int], ...] = (
    (0.75, 4),
    (0.50, 3),
    (0.25, 2),
)


def contribution_level(tokens: int, max_tokens: int) -> int:
    """Classify a day's usage into an intensity level.

    Args:
        tokens: Token count for the day
        max_tokens: Peak daily token count in the active range

    Returns:
        0 for no usage, otherwise 1-4

    Raises:
        ValueError: If tokens is negative, or nonzero while max_tokens is not positive
    """
    if tokens < 0:
        raise ValueError("tokens cannot be negative")
    if tokens == 0:
        return 0
    if max_tokens <= 0:
        raise ValueError("max_tokens must be > 0 when tokens is nonzero")

    ratio = tokens / max_tokens
    for threshold, level in LEVEL_THRESHOLDS:
        if ratio >= threshold:
            return level
    return 1
