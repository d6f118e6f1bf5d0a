"""
Number formatting for display output.
"""


def format_token_count(tokens: int) -> str:
    """Format a token count with K/M/B suffixes (1500 -> "1.5K")."""
    if tokens >= 1_000_000_000:
        return f"{tokens / 1_000_000_000:.1f}B"
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens / 1_000:.1f}K"
    return str(tokens)


def format_currency(amount: float) -> str:
    """Format a USD amount with four decimals."""
    return f"${amount:,.4f}"
