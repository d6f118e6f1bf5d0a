"""
Deduplication of usage entries.

The same log event can appear in several overlapping session files, so
entries are keyed by request id, message id and timestamp.
"""

from typing import Iterable, List, Set, Tuple

from claude_contribs.storage.models import UsageEntry

DedupKey = Tuple[str, str, str]


def dedup_key(entry: UsageEntry) -> DedupKey:
    """Composite identity of an entry; missing ids become empty strings."""
    return (entry.request_id or "", entry.message_id or "", entry.raw_timestamp)


def deduplicate_entries(entries: Iterable[UsageEntry]) -> List[UsageEntry]:
    """Keep the first occurrence of each dedup key, in encounter order.

    Args:
        entries: Validated entries merged across all sources

    Returns:
        New list with no two entries sharing a key
    """
    seen: Set[DedupKey] = set()
    unique = []
    for entry in entries:
        key = dedup_key(entry)
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique
