"""
Repository pattern for usage log access.

Loads, validates and deduplicates usage entries from a Claude data directory.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .files import DEFAULT_DATA_DIR, DataDirectoryError, find_jsonl_files, read_lines
from .models import UsageEntry
from claude_contribs.core.dedup import deduplicate_entries
from claude_contribs.core.validation import parse_lines

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True)
class SourceParseResult:
    """Outcome of parsing one source file."""
    path: Path
    entries: List[UsageEntry]
    skipped_lines: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class LoadResult:
    """Deduplicated entries plus counters describing how they were loaded."""
    entries: List[UsageEntry]
    data_dir: Path
    data_dir_accessible: bool = True
    files_scanned: int = 0
    files_failed: int = 0
    skipped_lines: int = 0
    duplicates_removed: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.entries


def parse_source(path: Path) -> SourceParseResult:
    """Parse one JSONL file; read failures are reported, never raised."""
    try:
        lines = read_lines(path)
    except OSError as e:
        logger.warning("Could not read file %s: %s", path, e)
        return SourceParseResult(path=path, entries=[], error=str(e))

    outcome = parse_lines(lines)
    if outcome.skipped:
        logger.debug("Skipped %d invalid lines in %s", outcome.skipped, path)
    return SourceParseResult(path=path, entries=outcome.entries, skipped_lines=outcome.skipped)


class UsageRepository:
    """Read-only access to the usage entries under a data directory.

    Each source file is parsed independently, so files are read on a
    thread pool. Results are merged in discovery order before
    deduplication, which keeps first-seen tie-breaking stable.
    """

    def __init__(
        self,
        data_dir: Union[str, Path] = DEFAULT_DATA_DIR,
        max_workers: int = DEFAULT_MAX_WORKERS
    ):
        """Initialize the repository.

        Args:
            data_dir: Root directory holding JSONL logs
            max_workers: Number of threads used to read files
        """
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.data_dir = Path(data_dir).expanduser()
        self.max_workers = max_workers

    def find_files(self) -> List[Path]:
        return find_jsonl_files(self.data_dir)

    def load_entries(self) -> LoadResult:
        """Load every valid, deduplicated entry.

        An inaccessible data directory yields an empty result rather than
        an error.
        """
        try:
            files = self.find_files()
        except DataDirectoryError as e:
            logger.info("%s", e)
            return LoadResult(entries=[], data_dir=self.data_dir, data_dir_accessible=False)

        if not files:
            logger.info("No JSONL files found in %s", self.data_dir)
            return LoadResult(entries=[], data_dir=self.data_dir)

        # Parse files concurrently; map returns results in discovery order
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            results = list(executor.map(parse_source, files))

        # Merge before dedup so the first discovered copy wins
        merged = []
        for result in results:
            merged.extend(result.entries)
        entries = deduplicate_entries(merged)

        load_result = LoadResult(
            entries=entries,
            data_dir=self.data_dir,
            files_scanned=len(results),
            files_failed=sum(1 for r in results if not r.ok),
            skipped_lines=sum(r.skipped_lines for r in results),
            duplicates_removed=len(merged) - len(entries)
        )
        logger.info(
            "Loaded %d entries from %d files (%d failed, %d lines skipped, %d duplicates removed)",
            len(entries),
            load_result.files_scanned,
            load_result.files_failed,
            load_result.skipped_lines,
            load_result.duplicates_removed
        )
        return load_result


def get_repository(
    data_dir: Union[str, Path] = DEFAULT_DATA_DIR,
    max_workers: int = DEFAULT_MAX_WORKERS
) -> UsageRepository:
    """Create a repository for a data directory.

    Args:
        data_dir: Root directory holding JSONL logs
        max_workers: Number of threads used to read files

    Returns:
        A new UsageRepository
    """
    return UsageRepository(data_dir, max_workers=max_workers)
