"""
Log file discovery.

Finds Claude Code JSONL files under a data directory.
"""

import logging
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

JSONL_EXTENSION = ".jsonl"

DEFAULT_DATA_DIR = "~/.claude/projects"


class DataDirectoryError(Exception):
    """Raised when the data directory itself cannot be listed."""
    def __init__(self, message: str, data_dir: Path):
        super().__init__(message)
        self.data_dir = data_dir


def _is_jsonl(path: Path) -> bool:
    return path.suffix == JSONL_EXTENSION and path.is_file()


def find_jsonl_files(data_dir: Path) -> List[Path]:
    """Find JSONL files in data_dir and its immediate subdirectories.

    Claude Code keeps one subdirectory per project, so a single level of
    recursion covers the standard layout. Files are returned in a stable
    order: root files first, then each subdirectory, all sorted by name.

    Args:
        data_dir: Root directory to search

    Returns:
        Ordered list of JSONL file paths

    Raises:
        DataDirectoryError: If data_dir cannot be listed
    """
    try:
        children = sorted(data_dir.iterdir())
    except OSError as e:
        raise DataDirectoryError(f"Cannot access data directory: {data_dir}", data_dir) from e

    files = [child for child in children if _is_jsonl(child)]

    for child in children:
        if not child.is_dir():
            continue
        try:
            files.extend(sorted(p for p in child.iterdir() if _is_jsonl(p)))
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", child, e)

    return files


def read_lines(path: Path) -> List[str]:
    """Read a JSONL file as a list of lines.

    Invalid UTF-8 bytes are replaced, so a corrupt line fails validation on
    its own instead of taking the rest of the file with it.

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read().splitlines()
