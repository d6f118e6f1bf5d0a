"""
Validation of raw usage log lines.

Each line of a Claude Code JSONL file is checked against an explicit field
table and either becomes a UsageEntry or is skipped with a reason. A bad
line never fails the source it came from.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from claude_contribs.storage.models import UsageEntry
from claude_contribs.utils.dates import parse_timestamp


class FieldKind(Enum):
    """Value kinds a field rule can require."""
    STRING = "string"
    TIMESTAMP = "timestamp"
    OBJECT = "object"
    NON_NEGATIVE_INT = "non_negative_int"
    NON_NEGATIVE_NUMBER = "non_negative_number"


@dataclass(frozen=True)
class FieldRule:
    """One row of the record schema."""
    path: Tuple[str, ...]
    kind: FieldKind
    required: bool = False

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


# Parents come before children so a missing optional parent short-circuits
FIELD_RULES: Tuple[FieldRule, ...] = (
    FieldRule(("timestamp",), FieldKind.TIMESTAMP, required=True),
    FieldRule(("type",), FieldKind.STRING),
    FieldRule(("requestId",), FieldKind.STRING),
    FieldRule(("sessionId",), FieldKind.STRING),
    FieldRule(("version",), FieldKind.STRING),
    FieldRule(("costUSD",), FieldKind.NON_NEGATIVE_NUMBER),
    FieldRule(("message",), FieldKind.OBJECT, required=True),
    FieldRule(("message", "id"), FieldKind.STRING),
    FieldRule(("message", "model"), FieldKind.STRING),
    FieldRule(("message", "usage"), FieldKind.OBJECT, required=True),
    FieldRule(("message", "usage", "input_tokens"), FieldKind.NON_NEGATIVE_INT, required=True),
    FieldRule(("message", "usage", "output_tokens"), FieldKind.NON_NEGATIVE_INT, required=True),
    FieldRule(("message", "usage", "cache_creation_input_tokens"), FieldKind.NON_NEGATIVE_INT),
    FieldRule(("message", "usage", "cache_read_input_tokens"), FieldKind.NON_NEGATIVE_INT),
)

_MISSING = object()


@dataclass(frozen=True)
class LineResult:
    """Outcome of validating one line: an entry, or a skip reason."""
    entry: Optional[UsageEntry] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.entry is not None

    @classmethod
    def valid(cls, entry: UsageEntry) -> "LineResult":
        return cls(entry=entry)

    @classmethod
    def skipped(cls, reason: str) -> "LineResult":
        return cls(reason=reason)


@dataclass(frozen=True)
class ParseOutcome:
    """Validated entries of one source plus the number of skipped lines."""
    entries: List[UsageEntry]
    skipped: int


def _lookup(payload: Dict[str, Any], path: Tuple[str, ...]) -> Any:
    value: Any = payload
    for key in path:
        if not isinstance(value, dict) or key not in value:
            return _MISSING
        value = value[key]
    return value


def _check_kind(value: Any, kind: FieldKind) -> Optional[str]:
    """Return a problem description, or None if value matches kind."""
    if kind is FieldKind.STRING:
        return None if isinstance(value, str) else "must be a string"
    if kind is FieldKind.OBJECT:
        return None if isinstance(value, dict) else "must be an object"
    if kind is FieldKind.TIMESTAMP:
        try:
            parse_timestamp(value)
        except (TypeError, ValueError):
            return "must be an ISO-8601 datetime"
        return None
    # bool is an int subclass but never a valid count
    if isinstance(value, bool):
        return "must be a number"
    if kind is FieldKind.NON_NEGATIVE_INT:
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int):
            return "must be an integer"
        return None if value >= 0 else "must be non-negative"
    if kind is FieldKind.NON_NEGATIVE_NUMBER:
        if not isinstance(value, (int, float)):
            return "must be a number"
        return None if value >= 0 else "must be non-negative"
    raise ValueError(f"Unknown field kind: {kind}")


def validate_record(payload: Any) -> LineResult:
    """Validate a decoded log record against FIELD_RULES.
    
    Args:
        payload: Decoded JSON value of one line
        
    Returns:
        LineResult holding a UsageEntry, or the first problem found
    """
    if not isinstance(payload, dict):
        return LineResult.skipped("record is not an object")

    absent_parents = []
    for rule in FIELD_RULES:
        if any(rule.path[:len(parent)] == parent for parent in absent_parents):
            continue
        value = _lookup(payload, rule.path)
        if value is _MISSING or value is None:
            if rule.required:
                return LineResult.skipped(f"missing required field '{rule.dotted}'")
            absent_parents.append(rule.path)
            continue
        problem = _check_kind(value, rule.kind)
        if problem:
            return LineResult.skipped(f"'{rule.dotted}' {problem}")

    message = payload["message"]
    usage = message["usage"]
    cost = payload.get("costUSD")

    entry = UsageEntry(
        timestamp=parse_timestamp(payload["timestamp"]),
        raw_timestamp=payload["timestamp"],
        input_tokens=int(usage["input_tokens"]),
        output_tokens=int(usage["output_tokens"]),
        cache_creation_tokens=int(usage.get("cache_creation_input_tokens") or 0),
        cache_read_tokens=int(usage.get("cache_read_input_tokens") or 0),
        request_id=payload.get("requestId") or None,
        message_id=message.get("id") or None,
        session_id=payload.get("sessionId") or None,
        model=message.get("model") or None,
        entry_type=payload.get("type"),
        version=payload.get("version"),
        cost_usd=float(cost) if cost is not None else None
    )
    return LineResult.valid(entry)


def parse_line(line: str) -> LineResult:
    """Decode and validate one JSONL line.
    
    Args:
        line: Raw line from a source file
        
    Returns:
        LineResult; undecodable input is skipped, never raised
    """
    text = line.strip()
    if not text:
        return LineResult.skipped("blank line")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        return LineResult.skipped(f"invalid JSON: {e.msg}")
    except (ValueError, RecursionError) as e:
        # Pathological nesting or oversized integer literals
        return LineResult.skipped(f"undecodable line: {type(e).__name__}")
    return validate_record(payload)


def parse_lines(lines: Iterable[str]) -> ParseOutcome:
    """Validate every non-blank line of a source.

    Blank lines are ignored and not counted as skipped.
    """
    entries = []
    skipped = 0
    for line in lines:
        if not line.strip():
            continue
        result = parse_line(line)
        if result.ok:
            entries.append(result.entry)
        else:
            skipped += 1
    return ParseOutcome(entries=entries, skipped=skipped)
