"""
Unit tests for log line validation.

Tests the field table, skip reasons and per-source parsing.
"""

import json
from datetime import datetime, timezone

import pytest

from claude_contribs.core.validation import (
    FIELD_RULES,
    FieldKind,
    LineResult,
    parse_line,
    parse_lines,
    validate_record,
)


def _record(**overrides):
    """Build a valid log record, applying top-level overrides."""
    record = {
        "timestamp": "2024-06-01T10:00:00Z",
        "type": "assistant",
        "requestId": "req_1",
        "sessionId": "sess_1",
        "message": {
            "id": "msg_1",
            "model": "claude-sonnet-4-20250514",
            "usage": {
                "input_tokens": 100,
                "output_tokens": 50,
                "cache_creation_input_tokens": 10,
                "cache_read_input_tokens": 5
            }
        }
    }
    record.update(overrides)
    return record


def _with_usage(**usage):
    record = _record()
    record["message"]["usage"].update(usage)
    return record


class TestFieldRules:
    """Test the schema table itself."""

    def test_required_fields(self):
        """Verify exactly the documented fields are required."""
        required = {rule.dotted for rule in FIELD_RULES if rule.required}
        assert required == {
            "timestamp",
            "message",
            "message.usage",
            "message.usage.input_tokens",
            "message.usage.output_tokens",
        }

    def test_token_fields_are_non_negative_ints(self):
        """Verify all token counters use the non-negative int kind."""
        token_rules = [rule for rule in FIELD_RULES if rule.path[-1].endswith("tokens")]
        assert len(token_rules) == 4
        assert all(rule.kind == FieldKind.NON_NEGATIVE_INT for rule in token_rules)


class TestValidateRecord:
    """Test validation of decoded records."""

    def test_valid_record(self):
        """Test a complete record becomes an entry."""
        result = validate_record(_record())

        assert result.ok
        entry = result.entry
        assert entry.timestamp == datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)
        assert entry.raw_timestamp == "2024-06-01T10:00:00Z"
        assert entry.request_id == "req_1"
        assert entry.message_id == "msg_1"
        assert entry.session_id == "sess_1"
        assert entry.model == "claude-sonnet-4-20250514"
        assert entry.input_tokens == 100
        assert entry.output_tokens == 50
        assert entry.cache_creation_tokens == 10
        assert entry.cache_read_tokens == 5
        assert entry.total_tokens == 150
        assert entry.cost_usd is None

    def test_missing_ids_still_valid(self):
        """Test entries without requestId or message id are kept."""
        record = _record()
        del record["requestId"]
        del record["message"]["id"]

        result = validate_record(record)

        assert result.ok
        assert result.entry.request_id is None
        assert result.entry.message_id is None

    def test_optional_cache_counts_default_to_zero(self):
        """Test missing cache counters become zero."""
        record = _record()
        record["message"]["usage"] = {"input_tokens": 1, "output_tokens": 2}

        result = validate_record(record)

        assert result.ok
        assert result.entry.cache_creation_tokens == 0
        assert result.entry.cache_read_tokens == 0

    def test_cost_usd_is_read(self):
        """Test reported cost is carried on the entry."""
        result = validate_record(_record(costUSD=0.25))
        assert result.entry.cost_usd == 0.25

    def test_missing_timestamp(self):
        """Test a record without timestamp is skipped."""
        record = _record()
        del record["timestamp"]

        result = validate_record(record)

        assert not result.ok
        assert result.reason == "missing required field 'timestamp'"

    def test_unparseable_timestamp(self):
        """Test a malformed timestamp is skipped."""
        result = validate_record(_record(timestamp="yesterday"))
        assert not result.ok
        assert "timestamp" in result.reason

    def test_missing_usage(self):
        """Test a record without a usage block is skipped."""
        record = _record()
        del record["message"]["usage"]

        result = validate_record(record)

        assert not result.ok
        assert result.reason == "missing required field 'message.usage'"

    def test_missing_message(self):
        """Test a record without message is skipped."""
        record = _record()
        del record["message"]

        assert not validate_record(record).ok

    @pytest.mark.parametrize("usage", [
        {"input_tokens": -1},
        {"output_tokens": -5},
        {"cache_read_input_tokens": -1},
        {"input_tokens": "100"},
        {"output_tokens": True},
        {"input_tokens": 1.5},
    ])
    def test_invalid_token_counts(self, usage):
        """Test negative, textual, boolean and fractional counts are rejected."""
        assert not validate_record(_with_usage(**usage)).ok

    def test_integral_float_token_count_accepted(self):
        """Test 100.0 is read as 100."""
        result = validate_record(_with_usage(input_tokens=100.0))
        assert result.ok
        assert result.entry.input_tokens == 100

    def test_non_object_record(self):
        """Test arrays and scalars are skipped."""
        assert validate_record([1, 2]).reason == "record is not an object"
        assert not validate_record("text").ok

    def test_wrong_optional_field_type(self):
        """Test optional fields must match their kind when present."""
        result = validate_record(_record(requestId=42))
        assert not result.ok
        assert "requestId" in result.reason

    def test_null_optional_field_is_ignored(self):
        """Test null optional fields count as absent."""
        result = validate_record(_record(requestId=None))
        assert result.ok
        assert result.entry.request_id is None


class TestParseLine:
    """Test decoding of raw lines."""

    def test_valid_line(self):
        """Test a JSON line is decoded and validated."""
        result = parse_line(json.dumps(_record()))
        assert isinstance(result, LineResult)
        assert result.ok

    def test_invalid_json(self):
        """Test broken JSON is skipped with a reason."""
        result = parse_line('{"timestamp": ')
        assert not result.ok
        assert result.reason.startswith("invalid JSON")

    def test_blank_line(self):
        """Test blank lines are skipped."""
        assert parse_line("   ").reason == "blank line"

    def test_deeply_nested_line_is_skipped(self):
        """Test nesting past the decoder's recursion limit is skipped, not raised."""
        result = parse_line("[" * 100000)
        assert not result.ok
        assert result.reason


class TestParseLinesRecovery:
    """Test lines the JSON decoder itself cannot handle."""

    def test_nested_line_between_good_lines(self):
        good = json.dumps(_record())
        outcome = parse_lines([good, "[" * 100000, json.dumps(_record(requestId="req_2"))])

        assert len(outcome.entries) == 2
        assert outcome.skipped == 1

    def test_oversized_integer_does_not_abort_source(self):
        """Test a huge integer literal never escapes as an exception."""
        huge = json.dumps(_record()).replace('"input_tokens": 100', '"input_tokens": ' + "9" * 5001)
        good = json.dumps(_record(requestId="req_2"))

        outcome = parse_lines([huge, good])

        # Interpreters with an int-digit limit reject the line; others accept it
        assert len(outcome.entries) + outcome.skipped == 2
        assert outcome.entries[-1].request_id == "req_2"


class TestParseLines:
    """Test whole-source parsing."""

    def test_bad_lines_do_not_fail_source(self):
        """Test valid lines survive next to invalid ones."""
        lines = [
            json.dumps(_record()),
            "not json",
            json.dumps(_with_usage(input_tokens=-1)),
            "",
            json.dumps(_record(requestId="req_2")),
        ]

        outcome = parse_lines(lines)

        assert len(outcome.entries) == 2
        assert outcome.skipped == 2
        assert [e.request_id for e in outcome.entries] == ["req_1", "req_2"]

    def test_empty_source(self):
        """Test an empty source yields nothing."""
        outcome = parse_lines([])
        assert outcome.entries == []
        assert outcome.skipped == 0
