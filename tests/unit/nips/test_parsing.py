"""
Unit tests for nips.parsing and nips.base modules.

Tests:
- parse_fields() type filtering per FieldSpec
- BaseData lenient construction
- BaseLogs success/reason validation
"""

import pytest
from pydantic import ValidationError

from relayoptimizer.nips.base import BaseLogs
from relayoptimizer.nips.parsing import FieldSpec, parse_fields


SPEC = FieldSpec(
    int_fields=frozenset({"max_limit"}),
    bool_fields=frozenset({"auth_required"}),
    str_fields=frozenset({"name"}),
    float_fields=frozenset({"score"}),
    str_list_fields=frozenset({"tags"}),
    int_list_fields=frozenset({"nips"}),
)


# =============================================================================
# parse_fields() Tests
# =============================================================================


class TestParseFields:
    """Tests for parse_fields()."""

    def test_keeps_valid_values(self) -> None:
        """Values of the declared type are kept."""
        data = {
            "max_limit": 500,
            "auth_required": True,
            "name": "relay",
            "score": 0.5,
            "tags": ["sfw"],
            "nips": [1, 11],
        }
        assert parse_fields(data, SPEC) == data

    def test_drops_wrong_types(self) -> None:
        """Wrong-typed values are dropped."""
        data = {"max_limit": "500", "auth_required": "yes", "name": 3, "score": "high"}
        assert parse_fields(data, SPEC) == {}

    def test_bool_is_not_int(self) -> None:
        """Booleans are rejected for integer fields."""
        assert parse_fields({"max_limit": True, "nips": [True, 2]}, SPEC) == {"nips": [2]}

    def test_float_accepts_int(self) -> None:
        """Integers are converted for float fields."""
        assert parse_fields({"score": 1}, SPEC) == {"score": 1.0}

    def test_list_items_filtered(self) -> None:
        """Invalid list items are dropped; empty results are dropped entirely."""
        assert parse_fields({"tags": ["a", 1, None], "nips": ["x"]}, SPEC) == {"tags": ["a"]}

    def test_unknown_fields_ignored(self) -> None:
        """Undeclared fields are ignored."""
        assert parse_fields({"junk": 1}, SPEC) == {}


# =============================================================================
# BaseLogs Tests
# =============================================================================


class TestBaseLogs:
    """Tests for BaseLogs semantic validation."""

    def test_success_without_reason(self) -> None:
        """A successful log has no reason."""
        assert BaseLogs(success=True).to_dict() == {"success": True}

    def test_success_with_reason_rejected(self) -> None:
        """A successful log with a reason is invalid."""
        with pytest.raises(ValidationError):
            BaseLogs(success=True, reason="x")

    def test_failure_requires_reason(self) -> None:
        """A failed log needs a reason."""
        with pytest.raises(ValidationError):
            BaseLogs(success=False)
        assert BaseLogs(success=False, reason="HTTP 503").reason == "HTTP 503"
