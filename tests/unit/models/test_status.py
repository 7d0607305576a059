"""
Unit tests for models.status module.

Tests:
- categorize_latency() state buckets
- describe_latency() display text
- RelayStatus construction, transitions and immutability
- sort_by_latency() ordering
"""

import dataclasses

import pytest

from relayoptimizer.models.constants import RelayState
from relayoptimizer.models.status import (
    RelayStatus,
    categorize_latency,
    describe_latency,
    sort_by_latency,
)


# =============================================================================
# Latency Helpers Tests
# =============================================================================


class TestCategorizeLatency:
    """Tests for categorize_latency()."""

    @pytest.mark.parametrize(
        ("latency", "state"),
        [
            (0, RelayState.GOOD),
            (99, RelayState.GOOD),
            (100, RelayState.OK),
            (299, RelayState.OK),
            (300, RelayState.BAD),
            (5000, RelayState.BAD),
            (None, RelayState.BAD),
        ],
    )
    def test_buckets(self, latency: int | None, state: RelayState) -> None:
        """Boundaries are exclusive: < 100 good, < 300 ok, else bad."""
        assert categorize_latency(latency) is state


class TestDescribeLatency:
    """Tests for describe_latency()."""

    @pytest.mark.parametrize(
        ("latency", "text"),
        [
            (10, "Lightning fast!"),
            (50, "Super quick"),
            (180, "Pretty good"),
            (250, "Decent"),
            (450, "A bit slow"),
            (800, "Quite slow"),
            (None, "Unreachable"),
        ],
    )
    def test_descriptions(self, latency: int | None, text: str) -> None:
        """Each latency range maps to its description."""
        assert describe_latency(latency) == text


# =============================================================================
# RelayStatus Tests
# =============================================================================


class TestRelayStatus:
    """Tests for RelayStatus."""

    def test_unknown_uses_identity(self) -> None:
        """unknown() canonicalizes the URL and derives the display form."""
        status = RelayStatus.unknown("wss://Relay.Example.com/")
        assert status.identity == "wss://relay.example.com"
        assert status.display_url == "relay.example.com"
        assert status.state is RelayState.UNKNOWN
        assert status.latency_ms is None
        assert status.info is None
        assert status.tested_at is None

    def test_testing_keeps_previous_values(self) -> None:
        """testing() only changes the state."""
        status = RelayStatus(
            identity="wss://a.com",
            display_url="a.com",
            state=RelayState.GOOD,
            latency_ms=42,
            info={"name": "A"},
            tested_at=1,
        )
        testing = status.testing()
        assert testing.state is RelayState.TESTING
        assert testing.latency_ms == 42
        assert testing.info == {"name": "A"}
        assert status.state is RelayState.GOOD

    def test_info_is_read_only(self) -> None:
        """The info mapping cannot be mutated through the status."""
        source = {"name": "A"}
        status = RelayStatus(identity="wss://a.com", display_url="a.com", info=source)
        source["name"] = "B"
        assert status.info["name"] == "A"
        with pytest.raises(TypeError):
            status.info["name"] = "C"  # type: ignore[index]

    def test_frozen(self) -> None:
        """Fields cannot be reassigned."""
        status = RelayStatus.unknown("wss://a.com")
        with pytest.raises(dataclasses.FrozenInstanceError):
            status.state = RelayState.GOOD  # type: ignore[misc]

    def test_reachability_and_description(self) -> None:
        """is_reachable and description follow the latency."""
        slow = RelayStatus("wss://a.com", "a.com", RelayState.BAD, latency_ms=600)
        down = RelayStatus("wss://b.com", "b.com", RelayState.BAD)
        assert slow.is_reachable is True
        assert slow.description == "Quite slow"
        assert down.is_reachable is False
        assert down.description == "Unreachable"


# =============================================================================
# sort_by_latency() Tests
# =============================================================================


class TestSortByLatency:
    """Tests for sort_by_latency()."""

    def test_fastest_first_unreachable_last(self) -> None:
        """Reachable relays sorted ascending, unreachable ones after in input order."""
        statuses = [
            RelayStatus("wss://d.com", "d.com", latency_ms=None),
            RelayStatus("wss://a.com", "a.com", latency_ms=250),
            RelayStatus("wss://e.com", "e.com", latency_ms=None),
            RelayStatus("wss://b.com", "b.com", latency_ms=40),
        ]
        ordered = [s.identity for s in sort_by_latency(statuses)]
        assert ordered == ["wss://b.com", "wss://a.com", "wss://d.com", "wss://e.com"]
