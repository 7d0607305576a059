"""Unit tests for models.suggestion module."""

from relayoptimizer.models.constants import Provenance
from relayoptimizer.models.suggestion import AggregationResult, ContactRelayUsage, RelaySuggestion


def _usage(pubkey: str) -> ContactRelayUsage:
    return ContactRelayUsage(pubkey=pubkey, relays=("wss://a.com",), provenance=Provenance.NIP65)


class TestRelaySuggestion:
    """Tests for RelaySuggestion."""

    def test_contact_count(self) -> None:
        """contact_count is the number of contacts."""
        suggestion = RelaySuggestion(
            identity="wss://a.com",
            display_url="a.com",
            contacts=(_usage("b" * 64), _usage("c" * 64)),
            provenance=Provenance.NIP65,
        )
        assert suggestion.contact_count == 2
        assert suggestion.already_configured is False


class TestAggregationResult:
    """Tests for AggregationResult."""

    def test_empty_default(self) -> None:
        """The default result is empty."""
        result = AggregationResult()
        assert result.suggestions == ()
        assert result.contact_total == 0
        assert result.analyzed_total == 0

    def test_new_suggestions(self) -> None:
        """new_suggestions() drops configured relays and keeps the ranking."""
        configured = RelaySuggestion(
            "wss://a.com", "a.com", (_usage("b" * 64),), Provenance.NIP65, already_configured=True
        )
        first = RelaySuggestion("wss://b.com", "b.com", (_usage("b" * 64),), Provenance.NIP65)
        second = RelaySuggestion("wss://c.com", "c.com", (_usage("c" * 64),), Provenance.PROFILE)
        result = AggregationResult(suggestions=(configured, first, second))
        assert result.new_suggestions() == (first, second)
