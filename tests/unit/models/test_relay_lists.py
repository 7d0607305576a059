"""
Unit tests for models.relay_lists module.

Tests:
- RelayLists construction, access and publication units
- PublicationOutcome flags, immutability and summary text
"""

import pytest

from relayoptimizer.models.constants import Category, IdentityRecord, RelayList
from relayoptimizer.models.relay_lists import PublicationOutcome, RelayLists


# =============================================================================
# RelayLists Tests
# =============================================================================


class TestRelayLists:
    """Tests for RelayLists."""

    def test_defaults_empty(self) -> None:
        """Every category starts empty."""
        lists = RelayLists()
        assert lists.is_empty is True
        assert lists.non_empty() == []

    def test_from_mapping(self) -> None:
        """Category names or members are accepted as keys."""
        lists = RelayLists.from_mapping({"inbox": ["wss://a.com"], Category.DM: ["wss://d.com"]})
        assert lists.inbox == ("wss://a.com",)
        assert lists.get(Category.DM) == ("wss://d.com",)

    def test_from_mapping_unknown_category(self) -> None:
        """Unknown category keys raise ValueError."""
        with pytest.raises(ValueError):
            RelayLists.from_mapping({"favorites": ["wss://a.com"]})

    def test_with_category_returns_copy(self) -> None:
        """with_category() leaves the original untouched."""
        lists = RelayLists(search=["wss://s.com"])
        updated = lists.with_category(Category.SEARCH, ["wss://t.com"])
        assert lists.search == ("wss://s.com",)
        assert updated.search == ("wss://t.com",)

    def test_outbox_alone_makes_nip65_non_empty(self) -> None:
        """The NIP-65 unit has relays when either inbox or outbox has."""
        lists = RelayLists(outbox=("wss://o.com",))
        assert lists.has_relays(RelayList.NIP65) is True
        assert lists.non_empty() == [RelayList.NIP65]

    def test_non_empty_in_canonical_order(self) -> None:
        """Units are returned in RelayList declaration order."""
        lists = RelayLists(
            trusted=("wss://t.com",),
            dm=("wss://d.com",),
            inbox=("wss://i.com",),
        )
        assert lists.non_empty() == [RelayList.NIP65, RelayList.DM, RelayList.TRUSTED]

    def test_to_dict_covers_every_category(self) -> None:
        """to_dict() has a list for every category."""
        data = RelayLists(dm=("wss://d.com",)).to_dict()
        assert set(data) == {c.value for c in Category}
        assert data["dm"] == ["wss://d.com"]
        assert data["inbox"] == []


# =============================================================================
# PublicationOutcome Tests
# =============================================================================


class TestPublicationOutcome:
    """Tests for PublicationOutcome."""

    def test_succeeded_and_failed(self) -> None:
        """Flags split into succeeded and failed lists."""
        outcome = PublicationOutcome(
            results={RelayList.NIP65: True, RelayList.DM: False, RelayList.SEARCH: True}
        )
        assert outcome.succeeded == [RelayList.NIP65, RelayList.SEARCH]
        assert outcome.failed == [RelayList.DM]
        assert outcome.ok is False

    def test_ok_requires_broadcasts(self) -> None:
        """A failed identity broadcast makes the outcome not ok."""
        outcome = PublicationOutcome(
            results={RelayList.NIP65: True},
            broadcasts={IdentityRecord.PROFILE: True, IdentityRecord.CONTACT_LIST: False},
        )
        assert outcome.ok is False

    def test_results_read_only(self) -> None:
        """The results mapping cannot be mutated."""
        outcome = PublicationOutcome(results={RelayList.NIP65: True})
        with pytest.raises(TypeError):
            outcome.results[RelayList.DM] = True  # type: ignore[index]

    def test_summary_success_and_failure(self) -> None:
        """The summary lists updated lists then every failure message."""
        outcome = PublicationOutcome(
            results={RelayList.NIP65: True, RelayList.DM: True, RelayList.SEARCH: False},
            errors=((RelayList.SEARCH, "Search relays: Timed out after 10s"),),
        )
        assert outcome.summary() == (
            "Updated your NIP-65, DM relays.\nFailed: Search relays: Timed out after 10s"
        )

    def test_summary_with_synced_identity(self) -> None:
        """Fully successful broadcasts add the sync line."""
        outcome = PublicationOutcome(
            results={RelayList.NIP65: True},
            broadcasts={IdentityRecord.PROFILE: True, IdentityRecord.CONTACT_LIST: True},
        )
        assert outcome.summary() == (
            "Updated your NIP-65.\nYour profile and contact list were synced to all relays."
        )

    def test_summary_all_failed(self) -> None:
        """Without successes only failures are listed."""
        outcome = PublicationOutcome(
            results={RelayList.DM: False},
            errors=((RelayList.DM, "DM relays: boom"),),
        )
        assert outcome.summary() == "Failed: DM relays: boom"
