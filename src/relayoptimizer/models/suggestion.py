"""
Social graph relay suggestions.

Value types produced by the
[Aggregator][relayoptimizer.services.aggregator.Aggregator]: per-contact relay
usage, ranked relay suggestions, and the aggregation result. All of them
are frozen and rebuilt on every aggregation run.

See Also:
    [Provenance][relayoptimizer.models.constants.Provenance]: Source of a
        contact's relay usage.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import Provenance


@dataclass(frozen=True, slots=True)
class ContactRelayUsage:
    """Relays advertised by one contact.

    Attributes:
        pubkey: Hex public key of the contact.
        relays: Relay identities in discovery order (no duplicates).
        provenance: Which records the relays came from.
        display_name: Profile ``display_name`` (or ``name``), if known.
        avatar_url: Profile ``picture``, if known.
    """

    pubkey: str
    relays: tuple[str, ...]
    provenance: Provenance
    display_name: str | None = None
    avatar_url: str | None = None


@dataclass(frozen=True, slots=True)
class RelaySuggestion:
    """A relay used by one or more contacts.

    Attributes:
        identity: Canonical relay URL.
        display_url: Identity without scheme, for display.
        contacts: Contacts using the relay, in discovery order.
        provenance: Merged provenance of the mentions of this relay.
        already_configured: Whether the subject already uses the relay.
    """

    identity: str
    display_url: str
    contacts: tuple[ContactRelayUsage, ...]
    provenance: Provenance
    already_configured: bool = False

    @property
    def contact_count(self) -> int:
        """Number of distinct contacts using the relay."""
        return len(self.contacts)


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """Outcome of one aggregation run.

    Attributes:
        suggestions: Suggestions ranked by contact count (descending, stable).
        contact_total: Number of contacts in the subject's contact list.
        analyzed_total: Contacts for which at least one record was resolved.
    """

    suggestions: tuple[RelaySuggestion, ...] = field(default_factory=tuple)
    contact_total: int = 0
    analyzed_total: int = 0

    def new_suggestions(self) -> tuple[RelaySuggestion, ...]:
        """Suggestions the subject does not use yet, ranking preserved."""
        return tuple(s for s in self.suggestions if not s.already_configured)


__all__ = ["AggregationResult", "ContactRelayUsage", "RelaySuggestion"]
