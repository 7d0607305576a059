"""Shared constants for the models layer.

Defines the enumerations used across model, NIP, and service modules:
Nostr event kinds, relay categories and their publication units, probe
states, and suggestion provenance. Keeping them here avoids circular
imports between the models and services layers.

See Also:
    [relayoptimizer.models.relay_lists][]: Uses [Category][relayoptimizer.models.constants.Category]
        and [RelayList][relayoptimizer.models.constants.RelayList] to shape
        publishable relay lists.
    [relayoptimizer.models.status][]: Uses [RelayState][relayoptimizer.models.constants.RelayState]
        for probe results.
    [relayoptimizer.models.suggestion][]: Uses [Provenance][relayoptimizer.models.constants.Provenance]
        for social graph suggestions.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class EventKind(IntEnum):
    """Well-known Nostr event kinds read or written by the engine.

    Attributes:
        SET_METADATA: Kind 0 -- user profile metadata (NIP-01). Older
            clients also store a ``relays`` field in its content.
        CONTACTS: Kind 3 -- contact list (NIP-02); ``p`` tags are the
            followed public keys.
        LABEL: Kind 1986 -- NIP-32 label, used for relay reviews.
        RELAY_LIST: Kind 10002 -- NIP-65 read/write relay list.
        BLOCKED_RELAYS: Kind 10006 -- NIP-51 blocked relays.
        SEARCH_RELAYS: Kind 10007 -- NIP-51 search relays.
        DM_RELAYS: Kind 10050 -- NIP-17 direct message relays.
        INDEXER_RELAYS: Kind 10086 -- indexer relays.
        PROXY_RELAYS: Kind 10087 -- proxy relays.
        BROADCAST_RELAYS: Kind 10088 -- broadcast relays.
        TRUSTED_RELAYS: Kind 10089 -- trusted relays.
    """

    SET_METADATA = 0
    CONTACTS = 3
    LABEL = 1986
    RELAY_LIST = 10_002
    BLOCKED_RELAYS = 10_006
    SEARCH_RELAYS = 10_007
    DM_RELAYS = 10_050
    INDEXER_RELAYS = 10_086
    PROXY_RELAYS = 10_087
    BROADCAST_RELAYS = 10_088
    TRUSTED_RELAYS = 10_089


EVENT_KIND_MAX = 65_535


class ServiceName(StrEnum):
    """Canonical service identifiers used in logging and metrics labels."""

    PROBER = "prober"
    AGGREGATOR = "aggregator"
    PUBLISHER = "publisher"
    REVIEWER = "reviewer"
    DIRECTORY = "directory"


class Category(StrEnum):
    """Functional role a relay can be assigned to by the user.

    The set is closed: every category belongs to exactly one
    [RelayList][relayoptimizer.models.constants.RelayList] publication unit.
    ``INBOX`` and ``OUTBOX`` share the NIP-65 record (kind 10002); every
    other category has its own record kind.
    """

    INBOX = "inbox"
    OUTBOX = "outbox"
    DM = "dm"
    SEARCH = "search"
    BLOCKED = "blocked"
    INDEXER = "indexer"
    PROXY = "proxy"
    BROADCAST = "broadcast"
    TRUSTED = "trusted"


class RelayList(StrEnum):
    """Publishable relay list, one signed record per member.

    Member order is the canonical publication and reporting order.

    Examples:
        ```python
        RelayList.NIP65.kind        # EventKind.RELAY_LIST
        RelayList.DM.label          # 'DM relays'
        RelayList.NIP65.categories  # (Category.INBOX, Category.OUTBOX)
        RelayList.for_category(Category.OUTBOX)  # RelayList.NIP65
        ```
    """

    NIP65 = "nip65"
    DM = "dm"
    SEARCH = "search"
    BLOCKED = "blocked"
    INDEXER = "indexer"
    PROXY = "proxy"
    BROADCAST = "broadcast"
    TRUSTED = "trusted"

    @property
    def kind(self) -> EventKind:
        """Event kind of the record carrying this list."""
        return _LIST_KINDS[self]

    @property
    def label(self) -> str:
        """Human-readable name used in error messages and summaries."""
        return _LIST_LABELS[self]

    @property
    def categories(self) -> tuple[Category, ...]:
        """Categories whose relays are stored in this list."""
        if self is RelayList.NIP65:
            return (Category.INBOX, Category.OUTBOX)
        return (Category(self.value),)

    @classmethod
    def for_category(cls, category: Category) -> RelayList:
        """Return the publication unit that stores *category*."""
        if category in (Category.INBOX, Category.OUTBOX):
            return cls.NIP65
        return cls(category.value)

    @classmethod
    def for_kind(cls, kind: int) -> RelayList | None:
        """Return the list published under *kind*, or ``None``."""
        for member in cls:
            if member.kind == kind:
                return member
        return None


_LIST_KINDS: dict[RelayList, EventKind] = {
    RelayList.NIP65: EventKind.RELAY_LIST,
    RelayList.DM: EventKind.DM_RELAYS,
    RelayList.SEARCH: EventKind.SEARCH_RELAYS,
    RelayList.BLOCKED: EventKind.BLOCKED_RELAYS,
    RelayList.INDEXER: EventKind.INDEXER_RELAYS,
    RelayList.PROXY: EventKind.PROXY_RELAYS,
    RelayList.BROADCAST: EventKind.BROADCAST_RELAYS,
    RelayList.TRUSTED: EventKind.TRUSTED_RELAYS,
}

_LIST_LABELS: dict[RelayList, str] = {
    RelayList.NIP65: "NIP-65",
    RelayList.DM: "DM relays",
    RelayList.SEARCH: "Search relays",
    RelayList.BLOCKED: "Blocked relays",
    RelayList.INDEXER: "Indexer relays",
    RelayList.PROXY: "Proxy relays",
    RelayList.BROADCAST: "Broadcast relays",
    RelayList.TRUSTED: "Trusted relays",
}


class IdentityRecord(StrEnum):
    """Identity records re-broadcast alongside relay lists."""

    PROFILE = "profile"
    CONTACT_LIST = "contact_list"

    @property
    def kind(self) -> EventKind:
        """Event kind of the record."""
        if self is IdentityRecord.PROFILE:
            return EventKind.SET_METADATA
        return EventKind.CONTACTS

    @property
    def label(self) -> str:
        """Human-readable name used in error messages."""
        return "Profile" if self is IdentityRecord.PROFILE else "Contact list"


class RelayState(StrEnum):
    """Health state of a probed relay.

    Lifecycle: ``UNKNOWN`` -> ``TESTING`` at probe start -> one of
    ``GOOD``, ``OK``, ``BAD`` when the probe settles. Re-probing restarts
    the cycle.
    """

    UNKNOWN = "unknown"
    TESTING = "testing"
    GOOD = "good"
    OK = "ok"
    BAD = "bad"


class Provenance(StrEnum):
    """Where a contact's relay usage was discovered.

    Attributes:
        NIP65: From the contact's kind 10002 relay list.
        PROFILE: From the legacy ``relays`` field of the kind 0 profile.
        BOTH: From both sources.
    """

    NIP65 = "nip65"
    PROFILE = "profile"
    BOTH = "both"

    def merge(self, other: Provenance) -> Provenance:
        """Combine two provenances; differing sources yield ``BOTH``."""
        return self if self is other else Provenance.BOTH


__all__ = [
    "EVENT_KIND_MAX",
    "Category",
    "EventKind",
    "IdentityRecord",
    "Provenance",
    "RelayList",
    "RelayState",
    "ServiceName",
]
