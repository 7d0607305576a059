"""Pure frozen dataclasses and enums with zero I/O.

The models layer is the foundation of the diamond DAG. It depends on no
other relayoptimizer package, only on the standard library and ``rfc3986``
for URL parsing. Every model is a ``@dataclass(frozen=True, slots=True)``;
computed fields are set with ``object.__setattr__`` in ``__post_init__``.

Attributes:
    canonicalize: Canonical relay identity used for equality and dedup.
        See [relayoptimizer.models.relay_url][].
    Event: Transport-independent signed Nostr event.
    EventFilter: NIP-01 subscription filter.
    RelayStatus: Health snapshot of one relay produced by the prober.
    RelaySuggestion: Relay used by the subject's contacts, ranked by the
        aggregator.
    RelayLists: The subject's relays per
        [Category][relayoptimizer.models.constants.Category].
    PublicationOutcome: Per-list result of a publication run.
    RelayReview: A kind 1986 relay review.

See Also:
    [relayoptimizer.nips][]: NIP-11, NIP-65/51 and NIP-32 helpers built on
        these models.
    [relayoptimizer.services][]: Services that produce and consume them.
"""

from .constants import (
    EVENT_KIND_MAX,
    Category,
    EventKind,
    IdentityRecord,
    Provenance,
    RelayList,
    RelayState,
    ServiceName,
)
from .event import Event, Tag, newest
from .filter import EventFilter
from .relay_lists import PublicationOutcome, RelayLists
from .relay_url import (
    canonicalize,
    deduplicate,
    display_url,
    http_url,
    is_valid_relay_url,
    same_relay,
)
from .review import (
    RelayReview,
    ReviewSummary,
    normalize_rating,
    rating_to_stars,
    stars_to_rating,
)
from .status import RelayStatus, categorize_latency, describe_latency, sort_by_latency
from .suggestion import AggregationResult, ContactRelayUsage, RelaySuggestion


__all__ = [
    "EVENT_KIND_MAX",
    "AggregationResult",
    "Category",
    "ContactRelayUsage",
    "Event",
    "EventFilter",
    "EventKind",
    "IdentityRecord",
    "Provenance",
    "PublicationOutcome",
    "RelayList",
    "RelayLists",
    "RelayReview",
    "RelayState",
    "RelayStatus",
    "RelaySuggestion",
    "ReviewSummary",
    "ServiceName",
    "Tag",
    "canonicalize",
    "categorize_latency",
    "deduplicate",
    "describe_latency",
    "display_url",
    "http_url",
    "is_valid_relay_url",
    "newest",
    "normalize_rating",
    "rating_to_stars",
    "same_relay",
    "sort_by_latency",
    "stars_to_rating",
]
