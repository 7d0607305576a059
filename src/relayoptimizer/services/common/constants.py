"""Shared relay constants for relayoptimizer services.

Well-known relays used as query targets and defaults. Each tuple is in
preference order.
"""

from __future__ import annotations

from typing import Final


PURPLEPAGES: Final[str] = "wss://purplepag.es"

# Relays that index kind 0/3/10002 records for the whole network, tried in
# order by the aggregator before falling back to the transport's pool.
INDEXER_RELAYS: Final[tuple[str, ...]] = (
    PURPLEPAGES,
    "wss://indexer.coracle.social",
    "wss://user.kindpag.es",
)

# Relays queried for kind 1986 reviews in addition to the pool.
REVIEW_RELAYS: Final[tuple[str, ...]] = (
    "wss://relay.primal.net",
    "wss://relay.damus.io",
    "wss://nos.lol",
)

DEFAULT_DM_RELAYS: Final[tuple[str, ...]] = (
    "wss://auth.nostr1.com",
    "wss://relay.0xchat.com",
    "wss://inbox.nostr.wine",
)

DEFAULT_SEARCH_RELAYS: Final[tuple[str, ...]] = (
    "wss://nostr.wine",
    "wss://search.nos.today",
    "wss://relay.noswhere.com",
)

# Pool used by the CLI when no transport configuration is given.
DEFAULT_POOL: Final[tuple[str, ...]] = (
    "wss://relay.damus.io",
    "wss://nos.lol",
    "wss://relay.primal.net",
    PURPLEPAGES,
)

TOP_RELAYS_API: Final[str] = "https://api.nostr.watch/v1/online"


__all__ = [
    "DEFAULT_DM_RELAYS",
    "DEFAULT_POOL",
    "DEFAULT_SEARCH_RELAYS",
    "INDEXER_RELAYS",
    "PURPLEPAGES",
    "REVIEW_RELAYS",
    "TOP_RELAYS_API",
]
