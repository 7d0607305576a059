"""Shared constants and configuration models used across services."""

from .configs import TransportConfig, validate_relay_urls
from .constants import (
    DEFAULT_DM_RELAYS,
    DEFAULT_POOL,
    DEFAULT_SEARCH_RELAYS,
    INDEXER_RELAYS,
    PURPLEPAGES,
    REVIEW_RELAYS,
    TOP_RELAYS_API,
)


__all__ = [
    "DEFAULT_DM_RELAYS",
    "DEFAULT_POOL",
    "DEFAULT_SEARCH_RELAYS",
    "INDEXER_RELAYS",
    "PURPLEPAGES",
    "REVIEW_RELAYS",
    "TOP_RELAYS_API",
    "TransportConfig",
    "validate_relay_urls",
]
