"""
NIP-32 relay reviews (kind 1986 labels).

A review labels one relay in the ``review`` namespace:

```text
["L", "review"]
["l", "review/relay", "review"]
["rating", "0.80"]
["r", "wss://relay.example.com"]
```

Older reviews carry ratings on a 0-5 scale; see
[normalize_rating][relayoptimizer.models.review.normalize_rating].

See Also:
    [Reviewer][relayoptimizer.services.reviewer.Reviewer]: Fetches and
        submits reviews.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from relayoptimizer.models.constants import EventKind
from relayoptimizer.models.relay_url import canonicalize, is_valid_relay_url
from relayoptimizer.models.review import RelayReview, normalize_rating


if TYPE_CHECKING:
    from relayoptimizer.models.event import Event


logger = logging.getLogger("relayoptimizer.nips.nip32")

REVIEW_NAMESPACE = "review"
RELAY_REVIEW_LABEL = "review/relay"


def build_review_tags(url: str, rating: float) -> list[list[str]]:
    """Tags of a relay review; *rating* is written with two decimals."""
    return [
        ["L", REVIEW_NAMESPACE],
        ["l", RELAY_REVIEW_LABEL, REVIEW_NAMESPACE],
        ["rating", f"{rating:.2f}"],
        ["r", canonicalize(url)],
    ]


def parse_review(event: Event) -> RelayReview | None:
    """Read a review from a kind 1986 event.

    Returns:
        The review, or ``None`` when the event has another kind or no
        valid ``r`` tag. A missing or unparsable rating defaults to 0.5.
    """
    if event.kind != EventKind.LABEL:
        return None

    relays = [url for url in event.tag_values("r") if is_valid_relay_url(url)]
    if not relays:
        return None

    raw_rating: float | None = None
    ratings = event.tag_values("rating")
    if ratings:
        try:
            raw_rating = float(ratings[0])
        except ValueError:
            logger.debug("review_rating_invalid event=%s value=%s", event.id, ratings[0])

    return RelayReview(
        id=event.id,
        relay=canonicalize(relays[0]),
        pubkey=event.pubkey,
        rating=normalize_rating(raw_rating),
        content=event.content,
        created_at=event.created_at,
    )


__all__ = ["RELAY_REVIEW_LABEL", "REVIEW_NAMESPACE", "build_review_tags", "parse_review"]
