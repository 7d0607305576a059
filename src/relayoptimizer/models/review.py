"""Relay reviews and their per-relay summary."""

from __future__ import annotations

from dataclasses import dataclass, field


MAX_STARS = 5
DEFAULT_RATING = 0.5


def normalize_rating(value: float | None) -> float:
    """Map a raw ``rating`` tag value onto ``[0, 1]``.

    Missing values default to 0.5. Values above 1 are read as a five-star
    score and divided by 5. The result is clamped.
    """
    if value is None:
        return DEFAULT_RATING
    if value > 1:
        value = value / MAX_STARS
    return min(1.0, max(0.0, value))


def rating_to_stars(rating: float) -> int:
    """Convert a ``[0, 1]`` rating to a whole number of stars (0-5)."""
    return round(rating * MAX_STARS)


def stars_to_rating(stars: int) -> float:
    """Convert a star count to a ``[0, 1]`` rating."""
    return stars / MAX_STARS


@dataclass(frozen=True, slots=True)
class RelayReview:
    """One kind 1986 review of a relay.

    Attributes:
        id: Hex id of the review event.
        relay: Canonical identity of the reviewed relay.
        pubkey: Hex public key of the reviewer.
        rating: Normalized rating in ``[0, 1]``.
        content: Review text.
        created_at: Unix timestamp of the review.
    """

    id: str
    relay: str
    pubkey: str
    rating: float
    content: str
    created_at: int

    @property
    def stars(self) -> int:
        """Rating as stars."""
        return rating_to_stars(self.rating)


@dataclass(frozen=True, slots=True)
class ReviewSummary:
    """All known reviews of one relay, newest first."""

    relay: str
    reviews: tuple[RelayReview, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.reviews)

    @property
    def average_rating(self) -> float | None:
        """Mean rating, or ``None`` without reviews."""
        if not self.reviews:
            return None
        return sum(r.rating for r in self.reviews) / len(self.reviews)

    @property
    def average_stars(self) -> int | None:
        rating = self.average_rating
        return None if rating is None else rating_to_stars(rating)


__all__ = [
    "DEFAULT_RATING",
    "MAX_STARS",
    "RelayReview",
    "ReviewSummary",
    "normalize_rating",
    "rating_to_stars",
    "stars_to_rating",
]
