"""Transport-independent NIP-01 subscription filter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class EventFilter:
    """Select events by kind, author, and single-letter tag values.

    Attributes:
        kinds: Event kinds to match (empty = any).
        authors: Hex public keys to match (empty = any).
        tags: Mapping of single-letter tag name to accepted values,
            serialized as ``#<name>`` (e.g. ``{"r": ("wss://a.com",)}``).
        limit: Maximum number of events to return, or ``None``.

    Examples:
        ```python
        EventFilter(kinds=(10002,), authors=(pubkey,), limit=1).to_dict()
        # {'kinds': [10002], 'authors': ['...'], 'limit': 1}
        ```
    """

    kinds: tuple[int, ...] = ()
    authors: tuple[str, ...] = ()
    tags: dict[str, tuple[str, ...]] = field(default_factory=dict, hash=False)
    limit: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kinds", tuple(int(k) for k in self.kinds))
        object.__setattr__(self, "authors", tuple(self.authors))
        for name in self.tags:
            if len(name) != 1:
                raise ValueError(f"tag filter name must be a single letter, got {name!r}")
        object.__setattr__(self, "tags", {k: tuple(v) for k, v in self.tags.items()})
        if self.limit is not None and self.limit < 0:
            raise ValueError(f"limit must be non-negative, got {self.limit}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the NIP-01 JSON filter object, omitting empty fields."""
        result: dict[str, Any] = {}
        if self.kinds:
            result["kinds"] = list(self.kinds)
        if self.authors:
            result["authors"] = list(self.authors)
        for name, values in self.tags.items():
            result[f"#{name}"] = list(values)
        if self.limit is not None:
            result["limit"] = self.limit
        return result


__all__ = ["EventFilter"]
