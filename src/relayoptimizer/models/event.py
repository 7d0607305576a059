"""
Immutable Nostr event with tag helpers.

A transport-independent view of a signed record. The
[NostrTransport][relayoptimizer.utils.transport.NostrTransport] converts
``nostr_sdk.Event`` objects to and from this model through the NIP-01 JSON
form ([from_dict()][relayoptimizer.models.event.Event.from_dict] and
[to_dict()][relayoptimizer.models.event.Event.to_dict]), so the services
and their tests never touch SDK objects directly.

See Also:
    [EventFilter][relayoptimizer.models.filter.EventFilter]: Query filter
        selecting events by kind, author, and tag values.
    [EventKind][relayoptimizer.models.constants.EventKind]: Well-known kinds
        handled by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .constants import EVENT_KIND_MAX


Tag = tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Event:
    """Signed Nostr event.

    Tags are normalized to a tuple of string tuples on construction so
    that the instance is fully immutable.

    Attributes:
        id: Hex event id.
        pubkey: Hex public key of the author.
        created_at: Unix timestamp in seconds.
        kind: Event kind (0-65535).
        tags: Tag arrays, each a tuple of strings.
        content: Event content.
        sig: Hex Schnorr signature (empty for unsigned fixtures).

    Raises:
        ValueError: If ``kind`` or ``created_at`` is out of range.
    """

    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: tuple[Tag, ...] = field(default_factory=tuple)
    content: str = ""
    sig: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.kind <= EVENT_KIND_MAX:
            raise ValueError(f"kind must be between 0 and {EVENT_KIND_MAX}, got {self.kind}")
        if self.created_at < 0:
            raise ValueError(f"created_at must be non-negative, got {self.created_at}")
        object.__setattr__(
            self,
            "tags",
            tuple(tuple(str(v) for v in tag) for tag in self.tags),
        )

    def tag_values(self, name: str) -> list[str]:
        """Return the first value of every tag named *name*, in order.

        Tags without a value (``["r"]``) are skipped.
        """
        return [tag[1] for tag in self.tags if len(tag) >= 2 and tag[0] == name]  # noqa: PLR2004

    def tags_named(self, name: str) -> list[Tag]:
        """Return every tag whose first element is *name*."""
        return [tag for tag in self.tags if tag and tag[0] == name]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        """Build an event from its NIP-01 JSON object.

        Raises:
            KeyError: If a required key is missing.
            ValueError: If a value has the wrong type or range.
        """
        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise ValueError("tags must be a list")
        return cls(
            id=str(data["id"]),
            pubkey=str(data["pubkey"]),
            created_at=int(data["created_at"]),
            kind=int(data["kind"]),
            tags=tuple(tuple(t) for t in tags if isinstance(t, list)),
            content=str(data.get("content", "")),
            sig=str(data.get("sig", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the NIP-01 JSON object."""
        return {
            "id": self.id,
            "pubkey": self.pubkey,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
            "sig": self.sig,
        }


def newest(events: list[Event]) -> Event | None:
    """Return the most recent event, or ``None`` for an empty list.

    Ties on ``created_at`` resolve to the lowest event id, as NIP-01
    prescribes for replaceable events.
    """
    if not events:
        return None
    return min(events, key=lambda e: (-e.created_at, e.id))


__all__ = ["Event", "Tag", "newest"]
