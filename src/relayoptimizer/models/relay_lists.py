"""
Relay lists by category and the outcome of publishing them.

[RelayLists][relayoptimizer.models.relay_lists.RelayLists] holds the user's
relays for every [Category][relayoptimizer.models.constants.Category].
[PublicationOutcome][relayoptimizer.models.relay_lists.PublicationOutcome]
is the fixed-shape result of one
[Publisher.publish()][relayoptimizer.services.publisher.Publisher.publish]
call: one flag per attempted [RelayList][relayoptimizer.models.constants.RelayList]
plus an ordered error list. Outcomes are never merged across calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from .constants import Category, IdentityRecord, RelayList


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


@dataclass(frozen=True, slots=True)
class RelayLists:
    """The user's relays, one tuple of URLs per category.

    Field names match the [Category][relayoptimizer.models.constants.Category]
    values, so ``lists.get(Category.DM)`` and ``lists.dm`` are equivalent.
    """

    inbox: tuple[str, ...] = ()
    outbox: tuple[str, ...] = ()
    dm: tuple[str, ...] = ()
    search: tuple[str, ...] = ()
    blocked: tuple[str, ...] = ()
    indexer: tuple[str, ...] = ()
    proxy: tuple[str, ...] = ()
    broadcast: tuple[str, ...] = ()
    trusted: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, tuple(getattr(self, f.name)))

    @classmethod
    def from_mapping(cls, data: Mapping[Category | str, Iterable[str]]) -> RelayLists:
        """Build from a ``category -> urls`` mapping; unknown keys raise ``ValueError``."""
        return cls(**{Category(key).value: tuple(urls) for key, urls in data.items()})

    def get(self, category: Category) -> tuple[str, ...]:
        """Relays of *category*."""
        return getattr(self, Category(category).value)

    def with_category(self, category: Category, urls: Iterable[str]) -> RelayLists:
        """Copy with the relays of *category* replaced."""
        return replace(self, **{Category(category).value: tuple(urls)})

    def has_relays(self, relay_list: RelayList) -> bool:
        """Whether any category stored in *relay_list* is non-empty."""
        return any(self.get(c) for c in relay_list.categories)

    def non_empty(self) -> list[RelayList]:
        """Publication units with at least one relay, in canonical order."""
        return [rl for rl in RelayList if self.has_relays(rl)]

    @property
    def is_empty(self) -> bool:
        """Whether every category is empty."""
        return not self.non_empty()

    def to_dict(self) -> dict[str, list[str]]:
        """Serialize to ``{category: [urls]}`` for every category."""
        return {c.value: list(self.get(c)) for c in Category}


@dataclass(frozen=True, slots=True)
class PublicationOutcome:
    """Per-list result of one publication run.

    Attributes:
        results: ``True``/``False`` for every attempted list.
        errors: ``(list, message)`` pairs for failed lists, in
            [RelayList][relayoptimizer.models.constants.RelayList] order.
        broadcasts: ``True``/``False`` for every re-broadcast identity record.
    """

    results: Mapping[RelayList, bool] = field(default_factory=dict)
    errors: tuple[tuple[RelayList | IdentityRecord, str], ...] = ()
    broadcasts: Mapping[IdentityRecord, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "results", MappingProxyType(dict(self.results)))
        object.__setattr__(self, "broadcasts", MappingProxyType(dict(self.broadcasts)))
        object.__setattr__(self, "errors", tuple(self.errors))

    @property
    def succeeded(self) -> list[RelayList]:
        """Lists accepted by at least one relay."""
        return [rl for rl, ok in self.results.items() if ok]

    @property
    def failed(self) -> list[RelayList]:
        """Lists no relay accepted."""
        return [rl for rl, ok in self.results.items() if not ok]

    @property
    def ok(self) -> bool:
        """Whether every attempted list and identity record succeeded."""
        return all(self.results.values()) and all(self.broadcasts.values())

    def summary(self) -> str:
        """Combined success/partial-failure text for display.

        Examples:
            ```text
            Updated your NIP-65, DM relays.
            Failed: Search relays: All relays failed to accept the event. ...
            ```
        """
        lines: list[str] = []
        if self.succeeded:
            lines.append(f"Updated your {', '.join(rl.label for rl in self.succeeded)}.")
        if self.broadcasts and all(self.broadcasts.values()):
            lines.append("Your profile and contact list were synced to all relays.")
        lines.extend(f"Failed: {message}" for _, message in self.errors)
        return "\n".join(lines)


__all__ = ["PublicationOutcome", "RelayLists"]
