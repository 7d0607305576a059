"""
Relay health status and latency classification.

[RelayStatus][relayoptimizer.models.status.RelayStatus] is the value stored
per identity in the [StatusMap][relayoptimizer.core.status_map.StatusMap]
and returned by the [Prober][relayoptimizer.services.prober.Prober]. The
latency helpers turn a round-trip time into a
[RelayState][relayoptimizer.models.constants.RelayState] bucket and a short
human description.

Examples:
    ```python
    categorize_latency(50)    # RelayState.GOOD
    categorize_latency(250)   # RelayState.OK
    categorize_latency(None)  # RelayState.BAD
    describe_latency(180)     # 'Pretty good'
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .constants import RelayState
from .relay_url import canonicalize, display_url


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


GOOD_LATENCY_MS = 100
OK_LATENCY_MS = 300

_LATENCY_DESCRIPTIONS: tuple[tuple[int, str], ...] = (
    (50, "Lightning fast!"),
    (100, "Super quick"),
    (200, "Pretty good"),
    (300, "Decent"),
    (500, "A bit slow"),
)


def categorize_latency(latency_ms: int | None) -> RelayState:
    """Bucket a latency into a terminal state.

    ``< 100`` is good, ``< 300`` is ok, anything slower or unreachable
    (``None``) is bad.
    """
    if latency_ms is None:
        return RelayState.BAD
    if latency_ms < GOOD_LATENCY_MS:
        return RelayState.GOOD
    if latency_ms < OK_LATENCY_MS:
        return RelayState.OK
    return RelayState.BAD


def describe_latency(latency_ms: int | None) -> str:
    """Short description of a latency for display."""
    if latency_ms is None:
        return "Unreachable"
    for bound, text in _LATENCY_DESCRIPTIONS:
        if latency_ms < bound:
            return text
    return "Quite slow"


@dataclass(frozen=True, slots=True)
class RelayStatus:
    """Health snapshot of one relay.

    Attributes:
        identity: Canonical relay URL (map key).
        display_url: Identity without scheme, for display.
        state: Current [RelayState][relayoptimizer.models.constants.RelayState].
        latency_ms: Round-trip time of the last successful probe, or ``None``.
        info: Parsed NIP-11 document as a read-only mapping, or ``None``
            when the relay served none or it could not be parsed.
        tested_at: Unix timestamp of the last settled probe, or ``None``.
    """

    identity: str
    display_url: str
    state: RelayState = RelayState.UNKNOWN
    latency_ms: int | None = None
    info: Mapping[str, Any] | None = None
    tested_at: int | None = None

    def __post_init__(self) -> None:
        if self.info is not None and not isinstance(self.info, MappingProxyType):
            object.__setattr__(self, "info", MappingProxyType(dict(self.info)))

    @classmethod
    def unknown(cls, url: str) -> RelayStatus:
        """Initial status for a relay that was never probed."""
        return cls(identity=canonicalize(url), display_url=display_url(url))

    def testing(self) -> RelayStatus:
        """Copy of this status in the ``TESTING`` state.

        Previous latency and info are kept so readers can still show the
        last known values while the new probe is in flight.
        """
        return replace(self, state=RelayState.TESTING)

    @property
    def is_reachable(self) -> bool:
        """Whether the last settled probe reached the relay."""
        return self.latency_ms is not None

    @property
    def description(self) -> str:
        """Latency description, see [describe_latency][relayoptimizer.models.status.describe_latency]."""
        return describe_latency(self.latency_ms)


def sort_by_latency(statuses: Iterable[RelayStatus]) -> list[RelayStatus]:
    """Sort statuses fastest first; unreachable relays go last, order kept."""
    return sorted(
        statuses,
        key=lambda s: (s.latency_ms is None, s.latency_ms or 0),
    )


__all__ = [
    "GOOD_LATENCY_MS",
    "OK_LATENCY_MS",
    "RelayStatus",
    "categorize_latency",
    "describe_latency",
    "sort_by_latency",
]
