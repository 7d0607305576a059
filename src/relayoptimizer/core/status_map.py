"""
Owned, synchronized map of relay health statuses.

The [StatusMap][relayoptimizer.core.status_map.StatusMap] is the only
long-lived shared mutable state of the engine. Concurrent probes write to it
while UI collaborators read snapshots from it.

Contract:

* **Atomic per-key upsert** -- [upsert()][relayoptimizer.core.status_map.StatusMap.upsert]
  replaces the whole [RelayStatus][relayoptimizer.models.status.RelayStatus]
  of one identity under the lock. Readers never observe a partially
  written entry, and writes to one key never touch another.
* **Last writer wins** -- when two probes of the same relay overlap, the
  one that completes last determines the stored status.
* **Read-only snapshots** -- [snapshot()][relayoptimizer.core.status_map.StatusMap.snapshot]
  returns an immutable view of a copy; later writes do not affect it.

The lock is a ``threading.Lock``. Critical sections contain no suspension
point, so the map may also be read from a thread other than the event loop's.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import TYPE_CHECKING

from relayoptimizer.models.relay_url import canonicalize


if TYPE_CHECKING:
    from collections.abc import Mapping

    from relayoptimizer.models.status import RelayStatus


class StatusMap:
    """Thread-safe ``identity -> RelayStatus`` map.

    Examples:
        ```python
        statuses = StatusMap()
        statuses.upsert(RelayStatus.unknown("wss://relay.damus.io"))
        statuses.get("wss://Relay.Damus.io/")  # same identity
        view = statuses.snapshot()
        ```
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, RelayStatus] = {}

    def upsert(self, status: RelayStatus) -> None:
        """Store *status* under its identity, replacing any previous entry."""
        with self._lock:
            self._entries[status.identity] = status

    def replace_if(self, expected: RelayStatus, status: RelayStatus) -> bool:
        """Store *status* only if the entry is still the *expected* object.

        Returns:
            ``True`` if *status* was stored, ``False`` if another writer
            replaced *expected* in the meantime.
        """
        with self._lock:
            if self._entries.get(status.identity) is not expected:
                return False
            self._entries[status.identity] = status
            return True

    def get(self, url: str) -> RelayStatus | None:
        """Status of *url* (any raw form), or ``None`` if never recorded."""
        identity = canonicalize(url)
        with self._lock:
            return self._entries.get(identity)

    def remove(self, url: str) -> RelayStatus | None:
        """Drop the entry of *url* and return it."""
        identity = canonicalize(url)
        with self._lock:
            return self._entries.pop(identity, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def snapshot(self) -> Mapping[str, RelayStatus]:
        """Immutable copy of all entries."""
        with self._lock:
            return MappingProxyType(dict(self._entries))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, url: object) -> bool:
        if not isinstance(url, str):
            return False
        return self.get(url) is not None


__all__ = ["StatusMap"]
