"""Publisher service utility functions.

Pure helpers for error formatting and identity record handling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from relayoptimizer.core.exceptions import AllRelaysRejectedError, RelayTimeoutError
from relayoptimizer.nips.nip65 import client_tag


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from relayoptimizer.models.event import Event


ALL_REJECTED_MESSAGE = (
    "All relays failed to accept the event. Please check your relay configuration."
)

# Messages some relay pools raise when every relay rejected an event.
_ALL_REJECTED_MARKERS: tuple[str, ...] = (
    "no promise in promise.any was resolved",
    "All promises were rejected",
)


class IdentityEvents(NamedTuple):
    """Newest profile (kind 0) and contact list (kind 3) of a user."""

    profile: Event | None = None
    contact_list: Event | None = None


def format_publish_error(error: BaseException, timeout: float | None = None) -> str:
    """Turn a publishing failure into a short user-facing message.

    Examples:
        ```python
        format_publish_error(AllRelaysRejectedError())
        # 'All relays failed to accept the event. Please check your relay configuration.'
        format_publish_error(TimeoutError(), timeout=10)
        # 'Timed out after 10s'
        ```
    """
    if isinstance(error, AllRelaysRejectedError):
        return ALL_REJECTED_MESSAGE

    message = str(error)
    if any(marker in message for marker in _ALL_REJECTED_MARKERS):
        return ALL_REJECTED_MESSAGE

    if isinstance(error, (TimeoutError, RelayTimeoutError)):
        if timeout is not None:
            return f"Timed out after {timeout:g}s"
        return message or "Timed out"

    return message or type(error).__name__


def with_client_tag(
    tags: Iterable[Sequence[str]],
    client_name: str | None,
) -> list[list[str]]:
    """Copy of *tags* without ``client`` tags, plus a new one when *client_name* is set."""
    result = [list(tag) for tag in tags if not tag or tag[0] != "client"]
    if client_name:
        result.append(client_tag(client_name))
    return result


__all__ = [
    "ALL_REJECTED_MESSAGE",
    "IdentityEvents",
    "format_publish_error",
    "with_client_tag",
]
