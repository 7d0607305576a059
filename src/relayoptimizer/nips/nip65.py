"""
Relay list tags: NIP-65 read/write lists and NIP-51 style relay sets.

Tag shapes (bit-exact, other clients depend on them):

| list | kind | tags |
|---|---|---|
| read/write (NIP-65) | 10002 | ``["r", url]`` both, ``["r", url, "read"]``, ``["r", url, "write"]`` |
| DM, search, blocked, indexer, proxy, broadcast, trusted | 10050, 10007, 10006, 10086-10089 | ``["relay", url]`` |

Builders deduplicate by relay identity and keep the first raw URL. Parsers
canonicalize every URL and drop values that are not ws/wss URLs.

Examples:
    ```python
    tags = build_relay_list_tags(["wss://a.com", "wss://b.com"], ["wss://b.com/", "wss://c.com"])
    # [['r', 'wss://a.com', 'read'], ['r', 'wss://b.com'], ['r', 'wss://c.com', 'write']]
    parse_relay_list_tags(tags)
    # (['wss://a.com', 'wss://b.com'], ['wss://b.com', 'wss://c.com'])
    ```
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from relayoptimizer.models.constants import Category, RelayList
from relayoptimizer.models.relay_lists import RelayLists
from relayoptimizer.models.relay_url import canonicalize, is_valid_relay_url


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from relayoptimizer.models.event import Event


logger = logging.getLogger("relayoptimizer.nips.nip65")

READ = "read"
WRITE = "write"


def build_relay_list_tags(inbox: Iterable[str], outbox: Iterable[str]) -> list[list[str]]:
    """Reconcile read (inbox) and write (outbox) relays into ``r`` tags.

    Inbox relays come first, marked ``read`` unless they are also outbox
    relays (then unmarked). Outbox-only relays follow, marked ``write``.
    """
    outbox_list = list(outbox)
    write_ids = {canonicalize(url) for url in outbox_list}
    seen: set[str] = set()
    tags: list[list[str]] = []

    for url in inbox:
        identity = canonicalize(url)
        if identity in seen:
            continue
        seen.add(identity)
        tags.append(["r", url] if identity in write_ids else ["r", url, READ])

    for url in outbox_list:
        identity = canonicalize(url)
        if identity in seen:
            continue
        seen.add(identity)
        tags.append(["r", url, WRITE])

    return tags


def parse_relay_list_tags(tags: Iterable[Sequence[str]]) -> tuple[list[str], list[str]]:
    """Split ``r`` tags into ``(read, write)`` identity lists.

    An unmarked tag counts for both; unknown markers are ignored.
    """
    read: list[str] = []
    write: list[str] = []
    for tag in tags:
        if len(tag) < 2 or tag[0] != "r" or not is_valid_relay_url(tag[1]):  # noqa: PLR2004
            continue
        identity = canonicalize(tag[1])
        marker = tag[2] if len(tag) > 2 else None  # noqa: PLR2004
        if marker in (None, "", READ) and identity not in read:
            read.append(identity)
        if marker in (None, "", WRITE) and identity not in write:
            write.append(identity)
    return read, write


def build_relay_set_tags(urls: Iterable[str]) -> list[list[str]]:
    """One ``["relay", url]`` tag per identity, first raw URL kept."""
    seen: set[str] = set()
    tags: list[list[str]] = []
    for url in urls:
        identity = canonicalize(url)
        if identity in seen:
            continue
        seen.add(identity)
        tags.append(["relay", url])
    return tags


def parse_relay_set_tags(tags: Iterable[Sequence[str]]) -> list[str]:
    """Identities listed in ``relay`` tags, in order, without duplicates."""
    result: list[str] = []
    for tag in tags:
        if len(tag) < 2 or tag[0] != "relay" or not is_valid_relay_url(tag[1]):  # noqa: PLR2004
            continue
        identity = canonicalize(tag[1])
        if identity not in result:
            result.append(identity)
    return result


def client_tag(name: str) -> list[str]:
    """Client attribution tag (NIP-89 ``client``)."""
    return ["client", name]


def build_tags(relay_list: RelayList, lists: RelayLists) -> list[list[str]]:
    """Tags of the record publishing *relay_list* from *lists*."""
    if relay_list is RelayList.NIP65:
        return build_relay_list_tags(lists.get(Category.INBOX), lists.get(Category.OUTBOX))
    return build_relay_set_tags(lists.get(relay_list.categories[0]))


def lists_from_events(events: Iterable[Event]) -> tuple[RelayLists, set[RelayList]]:
    """Parse relay list records into [RelayLists][relayoptimizer.models.relay_lists.RelayLists].

    The newest record per list kind wins. Records of other kinds are
    ignored.

    Returns:
        The parsed lists and the set of lists for which a record was found
        (an empty record still counts as found).
    """
    newest: dict[RelayList, Event] = {}
    for event in events:
        relay_list = RelayList.for_kind(event.kind)
        if relay_list is None:
            continue
        current = newest.get(relay_list)
        if current is None or (event.created_at, current.id) > (current.created_at, event.id):
            newest[relay_list] = event

    lists = RelayLists()
    for relay_list, event in newest.items():
        if relay_list is RelayList.NIP65:
            read, write = parse_relay_list_tags(event.tags)
            lists = lists.with_category(Category.INBOX, read).with_category(Category.OUTBOX, write)
        else:
            lists = lists.with_category(relay_list.categories[0], parse_relay_set_tags(event.tags))
        logger.debug("relay_list_parsed kind=%s event=%s", event.kind, event.id)

    return lists, set(newest)


__all__ = [
    "READ",
    "WRITE",
    "build_relay_list_tags",
    "build_relay_set_tags",
    "build_tags",
    "client_tag",
    "lists_from_events",
    "parse_relay_list_tags",
    "parse_relay_set_tags",
]
