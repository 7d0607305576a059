"""Aggregator service utility functions.

Pure helpers turning contact records into ranked relay suggestions. Nothing
here performs I/O, so the ranking rules are tested without a transport.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relayoptimizer.models.constants import EventKind, Provenance
from relayoptimizer.models.relay_url import canonicalize, display_url, is_valid_relay_url
from relayoptimizer.models.suggestion import AggregationResult, ContactRelayUsage, RelaySuggestion
from relayoptimizer.nips.nip01 import ProfileData


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from relayoptimizer.models.event import Event


RecordKey = tuple[str, int]


def batched(items: Sequence[str], size: int) -> list[list[str]]:
    """Split *items* into consecutive chunks of at most *size*."""
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def latest_records(events: Iterable[Event], authors: Iterable[str]) -> dict[RecordKey, Event]:
    """Newest record per ``(author, kind)`` among *authors*.

    Events are deduplicated by id first. Ties on ``created_at`` go to the
    lowest id.
    """
    wanted = set(authors)
    seen: set[str] = set()
    latest: dict[RecordKey, Event] = {}
    for event in events:
        if event.id in seen or event.pubkey not in wanted:
            continue
        seen.add(event.id)
        key = (event.pubkey, event.kind)
        current = latest.get(key)
        if current is None or (-event.created_at, event.id) < (-current.created_at, current.id):
            latest[key] = event
    return latest


def graph_relays(event: Event) -> list[str]:
    """Identities of the valid ``r`` tags of a kind 10002 record, in tag order."""
    result: list[str] = []
    for url in event.tag_values("r"):
        if not is_valid_relay_url(url):
            continue
        identity = canonicalize(url)
        if identity not in result:
            result.append(identity)
    return result


def contact_usage(
    pubkey: str,
    relay_list: Event | None,
    profile: Event | None,
) -> tuple[ContactRelayUsage, dict[str, Provenance]]:
    """Relay usage of one contact and the provenance of each of its relays.

    Graph relays come first, then legacy profile relays not already listed.
    """
    from_graph = graph_relays(relay_list) if relay_list is not None else []
    profile_data = ProfileData.from_event(profile) if profile is not None else ProfileData()
    from_profile = list(profile_data.relays)

    per_relay: dict[str, Provenance] = {}
    for identity in from_graph:
        per_relay[identity] = Provenance.NIP65
    for identity in from_profile:
        per_relay[identity] = (
            per_relay[identity].merge(Provenance.PROFILE)
            if identity in per_relay
            else Provenance.PROFILE
        )

    if from_graph and from_profile:
        provenance = Provenance.BOTH
    elif from_profile:
        provenance = Provenance.PROFILE
    else:
        provenance = Provenance.NIP65

    usage = ContactRelayUsage(
        pubkey=pubkey,
        relays=tuple(per_relay),
        provenance=provenance,
        display_name=profile_data.display,
        avatar_url=profile_data.picture,
    )
    return usage, per_relay


def rank_suggestions(
    contacts: Sequence[str],
    records: dict[RecordKey, Event],
    current_relays: Iterable[str],
) -> AggregationResult:
    """Build the ranked aggregation result.

    Args:
        contacts: Deduplicated contact public keys, in contact-list order.
        records: Output of [latest_records][relayoptimizer.services.aggregator.utils.latest_records].
        current_relays: The subject's relays, any raw form.

    Returns:
        Suggestions sorted by contact count (descending), ties kept in
        order of first discovery.
    """
    configured = {canonicalize(url) for url in current_relays}
    mentions: dict[str, dict[str, ContactRelayUsage]] = {}
    provenance: dict[str, Provenance] = {}
    analyzed = 0

    for pubkey in contacts:
        relay_list = records.get((pubkey, EventKind.RELAY_LIST))
        profile = records.get((pubkey, EventKind.SET_METADATA))
        if relay_list is None and profile is None:
            continue

        usage, per_relay = contact_usage(pubkey, relay_list, profile)
        # A profile counts only when it names relays.
        if relay_list is not None or per_relay:
            analyzed += 1
        for identity, source in per_relay.items():
            mentions.setdefault(identity, {})[pubkey] = usage
            provenance[identity] = (
                provenance[identity].merge(source) if identity in provenance else source
            )

    suggestions = [
        RelaySuggestion(
            identity=identity,
            display_url=display_url(identity),
            contacts=tuple(users.values()),
            provenance=provenance[identity],
            already_configured=identity in configured,
        )
        for identity, users in mentions.items()
    ]
    suggestions.sort(key=lambda s: -s.contact_count)

    return AggregationResult(
        suggestions=tuple(suggestions),
        contact_total=len(contacts),
        analyzed_total=analyzed,
    )


__all__ = [
    "RecordKey",
    "batched",
    "contact_usage",
    "graph_relays",
    "latest_records",
    "rank_suggestions",
]
