"""Nostr Implementation Possibilities -- protocol-specific fetch and parse logic.

The NIPs layer sits in the middle of the diamond DAG, depending on
[relayoptimizer.models][relayoptimizer.models] and
[relayoptimizer.utils][relayoptimizer.utils]. Only the NIP-11 fetch performs
I/O; every other module turns tags and content into models and back.

Warning:
    [Nip11Metadata.execute()][relayoptimizer.nips.nip11.info.Nip11Metadata.execute]
    **never raises** for network failures. Always check ``logs.success`` on
    the returned metadata.

Attributes:
    Nip11Metadata: Fetches a relay's NIP-11 document over HTTP(S) with
        ``Accept: application/nostr+json`` and a 64 KB body cap.
    Nip11Data: Leniently parsed relay information document.
    ProfileData: Kind 0 profile content, including the legacy ``relays``
        field.
    extract_contacts: Followed public keys of a kind 3 contact list.
    build_relay_list_tags, parse_relay_list_tags: NIP-65 ``r`` tags.
    build_relay_set_tags, parse_relay_set_tags: ``relay`` tags of the
        other relay lists.
    build_review_tags, parse_review: NIP-32 relay reviews.
"""

from relayoptimizer.nips.base import BaseData, BaseLogs, BaseMetadata
from relayoptimizer.nips.nip01 import ProfileData
from relayoptimizer.nips.nip02 import extract_contacts
from relayoptimizer.nips.nip11 import Nip11Data, Nip11Logs, Nip11Metadata
from relayoptimizer.nips.nip32 import build_review_tags, parse_review
from relayoptimizer.nips.nip65 import (
    build_relay_list_tags,
    build_relay_set_tags,
    build_tags,
    client_tag,
    lists_from_events,
    parse_relay_list_tags,
    parse_relay_set_tags,
)
from relayoptimizer.nips.parsing import FieldSpec, parse_fields


__all__ = [
    "BaseData",
    "BaseLogs",
    "BaseMetadata",
    "FieldSpec",
    "Nip11Data",
    "Nip11Logs",
    "Nip11Metadata",
    "ProfileData",
    "build_relay_list_tags",
    "build_relay_set_tags",
    "build_review_tags",
    "build_tags",
    "client_tag",
    "extract_contacts",
    "lists_from_events",
    "parse_fields",
    "parse_relay_list_tags",
    "parse_relay_set_tags",
    "parse_review",
]
