"""Kind 3 contact lists."""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from relayoptimizer.models.event import Event


def extract_contacts(event: Event) -> list[str]:
    """Followed public keys (``p`` tag values) in order, without duplicates or blanks."""
    seen: set[str] = set()
    contacts: list[str] = []
    for pubkey in event.tag_values("p"):
        pubkey = pubkey.strip()
        if not pubkey or pubkey in seen:
            continue
        seen.add(pubkey)
        contacts.append(pubkey)
    return contacts


__all__ = ["extract_contacts"]
