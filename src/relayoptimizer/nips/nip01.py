"""
Kind 0 profile metadata.

The content of a kind 0 event is a JSON object written by arbitrary
clients. [ProfileData][relayoptimizer.nips.nip01.ProfileData] keeps the
fields used for contact cards and the legacy ``relays`` field that older
clients stored in the profile before NIP-65 existed. The legacy field is
either an object keyed by relay URL (``{"wss://a.com": {"read": true}}``)
or a plain list of URLs; both forms are accepted.

See Also:
    [Aggregator][relayoptimizer.services.aggregator.Aggregator]: Reads the
        legacy relays as a second discovery source.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, ClassVar

from relayoptimizer.models.relay_url import canonicalize, is_valid_relay_url

from .base import BaseData
from .parsing import FieldSpec, parse_fields


if TYPE_CHECKING:
    from relayoptimizer.models.event import Event


logger = logging.getLogger("relayoptimizer.nips.nip01")


def _legacy_relays(value: Any) -> list[str]:
    if isinstance(value, dict):
        candidates = list(value)
    elif isinstance(value, list):
        candidates = value
    else:
        return []

    result: list[str] = []
    for url in candidates:
        if not isinstance(url, str) or not is_valid_relay_url(url):
            continue
        identity = canonicalize(url)
        if identity not in result:
            result.append(identity)
    return result


class ProfileData(BaseData):
    """Leniently parsed kind 0 profile content.

    Attributes:
        name: Short handle.
        display_name: Preferred display name.
        picture: Avatar URL.
        about: Free-form description.
        nip05: NIP-05 identifier.
        relays: Canonical identities from the legacy ``relays`` field.
    """

    name: str | None = None
    display_name: str | None = None
    picture: str | None = None
    about: str | None = None
    nip05: str | None = None
    relays: tuple[str, ...] = ()

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        str_fields=frozenset({"name", "display_name", "picture", "about", "nip05"}),
    )

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            return {}
        result = parse_fields(data, cls._FIELD_SPEC)
        relays = _legacy_relays(data.get("relays"))
        if relays:
            result["relays"] = tuple(relays)
        return result

    @classmethod
    def from_event(cls, event: Event) -> ProfileData:
        """Parse the content of a kind 0 event; invalid JSON yields an empty profile."""
        try:
            content = json.loads(event.content)
        except ValueError:
            logger.debug("profile_content_invalid event=%s", event.id)
            content = None
        return cls.from_raw(content)

    @property
    def display(self) -> str | None:
        """``display_name``, falling back to ``name``; blank values count as missing."""
        for value in (self.display_name, self.name):
            if value and value.strip():
                return value.strip()
        return None


__all__ = ["ProfileData"]
