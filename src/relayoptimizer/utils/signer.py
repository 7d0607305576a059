"""Event signing.

Services depend on the [Signer][relayoptimizer.utils.signer.Signer]
protocol, not on key material. [KeysSigner][relayoptimizer.utils.signer.KeysSigner]
signs locally with ``nostr_sdk`` keys; remote signers (browser extension,
NIP-46 bunker) implement the same two members.

See Also:
    [KeysConfig][relayoptimizer.utils.keys.KeysConfig]: Loads the keys from
        the environment.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from nostr_sdk import EventBuilder, Kind, Tag, Timestamp

from relayoptimizer.models.event import Event


if TYPE_CHECKING:
    from collections.abc import Sequence

    from nostr_sdk import Keys


@runtime_checkable
class Signer(Protocol):
    """Produces signed events for the subject."""

    @property
    def public_key(self) -> str:
        """Hex public key of the signing identity."""
        ...

    async def sign(
        self,
        kind: int,
        content: str,
        tags: Sequence[Sequence[str]],
        created_at: int,
    ) -> Event:
        """Sign an event with the given fields."""
        ...


class KeysSigner:
    """[Signer][relayoptimizer.utils.signer.Signer] backed by local ``nostr_sdk.Keys``.

    Examples:
        ```python
        signer = KeysSigner(load_keys_from_env())
        event = await signer.sign(10002, "", [["r", "wss://a.com"]], int(time.time()))
        ```
    """

    __slots__ = ("_keys",)

    def __init__(self, keys: Keys) -> None:
        self._keys = keys

    @property
    def public_key(self) -> str:
        return self._keys.public_key().to_hex()

    async def sign(
        self,
        kind: int,
        content: str,
        tags: Sequence[Sequence[str]],
        created_at: int,
    ) -> Event:
        builder = (
            EventBuilder(Kind(kind), content)
            .tags([Tag.parse(list(tag)) for tag in tags])
            .custom_created_at(Timestamp.from_secs(created_at))
        )
        signed = builder.sign_with_keys(self._keys)
        return Event.from_dict(json.loads(signed.as_json()))


__all__ = ["KeysSigner", "Signer"]
