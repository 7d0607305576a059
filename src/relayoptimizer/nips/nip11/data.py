"""
NIP-11 relay information document models.

Typed, fully optional view of a relay's self-description: identification,
policy URLs, supported NIPs, server limitations, and fee schedule. Parsing
is lenient: wrong-typed values are dropped and the rest of the document is
kept, so a sloppy document degrades field by field instead of failing.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import StrictBool, StrictInt

from relayoptimizer.nips.base import BaseData
from relayoptimizer.nips.parsing import FieldSpec


class Nip11Limitation(BaseData):
    """Server-imposed limitations advertised in the document."""

    max_message_length: StrictInt | None = None
    max_subscriptions: StrictInt | None = None
    max_limit: StrictInt | None = None
    max_subid_length: StrictInt | None = None
    max_event_tags: StrictInt | None = None
    max_content_length: StrictInt | None = None
    min_pow_difficulty: StrictInt | None = None
    auth_required: StrictBool | None = None
    payment_required: StrictBool | None = None
    restricted_writes: StrictBool | None = None

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        int_fields=frozenset(
            {
                "max_message_length",
                "max_subscriptions",
                "max_limit",
                "max_subid_length",
                "max_event_tags",
                "max_content_length",
                "min_pow_difficulty",
            }
        ),
        bool_fields=frozenset({"auth_required", "payment_required", "restricted_writes"}),
    )


class Nip11FeeEntry(BaseData):
    """One admission, subscription, or publication fee."""

    amount: StrictInt | None = None
    unit: str | None = None
    period: StrictInt | None = None
    kinds: list[StrictInt] | None = None

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        int_fields=frozenset({"amount", "period"}),
        str_fields=frozenset({"unit"}),
        int_list_fields=frozenset({"kinds"}),
    )


class Nip11Fees(BaseData):
    """Fee schedule grouped by fee type."""

    admission: list[Nip11FeeEntry] | None = None
    subscription: list[Nip11FeeEntry] | None = None
    publication: list[Nip11FeeEntry] | None = None

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            return {}
        result: dict[str, Any] = {}
        for key in ("admission", "subscription", "publication"):
            raw = data.get(key)
            if not isinstance(raw, list):
                continue
            entries = [entry for entry in (Nip11FeeEntry.parse(e) for e in raw) if entry]
            if entries:
                result[key] = entries
        return result


class Nip11Data(BaseData):
    """Complete relay information document.

    ``limitation`` and ``fees`` are ``None`` when the relay omits them or
    when nothing in them survives parsing.

    Examples:
        ```python
        info = Nip11Data.from_raw({"name": "Damus", "supported_nips": [1, "x", 11]})
        info.name            # 'Damus'
        info.supported_nips  # [1, 11]
        info.supports(11)    # True
        ```
    """

    name: str | None = None
    description: str | None = None
    banner: str | None = None
    icon: str | None = None
    pubkey: str | None = None
    contact: str | None = None
    software: str | None = None
    version: str | None = None

    privacy_policy: str | None = None
    terms_of_service: str | None = None
    posting_policy: str | None = None
    payments_url: str | None = None

    supported_nips: list[StrictInt] | None = None
    limitation: Nip11Limitation | None = None
    fees: Nip11Fees | None = None

    relay_countries: list[str] | None = None
    language_tags: list[str] | None = None
    tags: list[str] | None = None

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        str_fields=frozenset(
            {
                "name",
                "description",
                "banner",
                "icon",
                "pubkey",
                "contact",
                "software",
                "version",
                "privacy_policy",
                "terms_of_service",
                "posting_policy",
                "payments_url",
            }
        ),
        int_list_fields=frozenset({"supported_nips"}),
        str_list_fields=frozenset({"relay_countries", "language_tags", "tags"}),
    )

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        """Parse flat fields plus the nested ``limitation`` and ``fees`` objects."""
        if not isinstance(data, dict):
            return {}
        result = super().parse(data)

        limitation = Nip11Limitation.parse(data.get("limitation"))
        if limitation:
            result["limitation"] = limitation
        fees = Nip11Fees.parse(data.get("fees"))
        if fees:
            result["fees"] = fees
        return result

    def supports(self, nip: int) -> bool:
        """Whether the relay lists *nip* in ``supported_nips``."""
        return nip in (self.supported_nips or [])

    @property
    def auth_required(self) -> bool:
        return bool(self.limitation and self.limitation.auth_required)

    @property
    def payment_required(self) -> bool:
        return bool(self.limitation and self.limitation.payment_required)


__all__ = ["Nip11Data", "Nip11FeeEntry", "Nip11Fees", "Nip11Limitation"]
