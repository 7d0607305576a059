"""
Relay URL identity: canonical keys for equality and deduplication.

Two raw URLs denote the same relay when their canonical forms match.
Canonicalization parses the URL with RFC 3986, lowercases the scheme and
host, drops the scheme-default port, and strips trailing slashes from the
path. It never raises: unparsable input degrades to a lowercase/trim
heuristic so that callers can always obtain an identity.

Examples:
    ```python
    canonicalize("wss://Relay.Example.com:443/")  # 'wss://relay.example.com'
    same_relay("wss://a.com", "WSS://A.COM/")     # True
    deduplicate(["wss://a.com", "wss://a.com/"])  # ['wss://a.com']
    display_url("wss://relay.damus.io/")          # 'relay.damus.io'
    http_url("wss://relay.damus.io")              # 'https://relay.damus.io'
    ```

Note:
    Canonicalization is idempotent: ``canonicalize(canonicalize(u))`` equals
    ``canonicalize(u)`` for every string. When the heuristic fallback
    happens to produce a parsable URL, that URL is canonicalized once more
    so the result is always a fixed point.

See Also:
    [relayoptimizer.services.prober][]: Keys the status map by identity.
    [relayoptimizer.services.aggregator][]: Counts contacts per identity.
    [relayoptimizer.nips.nip65][]: Deduplicates relay list tags by identity.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, NamedTuple

from rfc3986 import uri_reference
from rfc3986.exceptions import RFC3986Exception
from rfc3986.validators import Validator


if TYPE_CHECKING:
    from collections.abc import Iterable


RELAY_SCHEMES = frozenset({"ws", "wss"})

_DEFAULT_PORTS: dict[str, int] = {"ws": 80, "wss": 443, "http": 80, "https": 443}
_HTTP_SCHEMES: dict[str, str] = {"wss": "https", "ws": "http"}
_TRAILING_JUNK = re.compile(r"[\s/]+$")
_SCHEME_PREFIX = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


class _Parts(NamedTuple):
    scheme: str
    authority: str
    rest: str


def _parse(raw: str) -> _Parts | None:
    """Split *raw* into canonical components, or ``None`` if invalid."""
    try:
        uri = uri_reference(raw).normalize()
        Validator().require_presence_of("scheme", "host").check_validity_of(
            "scheme", "host", "port"
        ).validate(uri)
    except (RFC3986Exception, ValueError):
        return None

    scheme = (uri.scheme or "").lower()
    host = (uri.host or "").lower()
    if not scheme or not host:
        return None

    authority = host
    if uri.userinfo:
        authority = f"{uri.userinfo}@{host}"
    if uri.port and int(uri.port) != _DEFAULT_PORTS.get(scheme):
        authority = f"{authority}:{int(uri.port)}"

    rest = (uri.path or "").rstrip("/")
    if uri.query:
        rest += f"?{uri.query}"
    if uri.fragment:
        rest += f"#{uri.fragment}"

    return _Parts(scheme, authority, rest)


def _format(parts: _Parts) -> str:
    return f"{parts.scheme}://{parts.authority}{parts.rest}"


def canonicalize(url: str) -> str:
    """Return the canonical identity of a relay URL.

    Args:
        url: Raw URL as typed by a user or found in a tag.

    Returns:
        The canonical identity string. Never raises.
    """
    raw = url.strip()
    parts = _parse(raw)
    if parts is not None:
        return _format(parts)

    fallback = _TRAILING_JUNK.sub("", raw.lower())
    reparsed = _parse(fallback)
    return _format(reparsed) if reparsed is not None else fallback


def is_valid_relay_url(url: str) -> bool:
    """Whether *url* is a well-formed ``ws://`` or ``wss://`` URL with a host."""
    parts = _parse(url.strip())
    return parts is not None and parts.scheme in RELAY_SCHEMES


def same_relay(a: str, b: str) -> bool:
    """Whether two raw URLs denote the same relay."""
    return canonicalize(a) == canonicalize(b)


def deduplicate(urls: Iterable[str]) -> list[str]:
    """Drop URLs whose identity was already seen.

    The first raw form of each identity is kept and input order is
    preserved.
    """
    seen: set[str] = set()
    result: list[str] = []
    for url in urls:
        identity = canonicalize(url)
        if identity in seen:
            continue
        seen.add(identity)
        result.append(url)
    return result


def display_url(url: str) -> str:
    """Identity without its scheme prefix, for compact display."""
    return _SCHEME_PREFIX.sub("", canonicalize(url), count=1)


def http_url(url: str) -> str:
    """HTTP(S) URL serving the relay's NIP-11 document.

    ``wss`` maps to ``https`` and ``ws`` to ``http``; other schemes are
    returned unchanged.
    """
    identity = canonicalize(url)
    scheme, sep, rest = identity.partition("://")
    if not sep:
        return identity
    return f"{_HTTP_SCHEMES.get(scheme, scheme)}://{rest}"


__all__ = [
    "RELAY_SCHEMES",
    "canonicalize",
    "deduplicate",
    "display_url",
    "http_url",
    "is_valid_relay_url",
    "same_relay",
]
