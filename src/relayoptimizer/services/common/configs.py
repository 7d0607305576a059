"""Shared configuration models for relayoptimizer services.

[TransportConfig][relayoptimizer.services.common.configs.TransportConfig]
describes the default relay pool and proxy of a
[NostrTransport][relayoptimizer.utils.transport.NostrTransport]. It is not a
service config: the CLI (or any host) builds one transport from it and
injects it into every service.

Examples:
    ```yaml
    transport:
      relays:
        - wss://relay.damus.io
        - wss://nos.lol
      proxy_url: socks5://127.0.0.1:9050
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

from relayoptimizer.models.relay_url import deduplicate, is_valid_relay_url

from .constants import DEFAULT_POOL


if TYPE_CHECKING:
    from relayoptimizer.utils.transport import NostrTransport


def validate_relay_urls(urls: list[str]) -> list[str]:
    """Reject invalid relay URLs and drop duplicate identities.

    Raises:
        ValueError: On the first URL that is not a ws/wss URL.
    """
    for url in urls:
        if not is_valid_relay_url(url):
            raise ValueError(f"invalid relay URL: {url!r}")
    return deduplicate(urls)


class TransportConfig(BaseModel):
    """Default relay pool and connection settings.

    See Also:
        [NostrTransport][relayoptimizer.utils.transport.NostrTransport]:
            Built from this config by
            [build()][relayoptimizer.services.common.configs.TransportConfig.build].
    """

    relays: list[str] = Field(
        default_factory=lambda: list(DEFAULT_POOL),
        min_length=1,
        description="Default relay pool",
    )
    proxy_url: str | None = Field(default=None, description="SOCKS5 proxy URL")
    connect_timeout: float = Field(
        default=5.0, ge=0.1, le=60.0, description="Relay connection timeout in seconds"
    )

    @field_validator("relays")
    @classmethod
    def _validate_relays(cls, v: list[str]) -> list[str]:
        return validate_relay_urls(v)

    def build(self) -> NostrTransport:
        """Create the transport described by this config."""
        from relayoptimizer.utils.transport import NostrTransport  # noqa: PLC0415

        return NostrTransport(
            self.relays,
            proxy_url=self.proxy_url,
            connect_timeout=self.connect_timeout,
        )


__all__ = ["TransportConfig", "validate_relay_urls"]
