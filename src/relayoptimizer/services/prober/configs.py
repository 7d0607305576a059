"""Prober service configuration models.

See Also:
    [Prober][relayoptimizer.services.prober.Prober]: The service class
        that consumes this configuration.
    [BaseServiceConfig][relayoptimizer.core.base_service.BaseServiceConfig]:
        Base class providing the ``metrics`` field.
"""

from __future__ import annotations

from pydantic import Field

from relayoptimizer.core.base_service import BaseServiceConfig


class ProberConfig(BaseServiceConfig):
    """Prober service configuration.

    Examples:
        ```yaml
        timeout: 5.0
        stagger: 0.1
        allow_insecure: false
        ```
    """

    timeout: float = Field(
        default=5.0, ge=0.1, le=60.0, description="NIP-11 request timeout in seconds"
    )
    stagger: float = Field(
        default=0.1,
        ge=0.0,
        le=5.0,
        description="Delay between probe starts in seconds (index x stagger)",
    )
    max_size: int = Field(
        default=65_536,
        ge=1024,
        le=1_048_576,
        description="Maximum NIP-11 body size in bytes",
    )
    proxy_url: str | None = Field(default=None, description="SOCKS5 proxy URL")
    allow_insecure: bool = Field(
        default=False,
        description="Retry without certificate verification on TLS errors",
    )


__all__ = ["ProberConfig"]
