"""Publisher service configuration models.

See Also:
    [Publisher][relayoptimizer.services.publisher.Publisher]: The service
        class that consumes this configuration.
"""

from __future__ import annotations

from pydantic import Field, field_validator

from relayoptimizer.core.base_service import BaseServiceConfig
from relayoptimizer.services.common.configs import validate_relay_urls
from relayoptimizer.services.common.constants import PURPLEPAGES


class PublisherConfig(BaseServiceConfig):
    """Publisher service configuration.

    Examples:
        ```yaml
        client_name: relay-optimizer.example.com
        timeout: 10.0
        use_defaults: true
        ```
    """

    client_name: str | None = Field(
        default=None,
        min_length=1,
        description="Value of the client tag added to published records",
    )
    timeout: float = Field(
        default=10.0, ge=0.1, le=120.0, description="Per-record publish timeout in seconds"
    )
    fetch_timeout: float = Field(
        default=10.0, ge=0.1, le=120.0, description="Relay list fetch timeout in seconds"
    )
    publish_relays: list[str] = Field(
        default_factory=list,
        description="Relays to publish to (empty = the transport's default pool)",
    )
    lookup_relays: list[str] = Field(
        default_factory=lambda: [PURPLEPAGES],
        description="Extra relays queried for existing relay lists",
    )
    use_defaults: bool = Field(
        default=True,
        description="Fill missing DM and search lists with well-known relays",
    )

    @field_validator("publish_relays", "lookup_relays")
    @classmethod
    def _validate_relays(cls, v: list[str]) -> list[str]:
        return validate_relay_urls(v)


__all__ = ["PublisherConfig"]
