"""Reviewer service configuration models.

See Also:
    [Reviewer][relayoptimizer.services.reviewer.Reviewer]: The service
        class that consumes this configuration.
"""

from __future__ import annotations

from pydantic import Field, field_validator

from relayoptimizer.core.base_service import BaseServiceConfig
from relayoptimizer.services.common.configs import validate_relay_urls
from relayoptimizer.services.common.constants import REVIEW_RELAYS


class ReviewerConfig(BaseServiceConfig):
    """Reviewer service configuration.

    ``single_*`` settings apply when reviews of one relay are requested,
    ``multi_*`` settings when several relays are requested at once.
    """

    review_relays: list[str] = Field(
        default_factory=lambda: list(REVIEW_RELAYS),
        description="Relays queried for reviews in addition to the default pool",
    )
    single_limit: int = Field(default=50, ge=1, le=1000, description="Review limit for one relay")
    multi_limit: int = Field(
        default=200, ge=1, le=5000, description="Review limit for several relays"
    )
    single_timeout: float = Field(
        default=5.0, ge=0.1, le=60.0, description="Query timeout for one relay"
    )
    multi_timeout: float = Field(
        default=8.0, ge=0.1, le=60.0, description="Query timeout for several relays"
    )
    publish_timeout: float = Field(
        default=10.0, ge=0.1, le=120.0, description="Review publish timeout in seconds"
    )
    client_name: str | None = Field(
        default=None,
        min_length=1,
        description="Value of the client tag added to submitted reviews",
    )

    @field_validator("review_relays")
    @classmethod
    def _validate_relays(cls, v: list[str]) -> list[str]:
        return validate_relay_urls(v)


__all__ = ["ReviewerConfig"]
