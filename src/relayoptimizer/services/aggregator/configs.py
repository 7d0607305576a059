"""Aggregator service configuration models.

See Also:
    [Aggregator][relayoptimizer.services.aggregator.Aggregator]: The service
        class that consumes these configurations.
    [BaseServiceConfig][relayoptimizer.core.base_service.BaseServiceConfig]:
        Base class providing the ``metrics`` field.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from relayoptimizer.core.base_service import BaseServiceConfig
from relayoptimizer.services.common.configs import validate_relay_urls
from relayoptimizer.services.common.constants import INDEXER_RELAYS


class TimeoutsConfig(BaseModel):
    """Per-query timeouts in seconds.

    See Also:
        [AggregatorConfig][relayoptimizer.services.aggregator.AggregatorConfig]:
            Parent config that embeds this model.
    """

    contacts: float = Field(
        default=10.0, ge=0.1, le=120.0, description="Contact list query timeout"
    )
    indexer: float = Field(
        default=5.0, ge=0.1, le=60.0, description="Indexer availability probe timeout"
    )
    batch: float = Field(default=15.0, ge=0.1, le=120.0, description="Per-batch query timeout")


class AggregatorConfig(BaseServiceConfig):
    """Aggregator service configuration.

    Examples:
        ```yaml
        batch_size: 100
        max_parallel_batches: 4
        indexers:
          - wss://purplepag.es
          - wss://indexer.coracle.social
        timeouts:
          batch: 20.0
        ```
    """

    batch_size: int = Field(
        default=100, ge=1, le=500, description="Authors per relay list query"
    )
    max_parallel_batches: int = Field(
        default=4, ge=1, le=32, description="Maximum concurrent batch queries"
    )
    indexers: list[str] = Field(
        default_factory=lambda: list(INDEXER_RELAYS),
        description="Indexer relays tried in order before the default pool",
    )
    include_profiles: bool = Field(
        default=True,
        description="Also read kind 0 profiles (legacy relays field and contact cards)",
    )
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)

    @field_validator("indexers")
    @classmethod
    def _validate_indexers(cls, v: list[str]) -> list[str]:
        return validate_relay_urls(v)


__all__ = ["AggregatorConfig", "TimeoutsConfig"]
