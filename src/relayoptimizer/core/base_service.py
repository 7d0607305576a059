"""
Abstract base class for relayoptimizer services.

``BaseService[ConfigT]`` provides what every service shares: a typed Pydantic
configuration with YAML/dict factories, a structured
[Logger][relayoptimizer.core.logger.Logger] named after the service, and
Prometheus helpers that are no-ops unless metrics are enabled.

Services are request-driven: the host application (a UI, the CLI) calls
their operations directly. Collaborators such as the
[Transport][relayoptimizer.utils.transport.Transport] and
[Signer][relayoptimizer.utils.signer.Signer] are injected through each
subclass constructor.

See Also:
    [BaseServiceConfig][relayoptimizer.core.base_service.BaseServiceConfig]:
        Base configuration model for all services.
    [MetricsConfig][relayoptimizer.core.metrics.MetricsConfig]: Embedded
        metrics switch.
"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Self, TypeVar, cast

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError
from .logger import Logger
from .metrics import PROBE_LATENCY_MS, SERVICE_COUNTER, SERVICE_GAUGE, MetricsConfig
from .yaml import load_yaml


if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType

    from relayoptimizer.models.constants import ServiceName


# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class BaseServiceConfig(BaseModel):
    """Base configuration shared by all services.

    Subclass this to add service-specific fields.
    """

    metrics: MetricsConfig = Field(
        default_factory=MetricsConfig,
        description="Prometheus metrics configuration",
    )


# Bound TypeVar ensuring all service configs inherit from BaseServiceConfig
ConfigT = TypeVar("ConfigT", bound=BaseServiceConfig)


class BaseService(ABC, Generic[ConfigT]):
    """Abstract base class for all relayoptimizer services.

    Subclasses must set ``SERVICE_NAME`` and ``CONFIG_CLASS``.

    Attributes:
        SERVICE_NAME: Service identifier used in logging and metrics.
        CONFIG_CLASS: Pydantic model class used by the factory methods.
        _config: Typed service configuration (defaults from ``CONFIG_CLASS``).
        _logger: [Logger][relayoptimizer.core.logger.Logger] named after the
            service.
    """

    SERVICE_NAME: ClassVar[ServiceName]
    CONFIG_CLASS: ClassVar[type[BaseServiceConfig]]

    def __init__(self, config: ConfigT | None = None) -> None:
        self._config: ConfigT = (
            config if config is not None else cast("ConfigT", self.CONFIG_CLASS())
        )
        self._logger = Logger(self.SERVICE_NAME)

    @property
    def config(self) -> ConfigT:
        """The typed service configuration (read-only)."""
        return self._config

    # -------------------------------------------------------------------------
    # Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, config_path: str | Path, **kwargs: Any) -> Self:
        """Create a service instance from a YAML configuration file.

        Args:
            config_path: Path to the YAML file.
            **kwargs: Collaborators passed to the constructor.

        Raises:
            ConfigurationError: If the file is missing, unreadable, or does
                not validate against ``CONFIG_CLASS``.
        """
        return cls.from_dict(load_yaml(config_path), **kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> Self:
        """Create a service instance from a configuration dictionary.

        Raises:
            ConfigurationError: If *data* does not validate against
                ``CONFIG_CLASS``.
        """
        try:
            config = cast("ConfigT", cls.CONFIG_CLASS(**data))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {cls.SERVICE_NAME} configuration: {e}") from e
        return cls(config=config, **kwargs)

    # -------------------------------------------------------------------------
    # Context Manager
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> Self:
        self._logger.debug("service_started")
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        self._logger.debug("service_stopped")

    # -------------------------------------------------------------------------
    # Custom Metrics
    # -------------------------------------------------------------------------

    def set_gauge(self, name: str, value: float) -> None:
        """Set a named gauge metric for this service (no-op when disabled)."""
        if not self._config.metrics.enabled:
            return
        SERVICE_GAUGE.labels(service=self.SERVICE_NAME, name=name).set(value)

    def inc_counter(self, name: str, value: float = 1) -> None:
        """Increment a named counter metric for this service (no-op when disabled)."""
        if not self._config.metrics.enabled:
            return
        SERVICE_COUNTER.labels(service=self.SERVICE_NAME, name=name).inc(value)

    def observe_latency(self, latency_ms: float) -> None:
        """Record a probe round-trip time (no-op when disabled)."""
        if not self._config.metrics.enabled:
            return
        PROBE_LATENCY_MS.labels(service=self.SERVICE_NAME).observe(latency_ms)


__all__ = ["BaseService", "BaseServiceConfig", "ConfigT"]
