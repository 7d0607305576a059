"""Core layer providing the foundation for all relayoptimizer services.

Sits in the middle of the diamond DAG -- depends only on
``relayoptimizer.models`` and is depended upon by ``relayoptimizer.services``.

Attributes:
    BaseService: Abstract generic base class with factory methods
        ([from_yaml()][relayoptimizer.core.base_service.BaseService.from_yaml],
        [from_dict()][relayoptimizer.core.base_service.BaseService.from_dict])
        and Prometheus helpers.
    StatusMap: Lock-guarded relay status map with atomic per-key upserts.
        See [StatusMap][relayoptimizer.core.status_map.StatusMap].
    Logger: Structured logger supporting key=value and JSON output modes.
        See [Logger][relayoptimizer.core.logger.Logger].
    YAML: Safe YAML loading with ``yaml.safe_load()``.
        See [load_yaml()][relayoptimizer.core.yaml.load_yaml].
    Exceptions: The [RelayOptimizerError][relayoptimizer.core.exceptions.RelayOptimizerError]
        hierarchy.

See Also:
    [relayoptimizer.models][]: Pure dataclass models consumed by this layer.
    [relayoptimizer.services][]: Service implementations that depend on
        this layer.
"""

from .base_service import BaseService, BaseServiceConfig, ConfigT
from .exceptions import (
    AllRelaysRejectedError,
    ConfigurationError,
    ConnectivityError,
    PreconditionError,
    ProtocolError,
    PublishingError,
    RelayOptimizerError,
    RelayTimeoutError,
)
from .logger import Logger, StructuredFormatter, configure_logging, format_kv_pairs
from .metrics import (
    PROBE_LATENCY_MS,
    SERVICE_COUNTER,
    SERVICE_GAUGE,
    MetricsConfig,
    exposition,
)
from .status_map import StatusMap
from .yaml import load_yaml


__all__ = [
    "PROBE_LATENCY_MS",
    "SERVICE_COUNTER",
    "SERVICE_GAUGE",
    "AllRelaysRejectedError",
    "BaseService",
    "BaseServiceConfig",
    "ConfigT",
    "ConfigurationError",
    "ConnectivityError",
    "Logger",
    "MetricsConfig",
    "PreconditionError",
    "ProtocolError",
    "PublishingError",
    "RelayOptimizerError",
    "RelayTimeoutError",
    "StatusMap",
    "StructuredFormatter",
    "configure_logging",
    "exposition",
    "format_kv_pairs",
    "load_yaml",
]
