"""
Prometheus metrics collection.

Defines module-level metric objects (singletons, thread-safe) shared by all
services. Services record values through
[set_gauge()][relayoptimizer.core.base_service.BaseService.set_gauge],
[inc_counter()][relayoptimizer.core.base_service.BaseService.inc_counter] and
[observe_latency()][relayoptimizer.core.base_service.BaseService.observe_latency];
all of them are no-ops unless ``MetricsConfig.enabled`` is set.

The engine is embedded in a host application, so no HTTP endpoint is started
here: the host scrapes the default ``prometheus_client`` registry, or calls
[exposition()][relayoptimizer.core.metrics.exposition] (the CLI does so with
``--print-metrics``).

Architecture:
    SERVICE_GAUGE:      Point-in-time values (current state).
    SERVICE_COUNTER:    Cumulative totals (monotonically increasing).
    PROBE_LATENCY_MS:   Histogram of successful probe round-trip times.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, generate_latest
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class MetricsConfig(BaseModel):
    """Whether services record Prometheus metrics."""

    enabled: bool = Field(default=False, description="Enable metrics collection")


# ---------------------------------------------------------------------------
# Generic Label-Based Metrics
#
#   gauge:   {service="prober", name="relays_bad"}
#   counter: {service="publisher", name="lists_failed"}
# ---------------------------------------------------------------------------

SERVICE_GAUGE = Gauge(
    "relayoptimizer_service_gauge",
    "Service gauge values (point-in-time state)",
    ["service", "name"],
)

SERVICE_COUNTER = Counter(
    "relayoptimizer_service_counter",
    "Service counter values (cumulative totals)",
    ["service", "name"],
)

PROBE_LATENCY_MS = Histogram(
    "relayoptimizer_probe_latency_ms",
    "Round-trip time of successful NIP-11 probes in milliseconds",
    ["service"],
    buckets=(25, 50, 100, 200, 300, 500, 1000, 2000, 5000),
)


def exposition() -> bytes:
    """Render the default registry in the Prometheus text format."""
    return generate_latest()


__all__ = [
    "PROBE_LATENCY_MS",
    "SERVICE_COUNTER",
    "SERVICE_GAUGE",
    "MetricsConfig",
    "exposition",
]
