"""Unit tests for core.metrics module."""

from relayoptimizer.core.metrics import (
    PROBE_LATENCY_MS,
    SERVICE_COUNTER,
    MetricsConfig,
    exposition,
)


class TestMetricsConfig:
    """Tests for MetricsConfig."""

    def test_disabled_by_default(self) -> None:
        """Metrics are opt-in."""
        assert MetricsConfig().enabled is False


class TestExposition:
    """Tests for exposition()."""

    def test_contains_recorded_values(self) -> None:
        """Recorded samples appear in the text exposition."""
        SERVICE_COUNTER.labels(service="test", name="exposition_check").inc()
        PROBE_LATENCY_MS.labels(service="test").observe(42)
        text = exposition().decode()
        sample = 'relayoptimizer_service_counter_total{service="test",name="exposition_check"}'
        assert sample in text
        assert "relayoptimizer_probe_latency_ms_bucket" in text
