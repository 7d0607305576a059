"""Aggregator service package.

Re-exports all public symbols::

    from relayoptimizer.services.aggregator import Aggregator, AggregatorConfig
"""

from .configs import AggregatorConfig, TimeoutsConfig
from .service import Aggregator


__all__ = ["Aggregator", "AggregatorConfig", "TimeoutsConfig"]
