"""Prober service package.

Re-exports all public symbols::

    from relayoptimizer.services.prober import Prober, ProberConfig
"""

from .configs import ProberConfig
from .service import Prober


__all__ = ["Prober", "ProberConfig"]
