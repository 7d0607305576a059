"""Reviewer service package.

Re-exports all public symbols::

    from relayoptimizer.services.reviewer import Reviewer, ReviewerConfig
"""

from .configs import ReviewerConfig
from .service import Reviewer


__all__ = ["Reviewer", "ReviewerConfig"]
