"""Publisher service package.

Re-exports all public symbols::

    from relayoptimizer.services.publisher import Publisher, PublisherConfig
"""

from .configs import PublisherConfig
from .service import Publisher
from .utils import ALL_REJECTED_MESSAGE, IdentityEvents, format_publish_error, with_client_tag


__all__ = [
    "ALL_REJECTED_MESSAGE",
    "IdentityEvents",
    "Publisher",
    "PublisherConfig",
    "format_publish_error",
    "with_client_tag",
]
