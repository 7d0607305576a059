"""Directory service package.

Re-exports all public symbols::

    from relayoptimizer.services.directory import Directory, DirectoryConfig
"""

from .configs import DirectoryConfig
from .service import Directory, extract_urls_from_response


__all__ = ["Directory", "DirectoryConfig", "extract_urls_from_response"]
