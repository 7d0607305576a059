"""Directory service for relayoptimizer.

Lists popular relays from a public relay directory (nostr.watch by
default). The response format is configurable via a JMESPath expression;
every extracted string that is a valid relay URL is canonicalized and
deduplicated, in response order.

The directory is a convenience source: any failure (network, HTTP
status, oversized or malformed body) yields an empty list and a warning.

See Also:
    [DirectoryConfig][relayoptimizer.services.directory.DirectoryConfig]:
        Endpoint, extraction expression, and limits.
    [fetch_json][relayoptimizer.utils.http.fetch_json]: Bounded JSON GET.
"""

from __future__ import annotations

from typing import Any, ClassVar

import aiohttp
import jmespath

from relayoptimizer.core.base_service import BaseService
from relayoptimizer.models.constants import ServiceName
from relayoptimizer.models.relay_url import canonicalize, is_valid_relay_url
from relayoptimizer.utils.http import fetch_json

from .configs import DirectoryConfig


def extract_urls_from_response(data: Any, expression: str = "[*]") -> list[str]:
    """Apply a JMESPath *expression* to *data* and keep the string results.

    Examples:
        ```python
        extract_urls_from_response(["wss://a.com", 3], "[*]")        # ['wss://a.com']
        extract_urls_from_response({"wss://a.com": {}}, "keys(@)")  # ['wss://a.com']
        ```
    """
    result = jmespath.search(expression, data)
    if isinstance(result, str):
        return [result]
    if not isinstance(result, list):
        return []
    return [item for item in result if isinstance(item, str)]


class Directory(BaseService[DirectoryConfig]):
    """Public relay directory client."""

    SERVICE_NAME: ClassVar[ServiceName] = ServiceName.DIRECTORY
    CONFIG_CLASS: ClassVar[type[DirectoryConfig]] = DirectoryConfig

    async def top_relays(self, limit: int | None = None) -> list[str]:
        """Up to *limit* relay identities from the directory, in its order.

        Args:
            limit: Maximum number of relays (default: ``config.limit``).

        Returns:
            Canonical relay URLs, or ``[]`` when the directory is unavailable.
        """
        limit = limit if limit is not None else self._config.limit
        try:
            data = await fetch_json(
                self._config.url,
                timeout=self._config.timeout,
                max_size=self._config.max_response_size,
            )
            candidates = extract_urls_from_response(data, self._config.jmespath)
        except (
            aiohttp.ClientError,
            OSError,
            TimeoutError,
            ValueError,
            jmespath.exceptions.JMESPathError,
        ) as e:
            self._logger.warning(
                "directory_fetch_failed",
                url=self._config.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return []

        relays: list[str] = []
        for url in candidates:
            if not is_valid_relay_url(url):
                self._logger.debug("invalid_relay_url", url=url)
                continue
            identity = canonicalize(url)
            if identity not in relays:
                relays.append(identity)
            if len(relays) >= limit:
                break

        self._logger.info("directory_fetched", candidates=len(candidates), relays=len(relays))
        return relays


__all__ = ["Directory", "extract_urls_from_response"]
