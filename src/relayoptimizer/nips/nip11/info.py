"""
NIP-11 metadata container with HTTP retrieval.

Pairs [Nip11Data][relayoptimizer.nips.nip11.data.Nip11Data] with
[Nip11Logs][relayoptimizer.nips.nip11.logs.Nip11Logs] and the measured
round-trip time, and provides
[execute()][relayoptimizer.nips.nip11.info.Nip11Metadata.execute], which
performs the request for a relay's
[NIP-11](https://github.com/nostr-protocol/nips/blob/master/11.md) document.

Note:
    The HTTP URL is derived from the relay identity (``wss`` -> ``https``,
    ``ws`` -> ``http``) and requested with ``Accept: application/nostr+json``.
    Bodies larger than 64 KB are not parsed.

    The round-trip time is measured from the start of the request until
    the response headers arrive; the body read is not included.

See Also:
    [Prober][relayoptimizer.services.prober.Prober]: Turns the result into a
        [RelayStatus][relayoptimizer.models.status.RelayStatus].
"""

from __future__ import annotations

import asyncio
import logging
import ssl
import time
from typing import Any, ClassVar, NamedTuple, Self

import aiohttp
from aiohttp_socks import ProxyConnector
from pydantic import StrictInt

from relayoptimizer.models.relay_url import http_url
from relayoptimizer.nips.base import BaseMetadata
from relayoptimizer.utils.http import read_bounded_json

from .data import Nip11Data
from .logs import Nip11Logs


logger = logging.getLogger("relayoptimizer.nips.nip11")

DEFAULT_TIMEOUT = 5.0
NOSTR_JSON = "application/nostr+json"


class _Response(NamedTuple):
    status: int
    rtt_ms: int
    body: Any


_NO_BODY: Any = object()


def _insecure_context() -> ssl.SSLContext:
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


class Nip11Metadata(BaseMetadata):
    """NIP-11 fetch result: document, logs, and round-trip time.

    Attributes:
        data: Parsed document, or ``None`` when the relay did not answer
            with a usable JSON object.
        logs: Success flag, HTTP status, and failure reason.
        rtt_ms: Milliseconds until the response headers arrived, or
            ``None`` when no successful response was received.

    Warning:
        [execute()][relayoptimizer.nips.nip11.info.Nip11Metadata.execute]
        **never raises** for network or protocol failures. Check
        ``logs.success`` before using ``rtt_ms``.
    """

    data: Nip11Data | None = None
    logs: Nip11Logs
    rtt_ms: StrictInt | None = None

    _MAX_SIZE: ClassVar[int] = 65_536  # 64 KB

    # -------------------------------------------------------------------------
    # HTTP Retrieval
    # -------------------------------------------------------------------------

    @staticmethod
    async def _request(
        url: str,
        timeout: float,  # noqa: ASYNC109
        max_size: int,
        ssl_context: ssl.SSLContext | bool,  # noqa: FBT001
        proxy_url: str | None,
    ) -> _Response:
        """Perform one GET and read the body if the status is 2xx.

        Body problems (oversized, not JSON, truncated) leave ``body`` as
        ``_NO_BODY`` without failing the request.
        """
        connector: aiohttp.BaseConnector
        if proxy_url:
            connector = ProxyConnector.from_url(proxy_url, ssl=ssl_context)
        else:
            connector = aiohttp.TCPConnector(ssl=ssl_context)

        start = time.perf_counter()
        async with (
            aiohttp.ClientSession(connector=connector) as session,
            session.get(
                url,
                headers={"Accept": NOSTR_JSON},
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp,
        ):
            rtt_ms = round((time.perf_counter() - start) * 1000)
            if not 200 <= resp.status < 300:  # noqa: PLR2004
                return _Response(resp.status, rtt_ms, _NO_BODY)

            try:
                body = await read_bounded_json(resp, max_size)
            except (ValueError, aiohttp.ClientError, TimeoutError) as e:
                logger.debug("nip11_body_unreadable url=%s error=%s", url, e)
                body = _NO_BODY
            return _Response(resp.status, rtt_ms, body)

    @classmethod
    async def execute(
        cls,
        relay_url: str,
        timeout: float | None = None,  # noqa: ASYNC109
        max_size: int | None = None,
        proxy_url: str | None = None,
        *,
        allow_insecure: bool = False,
    ) -> Self:
        """Fetch the NIP-11 document of a relay.

        HTTPS requests verify the certificate first and retry without
        verification only when *allow_insecure* is set.

        Args:
            relay_url: Relay URL in any raw form.
            timeout: Request timeout in seconds (default: 5.0).
            max_size: Maximum body size in bytes (default: 64 KB).
            proxy_url: Optional SOCKS5 proxy URL (e.g. for ``.onion`` relays).
            allow_insecure: Retry with an unverified TLS context on
                certificate errors.

        Returns:
            A ``Nip11Metadata`` with data, logs, and round-trip time.
        """
        timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        max_size = max_size if max_size is not None else cls._MAX_SIZE
        url = http_url(relay_url)

        logs: dict[str, Any] = {"success": False, "reason": None, "status": None}
        response: _Response | None = None

        try:
            if url.startswith("https://"):
                try:
                    response = await cls._request(url, timeout, max_size, True, proxy_url)  # noqa: FBT003
                except aiohttp.ClientConnectorCertificateError:
                    if not allow_insecure:
                        raise
                    logger.debug("nip11_ssl_fallback url=%s", url)
                    response = await cls._request(
                        url, timeout, max_size, _insecure_context(), proxy_url
                    )
            else:
                response = await cls._request(url, timeout, max_size, False, proxy_url)  # noqa: FBT003

            logs["status"] = response.status
            if 200 <= response.status < 300:  # noqa: PLR2004
                logs["success"] = True
            else:
                logs["reason"] = f"HTTP {response.status}"

        except (asyncio.CancelledError, KeyboardInterrupt, SystemExit):
            raise
        except (OSError, TimeoutError, aiohttp.ClientError, ValueError) as e:
            logs["reason"] = str(e) or type(e).__name__

        data: Nip11Data | None = None
        if logs["success"] and response is not None and isinstance(response.body, dict):
            data = Nip11Data.from_raw(response.body)

        result = cls(
            data=data,
            logs=Nip11Logs.model_validate(logs),
            rtt_ms=response.rtt_ms if logs["success"] and response is not None else None,
        )

        if result.logs.success:
            logger.debug(
                "nip11_succeeded url=%s rtt_ms=%s name=%s",
                url,
                result.rtt_ms,
                data.name if data else None,
            )
        else:
            logger.debug("nip11_failed url=%s error=%s", url, result.logs.reason)

        return result


__all__ = ["DEFAULT_TIMEOUT", "NOSTR_JSON", "Nip11Metadata"]
