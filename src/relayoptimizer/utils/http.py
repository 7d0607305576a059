"""HTTP helpers with bounded response bodies.

Relay information documents and directory APIs are served by third parties,
so every body is read with a hard size cap before JSON decoding.

Note:
    This module sits in the ``utils`` layer and depends only on the
    standard library and ``aiohttp``. It is importable from both ``nips``
    and ``services``.

See Also:
    [Nip11Metadata][relayoptimizer.nips.nip11.info.Nip11Metadata]: NIP-11
        fetch that uses [read_bounded_json][relayoptimizer.utils.http.read_bounded_json].
    [Directory][relayoptimizer.services.directory.Directory]: Relay directory
        API fetch that uses [fetch_json][relayoptimizer.utils.http.fetch_json].
"""

from __future__ import annotations

import json
from typing import Any

import aiohttp


async def read_bounded(response: aiohttp.ClientResponse, max_size: int) -> bytes:
    """Read a whole response body, refusing more than *max_size* bytes.

    Chunks are accumulated until EOF, which also handles chunked transfer
    encoding where one read may return less than requested.

    Raises:
        ValueError: If the body exceeds *max_size*.
    """
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await response.content.read(max_size + 1 - total)
        if not chunk:
            break
        total += len(chunk)
        if total > max_size:
            raise ValueError(f"Response body too large: >{max_size} bytes")
        chunks.append(chunk)
    return b"".join(chunks)


async def read_bounded_json(response: aiohttp.ClientResponse, max_size: int) -> Any:
    """Read and decode a JSON body with size enforcement.

    Raises:
        ValueError: If the body exceeds *max_size* or is not valid JSON
            (``json.JSONDecodeError`` and ``UnicodeDecodeError`` are both
            ``ValueError`` subclasses).
    """
    body = await read_bounded(response, max_size)
    return json.loads(body)


async def fetch_json(
    url: str,
    *,
    timeout: float,  # noqa: ASYNC109
    max_size: int,
    headers: dict[str, str] | None = None,
) -> Any:
    """GET *url* and return its decoded JSON body.

    Raises:
        aiohttp.ClientError: On connection failures and non-2xx statuses.
        TimeoutError: If the request exceeds *timeout*.
        ValueError: If the body is too large or not JSON.
    """
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with (
        aiohttp.ClientSession(timeout=client_timeout) as session,
        session.get(url, headers=headers) as response,
    ):
        response.raise_for_status()
        return await read_bounded_json(response, max_size)


__all__ = ["fetch_json", "read_bounded", "read_bounded_json"]
