"""Nostr relay transport: querying and publishing events.

Services talk to relays through the [Transport][relayoptimizer.utils.transport.Transport]
protocol, which exchanges the transport-independent
[Event][relayoptimizer.models.event.Event] and
[EventFilter][relayoptimizer.models.filter.EventFilter] models.
[NostrTransport][relayoptimizer.utils.transport.NostrTransport] implements it
on ``nostr_sdk.Client``: each call builds a short-lived client, connects to
the target relays, runs one operation, and shuts the client down.

Note:
    Clearnet relays are reached directly. When ``proxy_url`` is set every
    connection goes through the SOCKS5 proxy using
    ``nostr_sdk.ConnectionMode.PROXY`` (needed for ``.onion`` relays).

Note:
    This module imports only [relayoptimizer.core.exceptions][] from the
    core layer, to raise the publishing errors callers match on.

See Also:
    [Aggregator][relayoptimizer.services.aggregator.Aggregator],
    [Publisher][relayoptimizer.services.publisher.Publisher],
    [Reviewer][relayoptimizer.services.reviewer.Reviewer]: Consumers.

Examples:
    ```python
    transport = NostrTransport(["wss://relay.damus.io", "wss://nos.lol"])
    events = await transport.query([EventFilter(kinds=(10002,), authors=(pk,), limit=1)])
    await transport.publish(event, relays=["wss://purplepag.es"])
    ```
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import socket
from datetime import timedelta
from ipaddress import AddressValueError, IPv4Address, IPv6Address
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable
from urllib.parse import urlparse

from nostr_sdk import (
    Client,
    ClientBuilder,
    ClientOptions,
    Connection,
    ConnectionMode,
    ConnectionTarget,
    Filter,
    NostrSdkError,
    RelayUrl,
)
from nostr_sdk import Event as NostrEvent

from relayoptimizer.core.exceptions import (
    AllRelaysRejectedError,
    ConnectivityError,
    PublishingError,
    RelayTimeoutError,
)
from relayoptimizer.models.event import Event
from relayoptimizer.models.relay_url import deduplicate


if TYPE_CHECKING:
    from collections.abc import Sequence

    from relayoptimizer.models.filter import EventFilter


DEFAULT_TIMEOUT: Final[float] = 10.0
CONNECT_TIMEOUT: Final[float] = 5.0


logger = logging.getLogger("relayoptimizer.utils.transport")

# Silence nostr-sdk UniFFI callback stack traces (handled by our code)
logging.getLogger("nostr_sdk").setLevel(logging.CRITICAL)


@runtime_checkable
class Transport(Protocol):
    """Query and publish Nostr events on a set of relays.

    ``relays=None`` targets the transport's default pool.
    """

    async def query(
        self,
        filters: Sequence[EventFilter],
        relays: Sequence[str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
    ) -> list[Event]:
        """Return the events matching any of *filters*, deduplicated by id."""
        ...

    async def publish(
        self,
        event: Event,
        relays: Sequence[str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
    ) -> None:
        """Send *event*; raise when no relay accepted it."""
        ...


async def _resolve_proxy(proxy_url: str) -> tuple[str, int]:
    """Split a SOCKS5 URL into an IP address and port.

    nostr-sdk requires a numeric IP for the proxy host.
    """
    parsed = urlparse(proxy_url)
    proxy_host = parsed.hostname or "127.0.0.1"
    proxy_port = parsed.port or 9050

    bare_host = proxy_host.strip("[]")
    try:
        IPv4Address(bare_host)
    except (AddressValueError, ValueError):
        try:
            IPv6Address(bare_host)
            proxy_host = bare_host
        except (AddressValueError, ValueError):
            proxy_host = await asyncio.to_thread(socket.gethostbyname, proxy_host)
    return proxy_host, proxy_port


async def create_client(proxy_url: str | None = None) -> Client:
    """Create a read/write Nostr client without a signer.

    Events are signed before they reach the transport, so the client never
    holds keys.
    """
    builder = ClientBuilder()
    if proxy_url is not None:
        host, port = await _resolve_proxy(proxy_url)
        conn = Connection().mode(ConnectionMode.PROXY(host, port)).target(ConnectionTarget.ALL)
        builder = builder.opts(ClientOptions().connection(conn))
    return builder.build()


class NostrTransport:
    """[Transport][relayoptimizer.utils.transport.Transport] on ``nostr_sdk.Client``.

    Args:
        default_relays: Pool used when a call passes ``relays=None``.
        proxy_url: Optional SOCKS5 proxy for every connection.
        connect_timeout: Seconds to wait for relay connections per call.
    """

    def __init__(
        self,
        default_relays: Sequence[str],
        proxy_url: str | None = None,
        connect_timeout: float = CONNECT_TIMEOUT,
    ) -> None:
        self._default_relays = deduplicate(default_relays)
        self._proxy_url = proxy_url
        self._connect_timeout = connect_timeout

    @property
    def default_relays(self) -> list[str]:
        return list(self._default_relays)

    def _targets(self, relays: Sequence[str] | None) -> list[str]:
        return deduplicate(relays) if relays is not None else list(self._default_relays)

    async def _connect(self, targets: Sequence[str]) -> Client:
        client = await create_client(self._proxy_url)
        added = 0
        for url in targets:
            try:
                await client.add_relay(RelayUrl.parse(url))
                added += 1
            except NostrSdkError as e:
                logger.debug("relay_add_failed relay=%s error=%s", url, e)
        try:
            if not added:
                raise ConnectivityError(f"No usable relay among {list(targets)}")
            await client.connect()
            await client.wait_for_connection(timedelta(seconds=self._connect_timeout))
        except (OSError, NostrSdkError, ConnectivityError) as e:
            with contextlib.suppress(Exception):
                await client.shutdown()
            if isinstance(e, ConnectivityError):
                raise
            raise ConnectivityError(str(e)) from e
        return client

    async def query(
        self,
        filters: Sequence[EventFilter],
        relays: Sequence[str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
    ) -> list[Event]:
        """Fetch the events matching any of *filters* from the target relays.

        Raises:
            ConnectivityError: If no relay could be used or the SDK failed.
            RelayTimeoutError: If the query exceeded *timeout*.
        """
        targets = self._targets(relays)
        if not filters or not targets:
            return []

        client = await self._connect(targets)
        try:
            seen: set[str] = set()
            result: list[Event] = []
            for event_filter in filters:
                sdk_filter = Filter.from_json(json.dumps(event_filter.to_dict()))
                events = await client.fetch_events(sdk_filter, timedelta(seconds=timeout))
                for sdk_event in events.to_vec():
                    event = Event.from_dict(json.loads(sdk_event.as_json()))
                    if event.id in seen:
                        continue
                    seen.add(event.id)
                    result.append(event)
            logger.debug("query_done relays=%s events=%s", len(targets), len(result))
            return result
        except TimeoutError as e:
            raise RelayTimeoutError(f"Query timed out after {timeout}s") from e
        except (OSError, NostrSdkError) as e:
            raise ConnectivityError(str(e)) from e
        finally:
            # nostr-sdk shutdown can raise arbitrary errors from the FFI layer
            with contextlib.suppress(Exception):
                await client.shutdown()

    async def publish(
        self,
        event: Event,
        relays: Sequence[str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
    ) -> None:
        """Send a signed event to the target relays.

        Succeeds when at least one relay accepted the event.

        Raises:
            AllRelaysRejectedError: If every relay rejected or missed the event.
            PublishingError: If the event could not be sent at all.
            RelayTimeoutError: If sending exceeded *timeout*.
        """
        targets = self._targets(relays)
        if not targets:
            raise AllRelaysRejectedError()

        try:
            sdk_event = NostrEvent.from_json(json.dumps(event.to_dict()))
        except NostrSdkError as e:
            raise PublishingError(f"Invalid event: {e}") from e

        client = await self._connect(targets)
        try:
            output = await asyncio.wait_for(client.send_event(sdk_event), timeout=timeout)
            if not output.success:
                failures = {str(url): str(reason) for url, reason in output.failed.items()}
                raise AllRelaysRejectedError(failures)
            logger.debug(
                "publish_done event=%s kind=%s accepted=%s rejected=%s",
                event.id,
                event.kind,
                len(output.success),
                len(output.failed),
            )
        except TimeoutError as e:
            raise RelayTimeoutError(f"Timed out after {timeout:g}s") from e
        except (OSError, NostrSdkError) as e:
            raise PublishingError(str(e)) from e
        finally:
            with contextlib.suppress(Exception):
                await client.shutdown()


__all__ = ["CONNECT_TIMEOUT", "DEFAULT_TIMEOUT", "NostrTransport", "Transport", "create_client"]
