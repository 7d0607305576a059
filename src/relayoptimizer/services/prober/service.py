"""Prober service for relayoptimizer.

Measures relay health by fetching each relay's NIP-11 document and timing
the response. Every probe settles into a
[RelayStatus][relayoptimizer.models.status.RelayStatus] written to the shared
[StatusMap][relayoptimizer.core.status_map.StatusMap]:

1. ``testing`` is written as soon as the probe starts.
2. A 2xx response yields ``good`` (< 100 ms), ``ok`` (< 300 ms) or ``bad``,
   with the parsed document when one was served.
3. Non-2xx statuses, timeouts, DNS, TLS and connection failures yield
   ``bad`` with no latency.

Probes never raise. If a probe is cancelled its relay goes back to
``unknown`` before the cancellation propagates. There are no retries.

See Also:
    [ProberConfig][relayoptimizer.services.prober.ProberConfig]: Timeout,
        stagger, and TLS settings.
    [Nip11Metadata.execute()][relayoptimizer.nips.nip11.info.Nip11Metadata.execute]:
        The underlying HTTP fetch.

Examples:
    ```python
    from relayoptimizer.services import Prober

    prober = Prober()
    statuses = await prober.probe_many(["wss://relay.damus.io", "wss://nos.lol"])
    for status in sort_by_latency(statuses.values()):
        print(status.display_url, status.state, status.description)
    ```
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, ClassVar

from relayoptimizer.core.base_service import BaseService
from relayoptimizer.core.status_map import StatusMap
from relayoptimizer.models.constants import RelayState, ServiceName
from relayoptimizer.models.relay_url import canonicalize, deduplicate
from relayoptimizer.models.status import RelayStatus, categorize_latency
from relayoptimizer.nips.nip11 import Nip11Metadata

from .configs import ProberConfig


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class Prober(BaseService[ProberConfig]):
    """Relay health prober.

    Args:
        config: Prober settings (defaults when omitted).
        statuses: Status map to write to. A private map is created when
            omitted; pass a shared one to expose results to other readers.
    """

    SERVICE_NAME: ClassVar[ServiceName] = ServiceName.PROBER
    CONFIG_CLASS: ClassVar[type[ProberConfig]] = ProberConfig

    def __init__(
        self,
        config: ProberConfig | None = None,
        statuses: StatusMap | None = None,
    ) -> None:
        super().__init__(config=config)
        self._config: ProberConfig
        self._statuses = statuses if statuses is not None else StatusMap()

    # -------------------------------------------------------------------------
    # Probing
    # -------------------------------------------------------------------------

    async def probe_one(self, url: str) -> RelayStatus:
        """Probe one relay and store its settled status.

        Args:
            url: Relay URL in any raw form.

        Returns:
            The settled status (``good``, ``ok`` or ``bad``).

        Raises:
            asyncio.CancelledError: If cancelled; the relay's status is
                reset to ``unknown`` first unless another probe of the
                same relay has stored a newer status meanwhile.
        """
        identity = canonicalize(url)
        previous = self._statuses.get(identity) or RelayStatus.unknown(identity)
        testing = previous.testing()
        self._statuses.upsert(testing)
        self._logger.debug("probe_started", relay=identity)

        try:
            metadata = await Nip11Metadata.execute(
                identity,
                timeout=self._config.timeout,
                max_size=self._config.max_size,
                proxy_url=self._config.proxy_url,
                allow_insecure=self._config.allow_insecure,
            )
        except asyncio.CancelledError:
            # An overlapping probe that settled meanwhile keeps its result.
            reset = self._statuses.replace_if(testing, RelayStatus.unknown(identity))
            self._logger.debug("probe_cancelled", relay=identity, reset=reset)
            raise

        latency_ms = metadata.rtt_ms if metadata.logs.success else None
        status = RelayStatus(
            identity=identity,
            display_url=previous.display_url,
            state=categorize_latency(latency_ms),
            latency_ms=latency_ms,
            info=metadata.data.to_dict() if metadata.data is not None else None,
            tested_at=int(time.time()),
        )
        self._statuses.upsert(status)

        if latency_ms is not None:
            self.observe_latency(latency_ms)
        self.inc_counter(f"probes_{status.state}")
        self._logger.info(
            "probe_completed",
            relay=identity,
            state=status.state,
            latency_ms=latency_ms,
            reason=metadata.logs.reason,
        )
        return status

    async def probe_many(self, urls: Iterable[str]) -> dict[str, RelayStatus]:
        """Probe several relays concurrently.

        Duplicate identities are probed once. Probe ``i`` starts after
        ``i * stagger`` seconds. A probe that is cancelled is left out of
        the result without affecting the others.

        Returns:
            ``identity -> settled status``, in input order. Empty input
            returns ``{}`` without suspending.
        """
        identities = [canonicalize(url) for url in deduplicate(urls)]
        if not identities:
            return {}

        stagger = self._config.stagger

        async def _delayed(index: int, identity: str) -> RelayStatus:
            if index and stagger:
                await asyncio.sleep(index * stagger)
            return await self.probe_one(identity)

        self._logger.info("probe_batch_started", count=len(identities))
        results = await asyncio.gather(
            *(_delayed(i, identity) for i, identity in enumerate(identities)),
            return_exceptions=True,
        )

        settled: dict[str, RelayStatus] = {}
        for identity, result in zip(identities, results, strict=True):
            if isinstance(result, asyncio.CancelledError):
                continue
            if isinstance(result, BaseException):
                self._logger.error(
                    "probe_failed",
                    relay=identity,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                continue
            settled[identity] = result

        counts = {state: 0 for state in (RelayState.GOOD, RelayState.OK, RelayState.BAD)}
        for status in settled.values():
            counts[status.state] += 1
        for state, count in counts.items():
            self.set_gauge(f"relays_{state}", count)
        self._logger.info(
            "probe_batch_completed",
            probed=len(settled),
            good=counts[RelayState.GOOD],
            ok=counts[RelayState.OK],
            bad=counts[RelayState.BAD],
        )
        return settled

    # -------------------------------------------------------------------------
    # Status Access
    # -------------------------------------------------------------------------

    def get_status(self, url: str) -> RelayStatus:
        """Current status of *url*; ``unknown`` if it was never probed."""
        return self._statuses.get(url) or RelayStatus.unknown(url)

    def statuses(self) -> Mapping[str, RelayStatus]:
        """Read-only snapshot of every recorded status."""
        return self._statuses.snapshot()

    def clear(self) -> None:
        """Forget every recorded status."""
        self._statuses.clear()


__all__ = ["Prober"]
