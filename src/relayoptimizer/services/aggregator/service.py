"""Aggregator service for relayoptimizer.

Suggests relays from the subject's social graph:

1. **Contacts** -- the newest kind 3 record of the subject lists the
   followed public keys (``p`` tags).
2. **Source selection** -- the configured indexer relays are tried in
   order with a cheap ``{kinds: [10002], limit: 1}`` query; the first that
   answers with a record is used, otherwise the transport's default pool.
3. **Batch fetch** -- contacts are queried in batches for their kind 10002
   relay lists and kind 0 profiles. Batches run concurrently under a
   semaphore and a failing batch is skipped.
4. **Ranking** -- relays are ranked by the number of distinct contacts
   using them; see [rank_suggestions][relayoptimizer.services.aggregator.utils.rank_suggestions].

Note:
    Every run builds its result from scratch. The selected source is local
    to the run, so concurrent runs never observe each other's choice.

See Also:
    [AggregatorConfig][relayoptimizer.services.aggregator.AggregatorConfig]:
        Batch size, indexers, and timeouts.
    [Transport][relayoptimizer.utils.transport.Transport]: Relay access.

Examples:
    ```python
    aggregator = Aggregator(transport=NostrTransport(DEFAULT_POOL))
    result = await aggregator.aggregate(pubkey, current_relays=["wss://nos.lol"])
    for suggestion in result.new_suggestions()[:10]:
        print(suggestion.display_url, suggestion.contact_count)
    ```
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, ClassVar

from relayoptimizer.core.base_service import BaseService
from relayoptimizer.core.exceptions import PreconditionError
from relayoptimizer.models.constants import EventKind, ServiceName
from relayoptimizer.models.event import Event, newest
from relayoptimizer.models.filter import EventFilter
from relayoptimizer.models.suggestion import AggregationResult
from relayoptimizer.nips.nip02 import extract_contacts

from .configs import AggregatorConfig
from .utils import batched, latest_records, rank_suggestions


if TYPE_CHECKING:
    from collections.abc import Iterable

    from relayoptimizer.utils.transport import Transport


class Aggregator(BaseService[AggregatorConfig]):
    """Social graph relay aggregator.

    Args:
        transport: Relay access used for every query.
        config: Aggregator settings (defaults when omitted).
    """

    SERVICE_NAME: ClassVar[ServiceName] = ServiceName.AGGREGATOR
    CONFIG_CLASS: ClassVar[type[AggregatorConfig]] = AggregatorConfig

    def __init__(
        self,
        transport: Transport,
        config: AggregatorConfig | None = None,
    ) -> None:
        super().__init__(config=config)
        self._config: AggregatorConfig
        self._transport = transport

    async def aggregate(
        self,
        subject: str,
        current_relays: Iterable[str] = (),
    ) -> AggregationResult:
        """Rank the relays used by the subject's contacts.

        Args:
            subject: Hex public key of the subject.
            current_relays: Relays the subject already uses; matching
                suggestions are flagged ``already_configured``.

        Returns:
            The ranked result. An empty result when the subject has no
            contact list or it could not be fetched.

        Raises:
            PreconditionError: If *subject* is empty.
        """
        subject = subject.strip()
        if not subject:
            raise PreconditionError("A subject public key is required to aggregate relays")
        current = list(current_relays)

        contacts = await self.fetch_contacts(subject)
        if not contacts:
            self._logger.info("aggregation_skipped", reason="no contacts")
            return AggregationResult()

        source = await self.select_source()
        batches = batched(contacts, self._config.batch_size)
        self._logger.info(
            "aggregation_started",
            contacts=len(contacts),
            batches=len(batches),
            source=",".join(source) if source else "pool",
        )

        events = await self._fetch_batches(batches, source)
        result = rank_suggestions(contacts, latest_records(events, contacts), current)

        self.set_gauge("contacts", result.contact_total)
        self.set_gauge("contacts_analyzed", result.analyzed_total)
        self.set_gauge("suggestions", len(result.suggestions))
        self._logger.info(
            "aggregation_completed",
            contacts=result.contact_total,
            analyzed=result.analyzed_total,
            suggestions=len(result.suggestions),
        )
        return result

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def fetch_contacts(self, subject: str) -> list[str]:
        """Contacts of *subject* from its newest kind 3 record; ``[]`` on failure."""
        event_filter = EventFilter(kinds=(EventKind.CONTACTS,), authors=(subject,), limit=1)
        try:
            events = await self._transport.query(
                [event_filter], timeout=self._config.timeouts.contacts
            )
        except Exception as e:
            self._logger.warning(
                "contacts_fetch_failed", error=str(e), error_type=type(e).__name__
            )
            return []

        record = newest(
            [e for e in events if e.kind == EventKind.CONTACTS and e.pubkey == subject]
        )
        if record is None:
            self._logger.debug("contacts_not_found", subject=subject)
            return []
        return extract_contacts(record)

    async def select_source(self) -> list[str] | None:
        """First indexer that returns a relay list record, or ``None`` for the pool."""
        probe = EventFilter(kinds=(EventKind.RELAY_LIST,), limit=1)
        for indexer in self._config.indexers:
            try:
                events = await self._transport.query(
                    [probe], relays=[indexer], timeout=self._config.timeouts.indexer
                )
            except Exception as e:
                self._logger.debug("indexer_unavailable", relay=indexer, error=str(e))
                continue
            if events:
                self._logger.debug("indexer_selected", relay=indexer)
                return [indexer]
            self._logger.debug("indexer_empty", relay=indexer)
        self._logger.debug("indexer_fallback_pool")
        return None

    async def _fetch_batch(self, authors: list[str], source: list[str] | None) -> list[Event]:
        kinds: tuple[int, ...] = (EventKind.RELAY_LIST,)
        if self._config.include_profiles:
            kinds = (EventKind.RELAY_LIST, EventKind.SET_METADATA)
        event_filter = EventFilter(kinds=kinds, authors=tuple(authors))
        try:
            return await self._transport.query(
                [event_filter], relays=source, timeout=self._config.timeouts.batch
            )
        except Exception as e:
            self.inc_counter("batches_failed")
            self._logger.warning(
                "batch_fetch_failed",
                authors=len(authors),
                error=str(e),
                error_type=type(e).__name__,
            )
            return []

    async def _fetch_batches(
        self, batches: list[list[str]], source: list[str] | None
    ) -> list[Event]:
        semaphore = asyncio.Semaphore(self._config.max_parallel_batches)

        async def _bounded(authors: list[str]) -> list[Event]:
            async with semaphore:
                return await self._fetch_batch(authors, source)

        tasks: list[asyncio.Task[list[Event]]] = []
        try:
            async with asyncio.TaskGroup() as tg:
                tasks.extend(tg.create_task(_bounded(batch)) for batch in batches)
        except ExceptionGroup as eg:
            for exc in eg.exceptions:
                self._logger.error(
                    "batch_worker_failed",
                    error=str(exc),
                    error_type=type(exc).__name__,
                )

        events: list[Event] = []
        for task in tasks:
            if task.cancelled() or task.exception() is not None:
                continue
            events.extend(task.result())
        return events


__all__ = ["Aggregator"]
