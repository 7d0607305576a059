"""Publisher service for relayoptimizer.

Publishes the subject's relay configuration as signed records, one per
[RelayList][relayoptimizer.models.constants.RelayList]:

| list | kind | tags |
|---|---|---|
| NIP-65 (inbox + outbox) | 10002 | ``r`` with ``read``/``write`` markers |
| DM | 10050 | ``relay`` |
| search | 10007 | ``relay`` |
| blocked | 10006 | ``relay`` |
| indexer, proxy, broadcast, trusted | 10086-10089 | ``relay`` |

Each non-empty list is signed and published independently and
concurrently: one list failing never prevents another from succeeding.
The subject's profile and contact list can be re-signed and broadcast in
the same run so that they follow the subject to new relays.

Also reads the subject's existing lists
([fetch_lists()][relayoptimizer.services.publisher.Publisher.fetch_lists])
and identity records
([fetch_identity()][relayoptimizer.services.publisher.Publisher.fetch_identity]).

See Also:
    [PublisherConfig][relayoptimizer.services.publisher.PublisherConfig]:
        Client tag, timeouts, and target relays.
    [relayoptimizer.nips.nip65][]: Tag builders and parsers.

Examples:
    ```python
    publisher = Publisher(transport=transport, signer=KeysSigner(keys))
    lists = await publisher.fetch_lists(signer.public_key)
    lists = lists.with_category(Category.DM, ["wss://auth.nostr1.com"])
    outcome = await publisher.publish(lists)
    print(outcome.summary())
    ```
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, ClassVar

from relayoptimizer.core.base_service import BaseService
from relayoptimizer.core.exceptions import PreconditionError
from relayoptimizer.models.constants import (
    Category,
    EventKind,
    IdentityRecord,
    RelayList,
    ServiceName,
)
from relayoptimizer.models.event import Event, newest
from relayoptimizer.models.filter import EventFilter
from relayoptimizer.models.relay_lists import PublicationOutcome, RelayLists
from relayoptimizer.nips.nip65 import build_tags, lists_from_events
from relayoptimizer.services.common.constants import DEFAULT_DM_RELAYS, DEFAULT_SEARCH_RELAYS

from .configs import PublisherConfig
from .utils import IdentityEvents, format_publish_error, with_client_tag


if TYPE_CHECKING:
    from collections.abc import Sequence

    from relayoptimizer.utils.signer import Signer
    from relayoptimizer.utils.transport import Transport


_Attempt = tuple[RelayList | IdentityRecord, bool, str | None]


class Publisher(BaseService[PublisherConfig]):
    """Relay list publisher.

    Args:
        transport: Relay access for queries and publication.
        signer: Signs records for the subject. Reading works without one;
            publishing requires it.
        config: Publisher settings (defaults when omitted).
    """

    SERVICE_NAME: ClassVar[ServiceName] = ServiceName.PUBLISHER
    CONFIG_CLASS: ClassVar[type[PublisherConfig]] = PublisherConfig

    def __init__(
        self,
        transport: Transport,
        signer: Signer | None = None,
        config: PublisherConfig | None = None,
    ) -> None:
        super().__init__(config=config)
        self._config: PublisherConfig
        self._transport = transport
        self._signer = signer

    @property
    def _targets(self) -> list[str] | None:
        return self._config.publish_relays or None

    # -------------------------------------------------------------------------
    # Publication
    # -------------------------------------------------------------------------

    async def publish(
        self,
        lists: RelayLists,
        *,
        secure_origin: bool = True,
        identity: IdentityEvents | None = None,
    ) -> PublicationOutcome:
        """Sign and publish every non-empty relay list.

        Args:
            lists: The subject's relays per category.
            secure_origin: Whether the request comes from a trusted origin;
                the ``client`` tag is only added when set.
            identity: Profile and contact list to re-sign and broadcast
                alongside the lists.

        Returns:
            One flag per attempted list (and identity record), plus the
            error messages of the failed ones in list order.

        Raises:
            PreconditionError: If no signer is configured or every list is
                empty. Nothing is sent in that case.
        """
        if self._signer is None:
            raise PreconditionError("A signer is required to publish relay lists")
        units = lists.non_empty()
        if not units:
            raise PreconditionError("Nothing to publish: every relay list is empty")

        client_name = self._config.client_name if secure_origin else None
        attempts = [self._publish_list(unit, lists, client_name) for unit in units]
        if identity is not None:
            for record, event in (
                (IdentityRecord.PROFILE, identity.profile),
                (IdentityRecord.CONTACT_LIST, identity.contact_list),
            ):
                if event is not None:
                    attempts.append(self._rebroadcast(record, event, client_name))

        self._logger.info("publish_started", lists=len(units), records=len(attempts))
        settled: list[_Attempt] = await asyncio.gather(*attempts)

        results: dict[RelayList, bool] = {}
        broadcasts: dict[IdentityRecord, bool] = {}
        errors: list[tuple[RelayList | IdentityRecord, str]] = []
        for unit, ok, message in settled:
            if isinstance(unit, RelayList):
                results[unit] = ok
            else:
                broadcasts[unit] = ok
            if message is not None:
                errors.append((unit, message))

        outcome = PublicationOutcome(results=results, errors=tuple(errors), broadcasts=broadcasts)
        self.inc_counter("lists_published", len(outcome.succeeded))
        self.inc_counter("lists_failed", len(outcome.failed))
        self._logger.info(
            "publish_completed",
            succeeded=",".join(outcome.succeeded) or None,
            failed=",".join(outcome.failed) or None,
        )
        return outcome

    async def _sign_and_send(
        self,
        kind: int,
        content: str,
        tags: list[list[str]],
    ) -> Event:
        if self._signer is None:
            raise PreconditionError("A signer is required to publish records")
        timeout = self._config.timeout
        async with asyncio.timeout(timeout):
            event = await self._signer.sign(kind, content, tags, int(time.time()))
            await self._transport.publish(event, relays=self._targets, timeout=timeout)
        return event

    async def _publish_list(
        self,
        unit: RelayList,
        lists: RelayLists,
        client_name: str | None,
    ) -> _Attempt:
        try:
            tags = with_client_tag(build_tags(unit, lists), client_name)
            event = await self._sign_and_send(unit.kind, "", tags)
        except Exception as e:
            message = f"{unit.label}: {format_publish_error(e, self._config.timeout)}"
            self._logger.warning(
                "list_publish_failed",
                list=unit,
                kind=unit.kind,
                error=str(e),
                error_type=type(e).__name__,
            )
            return unit, False, message
        self._logger.debug("list_published", list=unit, kind=unit.kind, event=event.id)
        return unit, True, None

    async def _rebroadcast(
        self,
        record: IdentityRecord,
        original: Event,
        client_name: str | None,
    ) -> _Attempt:
        try:
            tags = with_client_tag(original.tags, client_name)
            event = await self._sign_and_send(record.kind, original.content, tags)
        except Exception as e:
            message = f"{record.label}: {format_publish_error(e, self._config.timeout)}"
            self._logger.warning(
                "identity_broadcast_failed",
                record=record,
                error=str(e),
                error_type=type(e).__name__,
            )
            return record, False, message
        self._logger.debug("identity_broadcast", record=record, event=event.id)
        return record, True, None

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    async def _query_all(self, event_filter: EventFilter) -> list[Event]:
        """Query the pool and the lookup relays concurrently; failed sources are skipped."""
        sources: list[Sequence[str] | None] = [None]
        if self._config.lookup_relays:
            sources.append(self._config.lookup_relays)
        responses = await asyncio.gather(
            *(
                self._transport.query(
                    [event_filter], relays=source, timeout=self._config.fetch_timeout
                )
                for source in sources
            ),
            return_exceptions=True,
        )

        events: list[Event] = []
        for source, response in zip(sources, responses, strict=True):
            if isinstance(response, asyncio.CancelledError):
                raise response
            if isinstance(response, BaseException):
                self._logger.warning(
                    "lists_fetch_failed",
                    source=",".join(source) if source else "pool",
                    error=str(response),
                    error_type=type(response).__name__,
                )
                continue
            events.extend(response)
        return events

    async def fetch_lists(self, pubkey: str) -> RelayLists:
        """Read the newest relay list of every kind published by *pubkey*.

        Missing DM and search lists are filled with well-known defaults
        when ``use_defaults`` is set.

        Raises:
            PreconditionError: If *pubkey* is empty.
        """
        pubkey = pubkey.strip()
        if not pubkey:
            raise PreconditionError("A public key is required to fetch relay lists")

        kinds = tuple(unit.kind for unit in RelayList)
        events = await self._query_all(EventFilter(kinds=kinds, authors=(pubkey,)))
        lists, found = lists_from_events(e for e in events if e.pubkey == pubkey)

        if self._config.use_defaults:
            if RelayList.DM not in found:
                lists = lists.with_category(Category.DM, DEFAULT_DM_RELAYS)
            if RelayList.SEARCH not in found:
                lists = lists.with_category(Category.SEARCH, DEFAULT_SEARCH_RELAYS)

        self._logger.info(
            "lists_fetched",
            pubkey=pubkey,
            found=",".join(sorted(found)) or None,
        )
        return lists

    async def fetch_identity(self, pubkey: str) -> IdentityEvents:
        """Newest profile and contact list of *pubkey*, for rebroadcast.

        Raises:
            PreconditionError: If *pubkey* is empty.
        """
        pubkey = pubkey.strip()
        if not pubkey:
            raise PreconditionError("A public key is required to fetch identity records")

        event_filter = EventFilter(
            kinds=(EventKind.SET_METADATA, EventKind.CONTACTS), authors=(pubkey,)
        )
        events = [e for e in await self._query_all(event_filter) if e.pubkey == pubkey]
        return IdentityEvents(
            profile=newest([e for e in events if e.kind == EventKind.SET_METADATA]),
            contact_list=newest([e for e in events if e.kind == EventKind.CONTACTS]),
        )


__all__ = ["Publisher"]
