"""
Unit tests for services.aggregator module.

Tests:
- Configuration validation
- fetch_contacts() newest record and failure containment
- select_source() indexer fallback chain
- aggregate() end to end over a fake transport
- Batch failure containment
"""

import asyncio
import json
from collections.abc import Callable, Sequence

import pytest
from pydantic import ValidationError

from relayoptimizer.core.exceptions import (
    ConnectivityError,
    PreconditionError,
    RelayTimeoutError,
)
from relayoptimizer.models.constants import EventKind, Provenance
from relayoptimizer.models.event import Event
from relayoptimizer.models.filter import EventFilter
from relayoptimizer.services.aggregator import Aggregator, AggregatorConfig
from tests.conftest import SUBJECT, FakeTransport


B = "b" * 64
C = "c" * 64
D = "d" * 64

IDX1 = "wss://idx1.example.com"
IDX2 = "wss://idx2.example.com"


class CrashingBatchTransport(FakeTransport):
    """Transport whose batch for ``crash_author`` raises while slower batches are in flight."""

    def __init__(self, crash_author: str, slow_author: str) -> None:
        super().__init__()
        self.crash_author = crash_author
        self.slow_author = slow_author

    async def query(
        self,
        filters: Sequence[EventFilter],
        relays: Sequence[str] | None = None,
        timeout: float = 10.0,
    ) -> list[Event]:
        authors = {author for f in filters for author in f.authors}
        if self.crash_author in authors:
            await asyncio.sleep(0.01)
            raise RuntimeError("transport bug")
        if self.slow_author in authors:
            await asyncio.sleep(0.05)
        return await super().query(filters, relays, timeout)


def _aggregator(transport: FakeTransport, **overrides: object) -> Aggregator:
    data: dict[str, object] = {"indexers": []}
    data.update(overrides)
    return Aggregator(transport=transport, config=AggregatorConfig.model_validate(data))


@pytest.fixture
def graph(make_event: Callable[..., Event]) -> list[Event]:
    """Contact list of the subject plus the contacts' records."""
    return [
        make_event(EventKind.CONTACTS, tags=[["p", B], ["p", C], ["p", D], ["p", B]]),
        make_event(
            EventKind.RELAY_LIST,
            pubkey=B,
            tags=[["r", "wss://x.com"], ["r", "wss://y.com", "read"]],
        ),
        make_event(
            EventKind.SET_METADATA,
            pubkey=B,
            content=json.dumps({"name": "bob", "relays": {"wss://z.com": {}, "wss://x.com": {}}}),
        ),
        make_event(EventKind.RELAY_LIST, pubkey=C, tags=[["r", "wss://X.com/"]]),
    ]


# =============================================================================
# Configuration Tests
# =============================================================================


class TestAggregatorConfig:
    """Tests for AggregatorConfig."""

    def test_defaults(self) -> None:
        """Default batch settings and indexer chain."""
        config = AggregatorConfig()
        assert config.batch_size == 100
        assert config.max_parallel_batches == 4
        assert config.indexers[0] == "wss://purplepag.es"
        assert config.include_profiles is True

    def test_invalid_indexer(self) -> None:
        """Indexers must be relay URLs."""
        with pytest.raises(ValidationError):
            AggregatorConfig(indexers=["https://purplepag.es"])

    def test_batch_size_bounds(self) -> None:
        """Batch size must be positive."""
        with pytest.raises(ValidationError):
            AggregatorConfig(batch_size=0)


# =============================================================================
# fetch_contacts() Tests
# =============================================================================


class TestFetchContacts:
    """Tests for Aggregator.fetch_contacts()."""

    async def test_newest_contact_list(
        self, transport: FakeTransport, make_event: Callable[..., Event]
    ) -> None:
        """The newest kind 3 record wins."""
        transport.events = [
            make_event(EventKind.CONTACTS, tags=[["p", B]], created_at=100),
            make_event(EventKind.CONTACTS, tags=[["p", C], ["p", D]], created_at=200),
        ]
        assert await _aggregator(transport).fetch_contacts(SUBJECT) == [C, D]

    async def test_no_contact_list(self, transport: FakeTransport) -> None:
        """A missing record yields no contacts."""
        assert await _aggregator(transport).fetch_contacts(SUBJECT) == []

    async def test_query_failure(self, transport: FakeTransport) -> None:
        """Transport failures are contained."""
        transport.errors[None] = ConnectivityError("all relays down")
        assert await _aggregator(transport).fetch_contacts(SUBJECT) == []


# =============================================================================
# select_source() Tests
# =============================================================================


class TestSelectSource:
    """Tests for Aggregator.select_source()."""

    async def test_first_answering_indexer(
        self, transport: FakeTransport, make_event: Callable[..., Event]
    ) -> None:
        """Failing and empty indexers are skipped."""
        transport.errors[(IDX1,)] = RelayTimeoutError("timed out")
        transport.sources[(IDX2,)] = [make_event(EventKind.RELAY_LIST, pubkey=B)]
        aggregator = _aggregator(transport, indexers=[IDX1, IDX2])
        assert await aggregator.select_source() == [IDX2]

    async def test_unexpected_indexer_error(
        self, transport: FakeTransport, make_event: Callable[..., Event]
    ) -> None:
        """An arbitrary indexer error moves on to the next indexer."""
        transport.errors[(IDX1,)] = RuntimeError("bad frame")
        transport.sources[(IDX2,)] = [make_event(EventKind.RELAY_LIST, pubkey=B)]
        aggregator = _aggregator(transport, indexers=[IDX1, IDX2])
        assert await aggregator.select_source() == [IDX2]

    async def test_fallback_to_pool(self, transport: FakeTransport) -> None:
        """Without an answering indexer the pool is used."""
        aggregator = _aggregator(transport, indexers=[IDX1, IDX2])
        assert await aggregator.select_source() is None
        assert [relays for _, relays, _ in transport.queries] == [[IDX1], [IDX2]]


# =============================================================================
# aggregate() Tests
# =============================================================================


class TestAggregate:
    """Tests for Aggregator.aggregate()."""

    async def test_empty_subject(self, transport: FakeTransport) -> None:
        """A blank subject is a precondition failure."""
        with pytest.raises(PreconditionError):
            await _aggregator(transport).aggregate("  ")
        assert transport.queries == []

    async def test_no_contacts(self, transport: FakeTransport) -> None:
        """No contact list, empty result."""
        result = await _aggregator(transport).aggregate(SUBJECT)
        assert result.suggestions == ()
        assert result.contact_total == 0

    async def test_ranked_result(self, transport: FakeTransport, graph: list[Event]) -> None:
        """Suggestions are ranked by contact count with merged provenance."""
        transport.events = graph
        result = await _aggregator(transport).aggregate(SUBJECT, current_relays=["wss://y.com/"])

        assert [s.identity for s in result.suggestions] == [
            "wss://x.com",
            "wss://y.com",
            "wss://z.com",
        ]
        top = result.suggestions[0]
        assert top.contact_count == 2
        assert top.provenance is Provenance.BOTH
        assert [c.pubkey for c in top.contacts] == [B, C]
        assert top.contacts[0].display_name == "bob"
        assert result.suggestions[1].already_configured is True
        assert result.suggestions[2].provenance is Provenance.PROFILE
        assert result.contact_total == 3
        assert result.analyzed_total == 2

    async def test_batches_use_selected_source(
        self, transport: FakeTransport, graph: list[Event]
    ) -> None:
        """Contact records are fetched from the selected indexer."""
        transport.events = graph[:1]
        transport.sources[(IDX1,)] = graph[1:]
        result = await _aggregator(transport, indexers=[IDX1]).aggregate(SUBJECT)
        assert result.suggestions[0].identity == "wss://x.com"
        batch_queries = [q for q in transport.queries if q[0][0].authors and q[1] == [IDX1]]
        assert len(batch_queries) == 1
        assert set(batch_queries[0][0][0].kinds) == {EventKind.RELAY_LIST, EventKind.SET_METADATA}

    async def test_batching(self, transport: FakeTransport, graph: list[Event]) -> None:
        """Contacts are split by batch_size."""
        transport.events = graph
        await _aggregator(transport, batch_size=2).aggregate(SUBJECT)
        batches = sorted(
            len(filters[0].authors)
            for filters, _, _ in transport.queries
            if EventKind.RELAY_LIST in filters[0].kinds and filters[0].authors
        )
        assert batches == [1, 2]

    async def test_failed_batch_skipped(
        self, transport: FakeTransport, graph: list[Event]
    ) -> None:
        """A failing batch loses only its own contacts."""
        transport.events = graph
        transport.fail_authors = {C}
        result = await _aggregator(transport, batch_size=1).aggregate(SUBJECT)
        assert result.analyzed_total == 1
        assert [c.pubkey for c in result.suggestions[0].contacts] == [B]

    async def test_unexpected_batch_error_keeps_siblings(
        self, make_event: Callable[..., Event]
    ) -> None:
        """An arbitrary error in one batch does not cancel batches still in flight."""
        transport = CrashingBatchTransport(crash_author=B, slow_author=C)
        transport.events = [
            make_event(EventKind.CONTACTS, tags=[["p", B], ["p", C]]),
            make_event(EventKind.RELAY_LIST, pubkey=B, tags=[["r", "wss://b.com"]]),
            make_event(EventKind.RELAY_LIST, pubkey=C, tags=[["r", "wss://x.com"]]),
        ]

        result = await _aggregator(transport, batch_size=1).aggregate(SUBJECT)

        assert [s.identity for s in result.suggestions] == ["wss://x.com"]
        assert [c.pubkey for c in result.suggestions[0].contacts] == [C]
        assert result.analyzed_total == 1

    async def test_profiles_disabled(self, transport: FakeTransport, graph: list[Event]) -> None:
        """Without profiles only kind 10002 is requested."""
        transport.events = graph
        result = await _aggregator(transport, include_profiles=False).aggregate(SUBJECT)
        assert [s.identity for s in result.suggestions] == ["wss://x.com", "wss://y.com"]
        assert result.suggestions[0].provenance is Provenance.NIP65

    async def test_runs_are_independent(
        self, transport: FakeTransport, graph: list[Event]
    ) -> None:
        """Repeated runs rebuild the result from scratch."""
        transport.events = graph
        aggregator = _aggregator(transport)
        first = await aggregator.aggregate(SUBJECT)
        second = await aggregator.aggregate(SUBJECT)
        assert first == second
