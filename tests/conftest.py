"""
Pytest configuration and shared fixtures for relayoptimizer tests.

Provides:
- FakeTransport: in-memory relay transport with scripted sources and failures
- FakeSigner: deterministic signer producing unsigned fixture events
- Event factory fixture
"""

import asyncio
import itertools
import logging
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from relayoptimizer.core.exceptions import AllRelaysRejectedError, ConnectivityError
from relayoptimizer.models.event import Event
from relayoptimizer.models.filter import EventFilter


SUBJECT = "a" * 64

_ids = itertools.count(1)


def make_event_id() -> str:
    return f"{next(_ids):064x}"


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Fakes
# ============================================================================


def _matches(event_filter: EventFilter, event: Event) -> bool:
    if event_filter.kinds and event.kind not in event_filter.kinds:
        return False
    if event_filter.authors and event.pubkey not in event_filter.authors:
        return False
    for name, values in event_filter.tags.items():
        if not set(event.tag_values(name)) & set(values):
            return False
    return True


class FakeTransport:
    """In-memory transport.

    ``events`` answer queries on the default pool (``relays=None``);
    ``sources`` map a tuple of relay URLs to the events they hold. Unknown
    relay sets hold nothing. ``errors`` map the same keys to an exception
    raised by every query on that source.
    """

    def __init__(self) -> None:
        self.events: list[Event] = []
        self.sources: dict[tuple[str, ...], list[Event]] = {}
        self.errors: dict[tuple[str, ...] | None, BaseException] = {}
        self.fail_authors: set[str] = set()
        self.publish_errors: dict[int, BaseException] = {}
        self.publish_delay: float = 0.0
        self.queries: list[tuple[list[EventFilter], list[str] | None, float]] = []
        self.published: list[tuple[Event, list[str] | None, float]] = []

    async def query(
        self,
        filters: Sequence[EventFilter],
        relays: Sequence[str] | None = None,
        timeout: float = 10.0,
    ) -> list[Event]:
        key = tuple(relays) if relays is not None else None
        self.queries.append((list(filters), list(relays) if relays is not None else None, timeout))
        if key in self.errors:
            raise self.errors[key]
        for event_filter in filters:
            if self.fail_authors & set(event_filter.authors):
                raise ConnectivityError("batch failed")
        pool = self.events if key is None else self.sources.get(key, [])
        result: list[Event] = []
        for event_filter in filters:
            matched = sorted(
                (e for e in pool if _matches(event_filter, e)),
                key=lambda e: (-e.created_at, e.id),
            )
            if event_filter.limit is not None:
                matched = matched[: event_filter.limit]
            result.extend(e for e in matched if e not in result)
        return result

    async def publish(
        self,
        event: Event,
        relays: Sequence[str] | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.published.append((event, list(relays) if relays is not None else None, timeout))
        if self.publish_delay:
            await asyncio.sleep(self.publish_delay)
        if event.kind in self.publish_errors:
            raise self.publish_errors[event.kind]

    def published_kinds(self) -> list[int]:
        return [event.kind for event, _, _ in self.published]

    def published_event(self, kind: int) -> Event:
        return next(event for event, _, _ in self.published if event.kind == kind)


class FakeSigner:
    """Signer returning fixture events with fresh ids and an empty signature."""

    def __init__(self, public_key: str = SUBJECT) -> None:
        self._public_key = public_key
        self.error: BaseException | None = None

    @property
    def public_key(self) -> str:
        return self._public_key

    async def sign(
        self,
        kind: int,
        content: str,
        tags: Sequence[Sequence[str]],
        created_at: int,
    ) -> Event:
        if self.error is not None:
            raise self.error
        return Event(
            id=make_event_id(),
            pubkey=self._public_key,
            created_at=created_at,
            kind=kind,
            tags=tuple(tuple(tag) for tag in tags),
            content=content,
        )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def transport() -> FakeTransport:
    """Create an empty fake transport."""
    return FakeTransport()


@pytest.fixture
def signer() -> FakeSigner:
    """Create a fake signer for the subject."""
    return FakeSigner()


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory for fixture events with unique ids."""

    def _make(
        kind: int,
        pubkey: str = SUBJECT,
        tags: Sequence[Sequence[str]] = (),
        content: str = "",
        created_at: int = 1_700_000_000,
        event_id: str | None = None,
        **extra: Any,
    ) -> Event:
        return Event(
            id=event_id or make_event_id(),
            pubkey=pubkey,
            created_at=created_at,
            kind=kind,
            tags=tuple(tuple(tag) for tag in tags),
            content=content,
            **extra,
        )

    return _make


@pytest.fixture
def all_rejected() -> AllRelaysRejectedError:
    """Error raised when no relay accepts an event."""
    return AllRelaysRejectedError({"wss://relay.example.com": "blocked: not allowed"})
