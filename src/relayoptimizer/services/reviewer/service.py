"""Reviewer service for relayoptimizer.

Reads and writes NIP-32 relay reviews (kind 1986 labels in the ``review``
namespace). Reviews are queried from dedicated review relays and the
default pool at the same time; either source may fail without failing
the read.

See Also:
    [relayoptimizer.nips.nip32][]: Review tag format.
    [ReviewSummary][relayoptimizer.models.review.ReviewSummary]: Per-relay
        result.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, ClassVar

from relayoptimizer.core.base_service import BaseService
from relayoptimizer.core.exceptions import PreconditionError, RelayOptimizerError
from relayoptimizer.models.constants import EventKind, ServiceName
from relayoptimizer.models.filter import EventFilter
from relayoptimizer.models.relay_url import canonicalize, deduplicate, is_valid_relay_url
from relayoptimizer.models.review import MAX_STARS, RelayReview, ReviewSummary, stars_to_rating
from relayoptimizer.nips.nip32 import build_review_tags, parse_review
from relayoptimizer.nips.nip65 import client_tag

from .configs import ReviewerConfig


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from relayoptimizer.models.event import Event
    from relayoptimizer.utils.signer import Signer
    from relayoptimizer.utils.transport import Transport


_PUBLISH_ERRORS = (RelayOptimizerError, OSError, TimeoutError, ValueError)


class Reviewer(BaseService[ReviewerConfig]):
    """Relay review reader and writer.

    Args:
        transport: Relay access for queries and publication.
        signer: Required only by
            [submit_review()][relayoptimizer.services.reviewer.Reviewer.submit_review].
        config: Reviewer settings (defaults when omitted).
    """

    SERVICE_NAME: ClassVar[ServiceName] = ServiceName.REVIEWER
    CONFIG_CLASS: ClassVar[type[ReviewerConfig]] = ReviewerConfig

    def __init__(
        self,
        transport: Transport,
        signer: Signer | None = None,
        config: ReviewerConfig | None = None,
    ) -> None:
        super().__init__(config=config)
        self._config: ReviewerConfig
        self._transport = transport
        self._signer = signer

    async def fetch_reviews(self, urls: Iterable[str]) -> dict[str, ReviewSummary]:
        """Reviews of every relay in *urls*, newest first.

        Returns:
            ``identity -> summary`` for every requested relay, including
            relays without reviews.
        """
        identities = [canonicalize(url) for url in deduplicate(urls)]
        if not identities:
            return {}

        single = len(identities) == 1
        event_filter = EventFilter(
            kinds=(EventKind.LABEL,),
            tags={"r": tuple(identities)},
            limit=self._config.single_limit if single else self._config.multi_limit,
        )
        timeout = self._config.single_timeout if single else self._config.multi_timeout

        sources: list[Sequence[str] | None] = [None]
        if self._config.review_relays:
            sources.insert(0, self._config.review_relays)
        responses = await asyncio.gather(
            *(
                self._transport.query([event_filter], relays=source, timeout=timeout)
                for source in sources
            ),
            return_exceptions=True,
        )

        events: list[Event] = []
        for response in responses:
            if isinstance(response, asyncio.CancelledError):
                raise response
            if isinstance(response, BaseException):
                self._logger.warning(
                    "reviews_fetch_failed",
                    error=str(response),
                    error_type=type(response).__name__,
                )
                continue
            events.extend(response)

        grouped: dict[str, list[RelayReview]] = {identity: [] for identity in identities}
        seen: set[str] = set()
        for event in events:
            if event.id in seen:
                continue
            seen.add(event.id)
            review = parse_review(event)
            if review is not None and review.relay in grouped:
                grouped[review.relay].append(review)

        summaries = {
            identity: ReviewSummary(
                relay=identity,
                reviews=tuple(sorted(reviews, key=lambda r: (-r.created_at, r.id))),
            )
            for identity, reviews in grouped.items()
        }
        self._logger.info(
            "reviews_fetched",
            relays=len(identities),
            reviews=sum(s.count for s in summaries.values()),
        )
        return summaries

    async def submit_review(
        self,
        url: str,
        stars: int,
        content: str = "",
        *,
        secure_origin: bool = True,
    ) -> bool:
        """Sign and publish a review of *url*.

        Returns:
            ``True`` when at least one relay accepted the review.

        Raises:
            PreconditionError: If no signer is configured, *url* is not a
                relay URL, or *stars* is outside 1-5.
        """
        if self._signer is None:
            raise PreconditionError("A signer is required to submit reviews")
        if not is_valid_relay_url(url):
            raise PreconditionError(f"Not a relay URL: {url!r}")
        if not 1 <= stars <= MAX_STARS:
            raise PreconditionError(f"stars must be between 1 and {MAX_STARS}, got {stars}")

        identity = canonicalize(url)
        tags = build_review_tags(identity, stars_to_rating(stars))
        if secure_origin and self._config.client_name:
            tags.append(client_tag(self._config.client_name))

        timeout = self._config.publish_timeout
        try:
            async with asyncio.timeout(timeout):
                event = await self._signer.sign(
                    EventKind.LABEL, content.strip(), tags, int(time.time())
                )
                await self._transport.publish(event, timeout=timeout)
        except _PUBLISH_ERRORS as e:
            self.inc_counter("reviews_failed")
            self._logger.warning(
                "review_publish_failed",
                relay=identity,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        self.inc_counter("reviews_published")
        self._logger.info("review_published", relay=identity, stars=stars, event=event.id)
        return True


__all__ = ["Reviewer"]
