"""The relay intelligence services plus shared constants and configs.

Services are the top layer of the diamond DAG, depending on
[relayoptimizer.core][relayoptimizer.core], [relayoptimizer.nips][relayoptimizer.nips],
[relayoptimizer.utils][relayoptimizer.utils], and
[relayoptimizer.models][relayoptimizer.models]. Each service extends
[BaseService][relayoptimizer.core.base_service.BaseService] and exposes
request-driven async operations; there is no background loop.

Attributes:
    Prober: NIP-11 based relay health checks written to a shared
        [StatusMap][relayoptimizer.core.status_map.StatusMap].
    Aggregator: Relay suggestions ranked by how many of the subject's
        contacts use each relay.
    Publisher: Signs and publishes the subject's relay lists (NIP-65 and
        the kind 10006-10089 lists), and reads existing ones.
    Reviewer: Reads and submits NIP-32 relay reviews.
    Directory: Popular relays from a public directory API.

Note:
    Services receive their collaborators (a
    [Transport][relayoptimizer.utils.transport.Transport], a
    [Signer][relayoptimizer.utils.signer.Signer], a shared
    [StatusMap][relayoptimizer.core.status_map.StatusMap]) through their
    constructors and hold no other long-lived state.

Examples:
    ```python
    from relayoptimizer.services import Aggregator, Prober
    from relayoptimizer.utils.transport import NostrTransport

    transport = NostrTransport(["wss://relay.damus.io", "wss://nos.lol"])
    result = await Aggregator(transport=transport).aggregate(pubkey)
    statuses = await Prober().probe_many(s.identity for s in result.suggestions[:10])
    ```
"""

from .aggregator import Aggregator, AggregatorConfig
from .directory import Directory, DirectoryConfig
from .prober import Prober, ProberConfig
from .publisher import Publisher, PublisherConfig
from .reviewer import Reviewer, ReviewerConfig


__all__ = [
    "Aggregator",
    "AggregatorConfig",
    "Directory",
    "DirectoryConfig",
    "Prober",
    "ProberConfig",
    "Publisher",
    "PublisherConfig",
    "Reviewer",
    "ReviewerConfig",
]
