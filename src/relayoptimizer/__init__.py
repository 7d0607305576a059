r"""relayoptimizer -- Nostr relay intelligence engine.

Helps a Nostr user choose and publish relays: probes relay health,
suggests relays from the user's social graph, publishes the user's relay
lists as signed records, and reads relay reviews and directories.

Architecture follows a **diamond DAG** dependency structure where imports
flow strictly downward:

```text
              services         Prober, Aggregator, Publisher, Reviewer, Directory
             /   |   \
          core  nips  utils    Infrastructure, protocol, and helpers
             \   |   /
              models           Pure frozen dataclasses (zero I/O)
```

Attributes:
    models: Pure frozen dataclasses and enums. Zero I/O.
    core: Base service, exceptions, logging, metrics, status map.
    nips: NIP-11 relay information, NIP-65 relay lists, NIP-32 reviews,
        kind 0/3 parsing.
    utils: HTTP helpers, key loading, signing, relay transport.
    services: The request-driven services.

Note:
    For lightweight usage, import directly from subpackages::

        from relayoptimizer.models import canonicalize
        from relayoptimizer.services import Prober

    Top-level imports (``from relayoptimizer import Prober``) use lazy
    loading and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("relayoptimizer")

__all__ = [
    "Aggregator",
    "AggregatorConfig",
    "BaseService",
    "Category",
    "Directory",
    "DirectoryConfig",
    "Event",
    "EventFilter",
    "KeysSigner",
    "Logger",
    "Nip11Metadata",
    "NostrTransport",
    "Prober",
    "ProberConfig",
    "Publisher",
    "PublisherConfig",
    "RelayList",
    "RelayLists",
    "RelayStatus",
    "Reviewer",
    "ReviewerConfig",
    "StatusMap",
    "canonicalize",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "BaseService": ("relayoptimizer.core", "BaseService"),
    "Logger": ("relayoptimizer.core", "Logger"),
    "StatusMap": ("relayoptimizer.core", "StatusMap"),
    "Category": ("relayoptimizer.models", "Category"),
    "Event": ("relayoptimizer.models", "Event"),
    "EventFilter": ("relayoptimizer.models", "EventFilter"),
    "RelayList": ("relayoptimizer.models", "RelayList"),
    "RelayLists": ("relayoptimizer.models", "RelayLists"),
    "RelayStatus": ("relayoptimizer.models", "RelayStatus"),
    "canonicalize": ("relayoptimizer.models", "canonicalize"),
    "Nip11Metadata": ("relayoptimizer.nips", "Nip11Metadata"),
    "KeysSigner": ("relayoptimizer.utils.signer", "KeysSigner"),
    "NostrTransport": ("relayoptimizer.utils.transport", "NostrTransport"),
    "Aggregator": ("relayoptimizer.services", "Aggregator"),
    "AggregatorConfig": ("relayoptimizer.services", "AggregatorConfig"),
    "Directory": ("relayoptimizer.services", "Directory"),
    "DirectoryConfig": ("relayoptimizer.services", "DirectoryConfig"),
    "Prober": ("relayoptimizer.services", "Prober"),
    "ProberConfig": ("relayoptimizer.services", "ProberConfig"),
    "Publisher": ("relayoptimizer.services", "Publisher"),
    "PublisherConfig": ("relayoptimizer.services", "PublisherConfig"),
    "Reviewer": ("relayoptimizer.services", "Reviewer"),
    "ReviewerConfig": ("relayoptimizer.services", "ReviewerConfig"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'relayoptimizer' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
