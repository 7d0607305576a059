"""relayoptimizer exception hierarchy.

Transient failures (a relay that times out, a batch query that fails, a list
nobody accepts) are contained at the unit boundary by the services and turned
into degraded results. Only precondition and configuration failures reach
the caller as exceptions.

Exception hierarchy:

```text
RelayOptimizerError (base -- never raised directly)
├── ConfigurationError        -- config validation, missing keys, bad YAML
├── PreconditionError         -- no signer, empty subject, nothing to publish
├── ConnectivityError         -- relay unreachable, network failures
│   └── RelayTimeoutError     -- connection or response timed out
├── ProtocolError             -- malformed events or NIP documents
└── PublishingError           -- event broadcast failures
    └── AllRelaysRejectedError -- no relay accepted the event
```

See Also:
    [Publisher][relayoptimizer.services.publisher.Publisher]: Turns
        [PublishingError][relayoptimizer.core.exceptions.PublishingError] into
        per-list error messages.
    [NostrTransport][relayoptimizer.utils.transport.NostrTransport]: Raises
        [AllRelaysRejectedError][relayoptimizer.core.exceptions.AllRelaysRejectedError].
"""

from __future__ import annotations


class RelayOptimizerError(Exception):
    """Base exception for all relayoptimizer errors.

    Never raised directly -- always use a specific subclass.
    """


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(RelayOptimizerError):
    """Invalid or missing configuration (YAML, env vars, CLI flags)."""


class PreconditionError(RelayOptimizerError):
    """An operation was invoked without what it needs, before any I/O.

    Raised for a missing signer (no authenticated subject), an empty
    subject public key, or an empty publication request.
    """


# ---------------------------------------------------------------------------
# Connectivity
# ---------------------------------------------------------------------------


class ConnectivityError(RelayOptimizerError):
    """Base for relay/network connectivity errors."""


class RelayTimeoutError(ConnectivityError):
    """Connection or response timed out."""


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class ProtocolError(RelayOptimizerError):
    """Malformed event, tag, or NIP document."""


# ---------------------------------------------------------------------------
# Publishing
# ---------------------------------------------------------------------------


class PublishingError(RelayOptimizerError):
    """Failed to broadcast a Nostr event to relays."""


class AllRelaysRejectedError(PublishingError):
    """Every target relay rejected or failed to receive the event.

    Attributes:
        failures: ``relay url -> reason`` for each relay that failed.
    """

    def __init__(self, failures: dict[str, str] | None = None) -> None:
        self.failures = dict(failures or {})
        detail = "; ".join(f"{url}: {reason}" for url, reason in self.failures.items())
        super().__init__(f"All relays rejected the event ({detail or 'no relays'})")


__all__ = [
    "AllRelaysRejectedError",
    "ConfigurationError",
    "ConnectivityError",
    "PreconditionError",
    "ProtocolError",
    "PublishingError",
    "RelayOptimizerError",
    "RelayTimeoutError",
]
