"""
NIP-11 fetch operation log model.

Records whether the HTTP request for a relay information document got a
successful response, with the HTTP status when one was received and an
error reason otherwise.
"""

from __future__ import annotations

from pydantic import StrictInt

from relayoptimizer.nips.base import BaseLogs


class Nip11Logs(BaseLogs):
    """Log record for a NIP-11 document fetch.

    ``success`` reflects the HTTP exchange only: a 2xx response whose body
    is not a valid document is still a success (the data is simply absent).

    Attributes:
        status: HTTP status code, or ``None`` when no response arrived
            (timeout, DNS, TLS, or connection failure).

    Note:
        Common failure reasons are non-2xx statuses (``HTTP 503``),
        timeouts, refused connections, and certificate errors.
    """

    status: StrictInt | None = None


__all__ = ["Nip11Logs"]
