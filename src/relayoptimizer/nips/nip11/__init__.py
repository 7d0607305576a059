"""NIP-11 relay information documents.

See Also:
    [Nip11Metadata.execute()][relayoptimizer.nips.nip11.info.Nip11Metadata.execute]:
        Fetch a relay's document over HTTP(S).
    [Nip11Data][relayoptimizer.nips.nip11.data.Nip11Data]: Leniently parsed
        document model.
"""

from .data import Nip11Data, Nip11FeeEntry, Nip11Fees, Nip11Limitation
from .info import DEFAULT_TIMEOUT, NOSTR_JSON, Nip11Metadata
from .logs import Nip11Logs


__all__ = [
    "DEFAULT_TIMEOUT",
    "NOSTR_JSON",
    "Nip11Data",
    "Nip11FeeEntry",
    "Nip11Fees",
    "Nip11Limitation",
    "Nip11Logs",
    "Nip11Metadata",
]
