"""HTTP helpers, Nostr key loading, signing, and relay transport.

The utils layer sits in the middle of the diamond DAG, depending on
[relayoptimizer.models][relayoptimizer.models] (and, for the publishing
errors only, [relayoptimizer.core.exceptions][]). It provides the
low-level network and cryptographic building blocks used by
[relayoptimizer.nips][relayoptimizer.nips] and
[relayoptimizer.services][relayoptimizer.services].

Attributes:
    http: Bounded JSON reads over ``aiohttp``.
    keys: Private key loading from environment variables (nsec1 or hex).
    signer: The [Signer][relayoptimizer.utils.signer.Signer] protocol and its
        local-key implementation.
    transport: The [Transport][relayoptimizer.utils.transport.Transport]
        protocol and its ``nostr_sdk`` implementation.

Note:
    ``keys``, ``signer`` and ``transport`` require the ``nostr`` extra
    (``pip install relayoptimizer[nostr]``). Services only reference the
    protocols, so the rest of the package imports without it.

Examples:
    ```python
    from relayoptimizer.utils.keys import KeysConfig
    from relayoptimizer.utils.transport import NostrTransport
    ```
"""
