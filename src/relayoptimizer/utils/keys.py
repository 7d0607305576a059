"""Nostr key loading for signing relay lists and reviews.

Loads the subject's private key from an environment variable. Both nsec1
(bech32) and 64-character hex keys are accepted.

Warning:
    Private keys must **never** be stored in configuration files, source
    code, or logs. Always pass them through the environment.

See Also:
    [KeysSigner][relayoptimizer.utils.signer.KeysSigner]: Signs events with
        the loaded keys.
    [Publisher][relayoptimizer.services.publisher.Publisher]: Requires a
        signer to publish relay lists.

Examples:
    ```python
    import os

    os.environ["PRIVATE_KEY"] = "nsec1..."  # pragma: allowlist secret
    keys = load_keys_from_env("PRIVATE_KEY")
    print(keys.public_key().to_hex())
    ```
"""

from __future__ import annotations

import os
from typing import Any

from nostr_sdk import Keys
from pydantic import BaseModel, Field, model_validator


ENV_PRIVATE_KEY = "PRIVATE_KEY"  # pragma: allowlist secret


def load_keys_from_env(env_var: str = ENV_PRIVATE_KEY) -> Keys:
    """Load Nostr keys from an environment variable.

    Args:
        env_var: Name of the environment variable holding the private key.

    Returns:
        A ``nostr_sdk.Keys`` instance with the private and derived public key.

    Raises:
        ValueError: If the variable is unset or empty.
        nostr_sdk.NostrError: If the value is not a valid key.
    """
    value = os.getenv(env_var)
    if not value:
        raise ValueError(f"{env_var} environment variable is required to sign events")
    return Keys.parse(value.strip())


class KeysConfig(BaseModel):
    """Pydantic model that loads the signing keys from the environment.

    Attributes:
        keys_env: Environment variable name for the private key.
        keys: Loaded ``nostr_sdk.Keys`` instance.

    Warning:
        ``keys`` holds a live private key. Do not serialize this model.
    """

    model_config = {"arbitrary_types_allowed": True}

    keys_env: str = Field(
        default=ENV_PRIVATE_KEY,
        min_length=1,
        description="Environment variable name for private key",
    )
    keys: Keys = Field(description="Keys loaded from keys_env (required)")

    @model_validator(mode="before")
    @classmethod
    def _load_keys_from_env(cls, data: Any) -> Any:
        """Populate ``keys`` from the environment variable when absent."""
        if isinstance(data, dict) and "keys" not in data:
            data = dict(data)
            data["keys"] = load_keys_from_env(data.get("keys_env", ENV_PRIVATE_KEY))
        return data


__all__ = ["ENV_PRIVATE_KEY", "KeysConfig", "load_keys_from_env"]
