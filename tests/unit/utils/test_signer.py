"""Unit tests for utils.signer module."""

import pytest


nostr_sdk = pytest.importorskip("nostr_sdk")

from relayoptimizer.utils.signer import KeysSigner, Signer  # noqa: E402


VALID_HEX_KEY = (
    "67dea2ed018072d675f5415ecfaed7d2597555e202d85b3d65ea4e58d2d92ffa"  # pragma: allowlist secret
)


@pytest.fixture
def keys_signer() -> KeysSigner:
    """Create a signer with the test key."""
    return KeysSigner(nostr_sdk.Keys.parse(VALID_HEX_KEY))


class TestKeysSigner:
    """Tests for KeysSigner."""

    def test_protocol(self, keys_signer: KeysSigner) -> None:
        """KeysSigner satisfies the Signer protocol."""
        assert isinstance(keys_signer, Signer)

    def test_public_key(self, keys_signer: KeysSigner) -> None:
        """The public key is the hex key derived from the secret."""
        expected = nostr_sdk.Keys.parse(VALID_HEX_KEY).public_key().to_hex()
        assert keys_signer.public_key == expected
        assert len(keys_signer.public_key) == 64

    async def test_sign(self, keys_signer: KeysSigner) -> None:
        """Signed events keep the requested fields and carry a signature."""
        event = await keys_signer.sign(
            10_002, "", [["r", "wss://a.com", "read"], ["client", "test"]], 1_700_000_000
        )
        assert event.kind == 10_002
        assert event.pubkey == keys_signer.public_key
        assert event.created_at == 1_700_000_000
        assert event.tags == (("r", "wss://a.com", "read"), ("client", "test"))
        assert len(event.id) == 64
        assert len(event.sig) == 128

    async def test_distinct_content_distinct_ids(self, keys_signer: KeysSigner) -> None:
        """Different content yields different ids."""
        first = await keys_signer.sign(1986, "good", [], 1_700_000_000)
        second = await keys_signer.sign(1986, "bad", [], 1_700_000_000)
        assert first.id != second.id
