"""Unit tests for services.publisher.utils module."""

import pytest

from relayoptimizer.core.exceptions import (
    AllRelaysRejectedError,
    ConnectivityError,
    PublishingError,
    RelayTimeoutError,
)
from relayoptimizer.services.publisher.utils import (
    ALL_REJECTED_MESSAGE,
    format_publish_error,
    with_client_tag,
)


# =============================================================================
# format_publish_error() Tests
# =============================================================================


class TestFormatPublishError:
    """Tests for format_publish_error()."""

    def test_all_rejected(self) -> None:
        """Rejection by every relay has a fixed message."""
        error = AllRelaysRejectedError({"wss://a.com": "blocked"})
        assert format_publish_error(error) == ALL_REJECTED_MESSAGE

    @pytest.mark.parametrize(
        "message",
        ["AggregateError: no promise in promise.any was resolved", "All promises were rejected"],
    )
    def test_pool_markers(self, message: str) -> None:
        """Known pool messages map to the rejection message."""
        assert format_publish_error(PublishingError(message)) == ALL_REJECTED_MESSAGE

    def test_timeout_with_duration(self) -> None:
        """Timeouts report the configured duration."""
        assert format_publish_error(TimeoutError(), timeout=10.0) == "Timed out after 10s"
        assert format_publish_error(RelayTimeoutError("x"), timeout=2.5) == "Timed out after 2.5s"

    def test_timeout_without_duration(self) -> None:
        """Without a duration the original message or a default is used."""
        assert format_publish_error(TimeoutError()) == "Timed out"
        assert format_publish_error(RelayTimeoutError("slow relay")) == "slow relay"

    def test_other_errors(self) -> None:
        """Other errors use their message, or their type name when empty."""
        assert format_publish_error(ConnectivityError("refused")) == "refused"
        assert format_publish_error(ValueError()) == "ValueError"


# =============================================================================
# with_client_tag() Tests
# =============================================================================


class TestWithClientTag:
    """Tests for with_client_tag()."""

    def test_appends(self) -> None:
        """The client tag goes last."""
        tags = with_client_tag([("r", "wss://a.com")], "relay-optimizer")
        assert tags == [["r", "wss://a.com"], ["client", "relay-optimizer"]]

    def test_replaces_existing(self) -> None:
        """Existing client tags are dropped."""
        tags = with_client_tag([["client", "other"], ["p", "b" * 64]], "relay-optimizer")
        assert tags == [["p", "b" * 64], ["client", "relay-optimizer"]]

    def test_no_client(self) -> None:
        """Without a name the client tags are only stripped."""
        assert with_client_tag([["client", "other"], ["relay", "wss://a.com"]], None) == [
            ["relay", "wss://a.com"]
        ]
