"""
Unit tests for the command-line entry point.

Tests:
- Argument parsing
- Command dispatch with patched I/O
- Error exit codes and metrics output
"""

import json
import os
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from relayoptimizer.__main__ import main, parse_args
from relayoptimizer.models.constants import EventKind
from relayoptimizer.nips.nip11 import Nip11Logs, Nip11Metadata
from tests.conftest import SUBJECT, FakeTransport


@pytest.fixture(autouse=True)
def _no_logging_setup():
    """Keep the test logging configuration."""
    with patch("relayoptimizer.__main__.configure_logging"):
        yield


@pytest.fixture
def missing_config(tmp_path: Path) -> list[str]:
    """Global arguments pointing at a config file that does not exist."""
    return ["--config", str(tmp_path / "absent.yaml")]


# =============================================================================
# Argument Parsing Tests
# =============================================================================


class TestParseArgs:
    """Tests for parse_args()."""

    def test_probe(self) -> None:
        """probe takes one or more URLs."""
        args = parse_args(["probe", "wss://a.com", "wss://b.com"])
        assert args.command == "probe"
        assert args.urls == ["wss://a.com", "wss://b.com"]
        assert args.log_level == "WARNING"

    def test_review_requires_stars(self) -> None:
        """review without --stars is an error."""
        with pytest.raises(SystemExit):
            parse_args(["review", "wss://a.com"])

    def test_command_required(self) -> None:
        """A command is mandatory."""
        with pytest.raises(SystemExit):
            parse_args([])


# =============================================================================
# Command Tests
# =============================================================================


class TestCommands:
    """Tests for main() command dispatch."""

    async def test_top(self, missing_config: list[str], capsys: pytest.CaptureFixture) -> None:
        """top prints the directory relays as JSON."""
        with patch(
            "relayoptimizer.services.directory.service.fetch_json",
            new=AsyncMock(return_value=["wss://a.com", "wss://b.com/"]),
        ):
            code = await main([*missing_config, "top", "--limit", "5"])
        assert code == 0
        assert json.loads(capsys.readouterr().out) == ["wss://a.com", "wss://b.com"]

    async def test_probe(self, missing_config: list[str], capsys: pytest.CaptureFixture) -> None:
        """probe prints statuses sorted by latency."""

        async def _execute(url: str, **kwargs: object) -> Nip11Metadata:
            rtt = 250 if "slow" in url else 20
            return Nip11Metadata(logs=Nip11Logs(success=True, status=200), rtt_ms=rtt)

        with patch(
            "relayoptimizer.services.prober.service.Nip11Metadata.execute",
            new=AsyncMock(side_effect=_execute),
        ):
            code = await main([*missing_config, "probe", "wss://slow.com", "wss://fast.com"])
        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert [s["identity"] for s in output] == ["wss://fast.com", "wss://slow.com"]
        assert [s["state"] for s in output] == ["good", "ok"]

    async def test_suggest(
        self, missing_config: list[str], capsys: pytest.CaptureFixture, make_event
    ) -> None:
        """suggest prints ranked suggestions."""
        fake = FakeTransport()
        fake.events = [
            make_event(EventKind.CONTACTS, tags=[["p", "b" * 64]]),
            make_event(EventKind.RELAY_LIST, pubkey="b" * 64, tags=[["r", "wss://x.com"]]),
        ]
        with patch("relayoptimizer.__main__._transport", return_value=fake):
            code = await main([*missing_config, "suggest", SUBJECT])
        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["contact_total"] == 1
        assert output["suggestions"][0]["identity"] == "wss://x.com"

    async def test_config_sections(
        self, tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        """Service sections of the YAML config are applied."""
        config = tmp_path / "config.yaml"
        config.write_text("directory:\n  jmespath: 'data[*].url'\n", encoding="utf-8")
        data = {"data": [{"url": "wss://a.com"}]}
        with patch(
            "relayoptimizer.services.directory.service.fetch_json",
            new=AsyncMock(return_value=data),
        ):
            code = await main(["--config", str(config), "top"])
        assert code == 0
        assert json.loads(capsys.readouterr().out) == ["wss://a.com"]


# =============================================================================
# Error Handling Tests
# =============================================================================


class TestErrors:
    """Tests for error exit codes."""

    async def test_invalid_config(self, tmp_path: Path) -> None:
        """Invalid service configuration exits with 1."""
        config = tmp_path / "config.yaml"
        config.write_text("prober:\n  timeout: -1\n", encoding="utf-8")
        assert await main(["--config", str(config), "probe", "wss://a.com"]) == 1

    async def test_publish_without_key(self, missing_config: list[str]) -> None:
        """publish without a private key exits with 1."""
        with patch.dict(os.environ, {}, clear=True):
            assert await main([*missing_config, "publish"]) == 1

    async def test_empty_subject(self, missing_config: list[str]) -> None:
        """A blank subject exits with 1."""
        with patch("relayoptimizer.__main__._transport", return_value=FakeTransport()):
            assert await main([*missing_config, "suggest", " "]) == 1

    async def test_print_metrics(
        self, missing_config: list[str], capsys: pytest.CaptureFixture
    ) -> None:
        """--print-metrics writes the exposition to stderr."""
        with patch(
            "relayoptimizer.services.directory.service.fetch_json",
            new=AsyncMock(return_value=[]),
        ):
            code = await main([*missing_config, "--print-metrics", "top"])
        assert code == 0
        assert "relayoptimizer_" in capsys.readouterr().err
