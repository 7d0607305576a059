"""CLI entry point for relayoptimizer services.

Runs one service operation and prints its result as JSON on stdout. Logs
go to stderr through the structured formatter.

Examples:
    ```bash
    python -m relayoptimizer probe wss://relay.damus.io wss://nos.lol
    python -m relayoptimizer suggest <hex-pubkey> --current wss://nos.lol --limit 20
    python -m relayoptimizer lists <hex-pubkey>
    PRIVATE_KEY=nsec1... python -m relayoptimizer publish --lists lists.json --rebroadcast
    python -m relayoptimizer reviews wss://relay.damus.io
    PRIVATE_KEY=nsec1... python -m relayoptimizer review wss://nos.lol --stars 5 --content "fast"
    python -m relayoptimizer top --limit 10
    ```
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from relayoptimizer.core.exceptions import RelayOptimizerError
from relayoptimizer.core.logger import Logger, configure_logging
from relayoptimizer.core.metrics import exposition
from relayoptimizer.core.yaml import load_yaml
from relayoptimizer.models.constants import ServiceName
from relayoptimizer.models.relay_lists import PublicationOutcome, RelayLists
from relayoptimizer.models.relay_url import canonicalize
from relayoptimizer.models.review import ReviewSummary
from relayoptimizer.models.status import RelayStatus, sort_by_latency
from relayoptimizer.models.suggestion import AggregationResult
from relayoptimizer.services.aggregator import Aggregator
from relayoptimizer.services.common.configs import TransportConfig
from relayoptimizer.services.directory import Directory
from relayoptimizer.services.prober import Prober
from relayoptimizer.services.publisher import IdentityEvents, Publisher
from relayoptimizer.services.reviewer import Reviewer


if TYPE_CHECKING:
    from relayoptimizer.utils.signer import KeysSigner
    from relayoptimizer.utils.transport import NostrTransport


DEFAULT_CONFIG = Path("config") / "relayoptimizer.yaml"
SERVICE_SECTIONS = tuple(str(name) for name in ServiceName)

logger = Logger("cli")


# =============================================================================
# Serialization
# =============================================================================


def status_to_dict(status: RelayStatus) -> dict[str, Any]:
    return {
        "identity": status.identity,
        "display_url": status.display_url,
        "state": str(status.state),
        "latency_ms": status.latency_ms,
        "description": status.description,
        "name": status.info.get("name") if status.info else None,
        "tested_at": status.tested_at,
    }


def aggregation_to_dict(result: AggregationResult, limit: int | None = None) -> dict[str, Any]:
    suggestions = result.suggestions[:limit] if limit else result.suggestions
    return {
        "contact_total": result.contact_total,
        "analyzed_total": result.analyzed_total,
        "suggestions": [
            {
                "identity": s.identity,
                "contact_count": s.contact_count,
                "provenance": str(s.provenance),
                "already_configured": s.already_configured,
                "contacts": [c.display_name or c.pubkey for c in s.contacts],
            }
            for s in suggestions
        ],
    }


def outcome_to_dict(outcome: PublicationOutcome) -> dict[str, Any]:
    return {
        "ok": outcome.ok,
        "results": {str(k): v for k, v in outcome.results.items()},
        "broadcasts": {str(k): v for k, v in outcome.broadcasts.items()},
        "errors": [message for _, message in outcome.errors],
        "summary": outcome.summary(),
    }


def summary_to_dict(summary: ReviewSummary) -> dict[str, Any]:
    return {
        "count": summary.count,
        "average_rating": summary.average_rating,
        "average_stars": summary.average_stars,
        "reviews": [
            {
                "pubkey": r.pubkey,
                "stars": r.stars,
                "content": r.content,
                "created_at": r.created_at,
            }
            for r in summary.reviews
        ],
    }


# =============================================================================
# Commands
# =============================================================================


def _signer() -> KeysSigner:
    from relayoptimizer.utils.keys import KeysConfig  # noqa: PLC0415
    from relayoptimizer.utils.signer import KeysSigner  # noqa: PLC0415

    return KeysSigner(KeysConfig().keys)


def _transport(config: dict[str, Any]) -> NostrTransport:
    return TransportConfig(**config.get("transport", {})).build()


async def run_command(args: argparse.Namespace, config: dict[str, Any]) -> Any:
    """Run the selected command and return its JSON-serializable result."""
    command = args.command

    if command == "probe":
        prober = Prober.from_dict(config.get("prober", {}))
        statuses = await prober.probe_many(args.urls)
        return [status_to_dict(s) for s in sort_by_latency(statuses.values())]

    if command == "suggest":
        aggregator = Aggregator.from_dict(
            config.get("aggregator", {}), transport=_transport(config)
        )
        result = await aggregator.aggregate(args.pubkey, args.current)
        return aggregation_to_dict(result, args.limit)

    if command == "lists":
        publisher = Publisher.from_dict(config.get("publisher", {}), transport=_transport(config))
        return (await publisher.fetch_lists(args.pubkey)).to_dict()

    if command == "publish":
        signer = _signer()
        publisher = Publisher.from_dict(
            config.get("publisher", {}), transport=_transport(config), signer=signer
        )
        if args.lists:
            lists = RelayLists.from_mapping(json.loads(args.lists.read_text()))
        else:
            lists = await publisher.fetch_lists(signer.public_key)
        identity: IdentityEvents | None = None
        if args.rebroadcast:
            identity = await publisher.fetch_identity(signer.public_key)
        outcome = await publisher.publish(
            lists, secure_origin=not args.no_client_tag, identity=identity
        )
        return outcome_to_dict(outcome)

    if command == "reviews":
        reviewer = Reviewer.from_dict(config.get("reviewer", {}), transport=_transport(config))
        summaries = await reviewer.fetch_reviews(args.urls)
        return {identity: summary_to_dict(s) for identity, s in summaries.items()}

    if command == "review":
        reviewer = Reviewer.from_dict(
            config.get("reviewer", {}), transport=_transport(config), signer=_signer()
        )
        ok = await reviewer.submit_review(args.url, args.stars, args.content)
        return {"relay": canonicalize(args.url), "published": ok}

    if command == "top":
        directory = Directory.from_dict(config.get("directory", {}))
        return await directory.top_relays(args.limit)

    raise ValueError(f"unknown command: {command}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="relayoptimizer",
        description="Nostr relay intelligence engine",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Config path (default: {DEFAULT_CONFIG})",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--print-metrics",
        action="store_true",
        help="Print Prometheus metrics to stderr after the command",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    probe = sub.add_parser("probe", help="Probe relay health")
    probe.add_argument("urls", nargs="+", help="Relay URLs")

    suggest = sub.add_parser("suggest", help="Suggest relays from the social graph")
    suggest.add_argument("pubkey", help="Subject hex public key")
    suggest.add_argument("--current", nargs="*", default=[], help="Relays already in use")
    suggest.add_argument("--limit", type=int, default=None, help="Maximum suggestions shown")

    lists = sub.add_parser("lists", help="Show the published relay lists of a user")
    lists.add_argument("pubkey", help="Hex public key")

    publish = sub.add_parser("publish", help="Publish relay lists (keys from PRIVATE_KEY)")
    publish.add_argument("--lists", type=Path, help="JSON file mapping category to relay URLs")
    publish.add_argument(
        "--rebroadcast", action="store_true", help="Also re-broadcast profile and contact list"
    )
    publish.add_argument("--no-client-tag", action="store_true", help="Omit the client tag")

    reviews = sub.add_parser("reviews", help="Show relay reviews")
    reviews.add_argument("urls", nargs="+", help="Relay URLs")

    review = sub.add_parser("review", help="Submit a relay review (keys from PRIVATE_KEY)")
    review.add_argument("url", help="Relay URL")
    review.add_argument("--stars", type=int, required=True, help="Rating from 1 to 5")
    review.add_argument("--content", default="", help="Review text")

    top = sub.add_parser("top", help="Popular relays from the directory")
    top.add_argument("--limit", type=int, default=None, help="Number of relays")

    return parser.parse_args(argv)


def _load_config(path: Path) -> dict[str, Any]:
    """Load the YAML config, returning ``{}`` if the file does not exist."""
    if not path.exists():
        logger.debug("config_not_found", path=str(path))
        return {}
    return load_yaml(path)


async def main(argv: list[str] | None = None) -> int:
    """Main entry point: parse args, run the command, print JSON."""
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = _load_config(args.config)
        if args.print_metrics:
            for section in SERVICE_SECTIONS:
                config.setdefault(section, {}).setdefault("metrics", {})["enabled"] = True
        result = await run_command(args, config)
    except (RelayOptimizerError, ValueError, OSError, ImportError) as e:
        logger.error(f"{args.command}_failed", error=str(e), error_type=type(e).__name__)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))  # noqa: T201
    if args.print_metrics:
        sys.stderr.write(exposition().decode())
    return 0


def cli() -> int:
    return asyncio.run(main())


if __name__ == "__main__":
    sys.exit(cli())
