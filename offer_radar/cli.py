import argparse
import sys
from typing import List, Optional

from loguru import logger

from offer_radar.config import Settings, get_settings
from offer_radar.extractors.offer import OfferExtractor
from offer_radar.pipeline import build_pipeline
from offer_radar.registry import SubscriberRegistry
from offer_radar.stores.github import GitHubClient, GitHubIssueSource


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def run_check(settings: Settings, dry_run: bool = False) -> int:
    """執行完整的優惠檢查與推播流程"""
    logger.info("Starting offer check")
    client = GitHubClient(settings)
    try:
        report = build_pipeline(settings, client, dry_run=dry_run).run()
    finally:
        client.close()
    logger.info(f"Completed successfully ({report.outcome.value})")
    return 0


def run_extract(settings: Settings) -> int:
    """只擷取目前的優惠並輸出"""
    offer = OfferExtractor(settings).fetch_current_offer()
    print(f"title: {offer.title or '-'}")
    print(f"link:  {offer.link or '-'}")
    print(f"valid: {offer.is_valid}")
    return 0


def run_targets(settings: Settings) -> int:
    """輸出目前已註冊的裝置數量"""
    client = GitHubClient(settings)
    try:
        registry = SubscriberRegistry(
            GitHubIssueSource(client),
            label=settings.registry_label,
            state=settings.registry_state,
        )
        targets = registry.list_targets()
    finally:
        client.close()
    print(f"{len(targets)} registered devices")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Watch a promotional offer and push new offers to registered devices"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    check_parser = subparsers.add_parser(
        "check", help="Detect a new offer and notify devices (default)"
    )
    check_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Detect only; do not send notifications or save state",
    )

    subparsers.add_parser("extract", help="Print the offer currently on the page")
    subparsers.add_parser("targets", help="Print the number of registered devices")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
        configure_logging(settings.log_level)

        if args.command == "extract":
            return run_extract(settings)
        if args.command == "targets":
            return run_targets(settings)
        return run_check(settings, dry_run=getattr(args, "dry_run", False))
    except Exception:
        logger.exception("Fatal error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
